import pytest

from realty_auth.app.use_cases.auth import ResetPasswordUseCase


@pytest.mark.asyncio
async def test_successful_reset(mock_uow, token_codec, make_user):
    user = make_user()
    old_hash = user.password_hash
    mock_uow.users.get_by_id.return_value = user
    reset_token = token_codec.issue_reset_token(user.id, user.email)

    result = await ResetPasswordUseCase(mock_uow, token_codec).execute(reset_token, "N3w-Passw.rd")

    assert result.is_ok()
    assert user.password_hash != old_hash
    assert user.last_used_reset_token == reset_token
    assert user.reset_password_token is None
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_replayed_token_is_rejected(mock_uow, token_codec, make_user):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    reset_token = token_codec.issue_reset_token(user.id, user.email)
    use_case = ResetPasswordUseCase(mock_uow, token_codec)
    await use_case.execute(reset_token, "N3w-Passw.rd")

    result = await use_case.execute(reset_token, "An0ther.Pass!")

    assert result.error.code == "TOKEN_ALREADY_USED"


@pytest.mark.asyncio
async def test_access_token_is_wrong_type(mock_uow, token_codec, make_user):
    user = make_user()
    access_token = token_codec.issue_access_token(user.id, user.email)

    result = await ResetPasswordUseCase(mock_uow, token_codec).execute(access_token, "N3w-Passw.rd")

    assert result.error.code == "INVALID_TOKEN_TYPE"
    mock_uow.users.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_garbage_token(mock_uow, token_codec):
    result = await ResetPasswordUseCase(mock_uow, token_codec).execute("garbage", "N3w-Passw.rd")

    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.asyncio
async def test_missing_user(mock_uow, token_codec, make_user):
    user = make_user()
    reset_token = token_codec.issue_reset_token(user.id, user.email)

    result = await ResetPasswordUseCase(mock_uow, token_codec).execute(reset_token, "N3w-Passw.rd")

    assert result.error.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_weak_new_password(mock_uow, token_codec, make_user):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    reset_token = token_codec.issue_reset_token(user.id, user.email)

    result = await ResetPasswordUseCase(mock_uow, token_codec).execute(reset_token, "weak")

    assert result.error.code == "INVALID_PASSWORD"
    assert user.last_used_reset_token is None
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_replay_reports_used_token_before_password_strength(mock_uow, token_codec, make_user):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    reset_token = token_codec.issue_reset_token(user.id, user.email)
    use_case = ResetPasswordUseCase(mock_uow, token_codec)
    await use_case.execute(reset_token, "N3w-Passw.rd")

    result = await use_case.execute(reset_token, "weak")

    assert result.error.code == "TOKEN_ALREADY_USED"


@pytest.mark.asyncio
async def test_password_over_bcrypt_limit_is_rejected(mock_uow, token_codec, make_user):
    user = make_user()
    old_hash = user.password_hash
    mock_uow.users.get_by_id.return_value = user
    reset_token = token_codec.issue_reset_token(user.id, user.email)

    result = await ResetPasswordUseCase(mock_uow, token_codec).execute(reset_token, "Aa1!" + "xyz" * 25)

    assert result.error.code == "INVALID_PASSWORD"
    assert user.password_hash == old_hash
