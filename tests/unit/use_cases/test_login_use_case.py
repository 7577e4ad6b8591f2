import pytest

from realty_auth.app.use_cases.auth import LoginUseCase


@pytest.mark.asyncio
async def test_successful_login(mock_uow, token_codec, make_user):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow, token_codec).execute("Jane@Acme.com", "P@ssw0rd1")

    assert result.is_ok()
    assert result.value.user.id == str(user.id)
    claims = token_codec.verify(result.value.access_token)
    assert claims["email"] == "jane@acme.com"
    mock_uow.users.get_by_email.assert_awaited_once_with("jane@acme.com")


@pytest.mark.asyncio
async def test_unverified_user_still_gets_token(mock_uow, token_codec, make_user):
    mock_uow.users.get_by_email.return_value = make_user(is_email_verified=False)

    result = await LoginUseCase(mock_uow, token_codec).execute("jane@acme.com", "P@ssw0rd1")

    assert result.is_ok()
    assert result.value.user.is_email_verified is False


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_look_the_same(mock_uow, token_codec, make_user):
    use_case = LoginUseCase(mock_uow, token_codec)

    unknown = await use_case.execute("ghost@acme.com", "P@ssw0rd1")
    mock_uow.users.get_by_email.return_value = make_user()
    wrong = await use_case.execute("jane@acme.com", "Wr0ng-pass")

    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
