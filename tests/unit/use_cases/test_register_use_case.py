import pytest

from realty_auth.app.use_cases.auth import RegisterCommand, RegisterUseCase


def make_command(**overrides):
    fields = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@x.com",
        "phone": "5551234567",
        "password": "P@ssw0rd1",
    }
    fields.update(overrides)
    return RegisterCommand(**fields)


@pytest.mark.asyncio
async def test_register_returns_unverified_user_and_token(mock_uow, token_codec, email_sender):
    use_case = RegisterUseCase(mock_uow, token_codec, email_sender)

    result = await use_case.execute(make_command())

    assert result.is_ok()
    response = result.value
    assert response.user.email == "jane@x.com"
    assert response.user.is_email_verified is False
    assert token_codec.verify(response.access_token)["userId"] == response.user.id
    mock_uow.commit.assert_awaited_once()

    email, token, first_name = email_sender.send_verification_email.await_args.args
    assert (email, first_name) == ("jane@x.com", "Jane")
    assert len(token) == 64


@pytest.mark.asyncio
async def test_duplicate_email(mock_uow, token_codec, email_sender, make_user):
    mock_uow.users.get_by_email.return_value = make_user(email="jane@x.com")

    result = await RegisterUseCase(mock_uow, token_codec, email_sender).execute(make_command())

    assert result.is_err()
    assert result.error.code == "DUPLICATE_EMAIL"
    mock_uow.commit.assert_not_awaited()
    email_sender.send_verification_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_weak_password_is_rejected(mock_uow, token_codec, email_sender):
    result = await RegisterUseCase(mock_uow, token_codec, email_sender).execute(
        make_command(password="password")
    )

    assert result.error.code == "INVALID_PASSWORD"
    mock_uow.users.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_name_is_rejected(mock_uow, token_codec, email_sender):
    result = await RegisterUseCase(mock_uow, token_codec, email_sender).execute(
        make_command(first_name="   ")
    )

    assert result.error.code == "MISSING_FIELDS"


@pytest.mark.asyncio
async def test_email_failure_does_not_fail_registration(mock_uow, token_codec, email_sender):
    email_sender.send_verification_email.return_value = False

    result = await RegisterUseCase(mock_uow, token_codec, email_sender).execute(make_command())

    assert result.is_ok()
