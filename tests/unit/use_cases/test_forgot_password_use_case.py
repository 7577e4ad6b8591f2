from datetime import datetime, timedelta

import pytest

from realty_auth.app.services.credential_store import hash_token
from realty_auth.app.use_cases.auth import FORGOT_PASSWORD_MESSAGE, ForgotPasswordUseCase


@pytest.mark.asyncio
async def test_known_email_gets_reset_token(mock_uow, token_codec, email_sender, make_user):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user

    result = await ForgotPasswordUseCase(mock_uow, token_codec, email_sender).execute("jane@acme.com")

    assert result.value.message == FORGOT_PASSWORD_MESSAGE
    email, reset_token, _ = email_sender.send_password_reset_email.await_args.args
    assert email == "jane@acme.com"
    assert token_codec.verify(reset_token)["type"] == "reset"
    assert user.reset_password_token == hash_token(reset_token)
    assert user.reset_password_expires_at <= datetime.utcnow() + timedelta(minutes=15)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_unknown_email_gets_the_same_message(mock_uow, token_codec, email_sender):
    result = await ForgotPasswordUseCase(mock_uow, token_codec, email_sender).execute("ghost@acme.com")

    assert result.value.message == FORGOT_PASSWORD_MESSAGE
    email_sender.send_password_reset_email.assert_not_awaited()
    mock_uow.commit.assert_not_awaited()
