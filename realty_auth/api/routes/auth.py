from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import AliasChoices, EmailStr, Field

from realty_auth.libs.result import Error
from realty_auth.api.error import ClientError, ServerError
from realty_auth.api.response import ApiResponse
from realty_auth.api.utils.csrf import CsrfGuard
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.app.use_cases.auth import (
    AuthResponse,
    CamelModel,
    CheckEmailResponse,
    CheckEmailUseCase,
    ClearExpiredTokensUseCase,
    ForgotPasswordUseCase,
    GoogleAuthResponse,
    GoogleLoginCommand,
    GoogleLoginUseCase,
    LoginUseCase,
    RegisterCommand,
    RegisterUseCase,
    ResendVerificationUseCase,
    ResetPasswordUseCase,
    TokenValidationResponse,
    ValidateTokenUseCase,
    VerifyEmailUseCase,
    UserResponse,
)
from realty_auth.depends import (
    get_csrf_guard,
    get_current_user,
    get_email_sender,
    get_token_codec,
    get_unit_of_work,
    rate_limit,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

VERIFY_EMAIL_MESSAGE = (
    "Please verify your email address before logging in. "
    "Check your inbox for the verification link."
)


def _verification_required(email: str) -> ClientError:
    return ClientError(
        Error("EMAIL_NOT_VERIFIED", VERIFY_EMAIL_MESSAGE),
        status_code=status.HTTP_403_FORBIDDEN,
        data={"requiresVerification": True, "email": email},
    )


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Names, email and phone arrive already sanitized by the gatekeeper.
    """

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    password: str = Field(..., min_length=1)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Register a local account.

    Returns an access token straight away; the account stays unverified until
    the emailed link is followed.

    Raises:
        - 400 Bad Request: Missing fields, weak password or duplicate email
    """
    command = RegisterCommand(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone=request.phone,
        password=request.password,
    )
    result = await RegisterUseCase(uow, token_codec, email_sender).execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("DUPLICATE_EMAIL", "INVALID_PASSWORD", "MISSING_FIELDS"):
            raise ClientError(error)
        raise ServerError(error)

    return ApiResponse(
        message="User registered successfully. Please check your email for verification.",
        data=result.value,
    )


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
):
    """
    Log in with email and password.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Email not verified (data.requiresVerification)
    """
    result = await LoginUseCase(uow, token_codec).execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    if not result.value.user.is_email_verified:
        raise _verification_required(result.value.user.email)

    return ApiResponse(message="Login successful", data=result.value)


class GoogleLoginRequest(CamelModel):
    google_id: str = Field(..., min_length=1)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


@router.post(
    "/google",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[GoogleAuthResponse],
    response_model_exclude_none=True,
)
async def google_login(
    request: GoogleLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
):
    """
    Sign in with a Google identity, linking or creating the account.

    Raises:
        - 403 Forbidden: Existing account whose email is still unverified
    """
    command = GoogleLoginCommand(
        google_id=request.google_id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    result = await GoogleLoginUseCase(uow, token_codec).execute(command)

    if result.is_err():
        error = result.error
        if error.code == "DUPLICATE_EMAIL":
            raise ClientError(error)
        raise ServerError(error)

    response = result.value
    if not response.is_new_user and not response.user.is_email_verified:
        raise _verification_required(response.user.email)

    message = "User registered successfully with Google" if response.is_new_user else "Login successful"
    return ApiResponse(message=message, data=response)


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def logout(current_user: dict = Depends(get_current_user)):
    """Access tokens are stateless; the client discards its copy"""
    return ApiResponse(message="Logged out successfully")


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Email a password reset link.

    The response is identical whether or not the email is registered.
    """
    result = await ForgotPasswordUseCase(uow, token_codec, email_sender).execute(request.email)

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(message=result.value.message)


class ResetPasswordRequest(CamelModel):
    reset_token: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("resetToken", "accessToken", "reset_token")
    )
    new_password: str = Field(..., min_length=1)


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
):
    """
    Set a new password using a reset token.

    Raises:
        - 400 Bad Request: Invalid, expired, wrong-type or already used token,
          unknown user or weak password
    """
    result = await ResetPasswordUseCase(uow, token_codec).execute(
        request.reset_token, request.new_password
    )

    if result.is_err():
        error = result.error
        if error.code in (
            "INVALID_OR_EXPIRED_TOKEN",
            "INVALID_TOKEN_TYPE",
            "TOKEN_ALREADY_USED",
            "USER_NOT_FOUND",
            "INVALID_PASSWORD",
        ):
            raise ClientError(error)
        raise ServerError(error)

    return ApiResponse(message=result.value.message)


@router.get(
    "/verify-email",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit("email_verification"))],
)
async def verify_email(
    token: str = Query(..., min_length=1),
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Verify an email address from the emailed link.

    Raises:
        - 400 Bad Request: Unknown, expired or already used token
    """
    result = await VerifyEmailUseCase(uow, email_sender).execute(token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_OR_EXPIRED_TOKEN":
            raise ClientError(error)
        raise ServerError(error)

    return ApiResponse(message=result.value.message, data=UserResponse(user=result.value.user))


class ResendVerificationRequest(CamelModel):
    email: EmailStr


@router.post(
    "/resend-verification",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit("email_verification"))],
)
async def resend_verification(
    request: ResendVerificationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Send a fresh verification link, invalidating the previous one.

    Raises:
        - 400 Bad Request: Unknown email or already verified
    """
    result = await ResendVerificationUseCase(uow, email_sender).execute(request.email)

    if result.is_err():
        error = result.error
        if error.code in ("USER_NOT_FOUND", "ALREADY_VERIFIED"):
            raise ClientError(error)
        raise ServerError(error)

    return ApiResponse(message=result.value.message)


@router.get(
    "/check-email",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[CheckEmailResponse],
    response_model_exclude_none=True,
)
async def check_email(
    email: str = Query(..., min_length=1),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CheckEmailUseCase(uow).execute(email)

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(data=result.value)


class ValidateTokenRequest(CamelModel):
    access_token: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("accessToken", "token", "access_token")
    )


@router.post(
    "/validate-token",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[TokenValidationResponse],
    response_model_exclude_none=True,
)
async def validate_token(
    request: ValidateTokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
):
    """
    Client-side token health check.

    success mirrors validity; data.tokenType tells access and reset tokens apart.
    """
    result = await ValidateTokenUseCase(uow, token_codec).execute(request.access_token)

    if result.is_err():
        raise ServerError(result.error)

    validation = result.value
    return ApiResponse(
        success=validation.is_valid,
        message="Token is valid" if validation.is_valid else "Invalid or expired token",
        data=validation,
    )


class ClearedTokensData(CamelModel):
    cleared: int


@router.post(
    "/clear-expired-tokens",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[ClearedTokensData],
    response_model_exclude_none=True,
)
async def clear_expired_tokens(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Maintenance: unset verification and reset fields whose expiry passed"""
    result = await ClearExpiredTokensUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(
        message=result.value.message, data=ClearedTokensData(cleared=result.value.cleared)
    )


class CsrfTokenData(CamelModel):
    token: str
    expires: int  # epoch milliseconds


@router.get(
    "/csrf-token",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[CsrfTokenData],
    response_model_exclude_none=True,
)
async def csrf_token(csrf_guard: CsrfGuard = Depends(get_csrf_guard)):
    """Issue a single-use token for the X-CSRF-Token header"""
    issued = await csrf_guard.issue_token()
    return ApiResponse(data=CsrfTokenData(token=issued.token, expires=int(issued.expires * 1000)))
