"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .google_login_use_case import GoogleLoginUseCase
from .forgot_password_use_case import FORGOT_PASSWORD_MESSAGE, ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .check_email_use_case import CheckEmailUseCase
from .clear_expired_tokens_use_case import ClearExpiredTokensUseCase
from .dtos import (
    AuthResponse,
    CamelModel,
    CheckEmailResponse,
    ClearExpiredTokensResponse,
    GoogleAuthResponse,
    GoogleLoginCommand,
    MessageResponse,
    RegisterCommand,
    TokenValidationResponse,
    UserInfo,
    UserResponse,
    VerifyEmailResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "GoogleLoginUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "ValidateTokenUseCase",
    "CheckEmailUseCase",
    "ClearExpiredTokensUseCase",
    "FORGOT_PASSWORD_MESSAGE",
    # DTOs - Commands
    "RegisterCommand",
    "GoogleLoginCommand",
    # DTOs - Responses
    "AuthResponse",
    "GoogleAuthResponse",
    "UserResponse",
    "MessageResponse",
    "VerifyEmailResponse",
    "TokenValidationResponse",
    "CheckEmailResponse",
    "ClearExpiredTokensResponse",
    # DTOs - Nested Models
    "CamelModel",
    "UserInfo",
]
