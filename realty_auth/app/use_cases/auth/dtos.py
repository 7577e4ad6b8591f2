"""
Authentication Use Case DTOs (Data Transfer Objects)

Commands going into the auth use cases and the responses coming out.
Fields are snake_case in Python and camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from realty_auth.domain.entities import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(CamelModel):
    """Validated registration intent"""

    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    password: str


class GoogleLoginCommand(CamelModel):
    """Identity asserted by the Google sign-in flow"""

    google_id: str
    email: str
    first_name: str
    last_name: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(CamelModel):
    """Public view of a user; never carries hashes or tokens"""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    is_email_verified: bool
    google_id: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone or "",
            is_email_verified=user.is_email_verified,
            google_id=user.google_id,
        )


class AuthResponse(CamelModel):
    """Response for register and login"""

    user: UserInfo
    access_token: str


class GoogleAuthResponse(AuthResponse):
    is_new_user: bool


class UserResponse(CamelModel):
    user: UserInfo


class MessageResponse(CamelModel):
    message: str


class VerifyEmailResponse(CamelModel):
    user: UserInfo
    message: str


class TokenValidationResponse(CamelModel):
    is_valid: bool
    token_type: Optional[str] = None


class CheckEmailResponse(CamelModel):
    exists: bool


class ClearExpiredTokensResponse(CamelModel):
    cleared: int
    message: str
