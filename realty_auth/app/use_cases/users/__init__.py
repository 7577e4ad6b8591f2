"""
User Use Cases

Operations on the authenticated caller's own account.
"""

from .get_current_user_use_case import GetCurrentUserUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .dtos import UpdateProfileCommand

__all__ = [
    "GetCurrentUserUseCase",
    "UpdateProfileUseCase",
    "UpdateProfileCommand",
]
