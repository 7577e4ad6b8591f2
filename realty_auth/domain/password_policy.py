"""
Password Policy

Strength rules applied to new passwords on registration and reset.
Login only checks the password against the stored hash.
"""

import re
from dataclasses import dataclass, field
from typing import List

MIN_LENGTH = 8
MAX_LENGTH = 128
# bcrypt refuses longer input
MAX_BYTES = 72

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
REPEATED_CHARACTERS = re.compile(r"(.)\1{2,}")

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "123456",
        "123456789",
        "qwerty",
        "abc123",
        "password123",
        "admin",
        "letmein",
        "welcome",
        "monkey",
    }
)

KEYBOARD_SEQUENCES = ("qwerty", "asdfgh", "zxcvbn", "123456")


@dataclass
class PasswordCheck:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def check_password(password: str) -> PasswordCheck:
    result = PasswordCheck()

    if len(password) < MIN_LENGTH:
        result.errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    if len(password) > MAX_LENGTH:
        result.errors.append(f"Password cannot exceed {MAX_LENGTH} characters")
    elif len(password.encode("utf-8")) > MAX_BYTES:
        result.errors.append(f"Password cannot exceed {MAX_BYTES} bytes")
    if not re.search(r"[a-z]", password):
        result.errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        result.errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"\d", password):
        result.errors.append("Password must contain at least one number")
    if not SPECIAL_CHARACTERS.search(password):
        result.errors.append("Password must contain at least one special character")

    lowered = password.lower()
    if lowered in COMMON_PASSWORDS:
        result.errors.append("Password is too common. Please choose a more unique password")
    if REPEATED_CHARACTERS.search(password):
        result.errors.append("Password cannot contain repeated characters (e.g., aaa, 111)")
    if any(sequence in lowered for sequence in KEYBOARD_SEQUENCES):
        result.errors.append("Password cannot contain keyboard sequences")

    return result
