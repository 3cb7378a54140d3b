from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, EmailStr
from typing import Any, Optional

from clinic_auth.modules.profiles.schemas import UserRole


class AuthEventName(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class AuthEvent:
    """One auth state change as delivered by the provider.

    `name` stays a plain string: providers emit events this package does not
    handle (INITIAL_SESSION, PASSWORD_RECOVERY, ...).
    """
    name: str
    session: Optional[Any] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    role: UserRole = UserRole.PATIENT


class PasswordResetRequest(BaseModel):
    email: EmailStr


class MessageResponse(BaseModel):
    message: str
