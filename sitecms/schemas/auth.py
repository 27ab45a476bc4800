"""Pydantic schemas for authentication endpoints.

Request fields default to empty strings so that missing values reach the
auth service and fail with its own 400 messages rather than a 422.
"""

from sitecms.schemas.base import CamelModel


class SignupRequest(CamelModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class UpdatePasswordRequest(CamelModel):
    current_password: str = ""
    new_password: str = ""
    confirm_new_password: str = ""


class PasswordResetRequest(CamelModel):
    email: str = ""


class ResetPasswordRequest(CamelModel):
    password: str = ""
    confirm_password: str = ""


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    user: UserResponse
    token: str
