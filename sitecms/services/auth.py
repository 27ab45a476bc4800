"""Authentication service: sign-up, login, password change and password reset."""

import hashlib
import logging
import re
import secrets
from dataclasses import dataclass
from datetime import timedelta
from html import escape

import bcrypt
from sqlalchemy import func
from sqlalchemy.orm import Session

from sitecms.config import Settings, get_settings
from sitecms.database import utcnow
from sitecms.errors import InvalidCredentials, NotFound, TokenInvalidOrExpired, UpstreamFailure, ValidationError
from sitecms.models.user import User
from sitecms.services.notifier import Notifier

logger = logging.getLogger("sitecms.auth")

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
MIN_PASSWORD_LENGTH = 6
# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72
RESET_REQUESTED_MESSAGE = "If your email is registered, you will receive a password reset link."


@dataclass
class AuthResult:
    """Identity of a successfully authenticated or registered user."""

    user_id: int
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "AuthResult":
        return cls(user_id=user.id, name=user.name, email=user.email, role=user.role)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def hash_reset_token(raw_token: str) -> str:
    """One-way digest stored in place of the emailed reset token."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class AuthService:
    """Handles user registration, authentication and credential resets."""

    def __init__(self, notifier: Notifier, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.notifier = notifier
        self.frontend_url = settings.FRONTEND_URL.rstrip("/")
        self.reset_expire_minutes = settings.PASSWORD_RESET_EXPIRE_MINUTES

    def _find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def register(self, db: Session, name: str, email: str, password: str) -> AuthResult:
        """Register a new user with role ``user``."""
        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes.")
        if not EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Invalid email format.")
        if self._find_by_email(db, email):
            raise ValidationError("User already exists with this email.")

        user = User(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role="user",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Registered user %s", user.id)
        return AuthResult.from_user(user)

    def authenticate(self, db: Session, email: str, password: str) -> AuthResult:
        """Authenticate by email and password.

        Unknown email and wrong password raise the same error so callers
        cannot tell which accounts exist.
        """
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self._find_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentials()
        return AuthResult.from_user(user)

    def get_user(self, db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found.")
        return user

    def update_password(
        self, db: Session, user_id: int, current_password: str, new_password: str, confirm_new_password: str
    ) -> None:
        """Change the password of an authenticated user. Existing tokens stay valid."""
        if not current_password or not new_password or not confirm_new_password:
            raise ValidationError("All password fields are required.")
        if new_password != confirm_new_password:
            raise ValidationError("New passwords do not match.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        if len(new_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"New password cannot be longer than {MAX_PASSWORD_BYTES} bytes.")
        if current_password == new_password:
            raise ValidationError("New password cannot be the same as the current password.")

        user = self.get_user(db, user_id)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentials("Incorrect current password.")

        user.password_hash = hash_password(new_password)
        db.commit()

    async def request_password_reset(self, db: Session, email: str) -> str:
        """Issue a reset token and email the link. Returns the generic response message.

        The message is the same whether or not the email is registered. If the
        email cannot be sent, the pending token is cleared again before the
        failure is raised.
        """
        if not email:
            raise ValidationError("Please provide an email address.")

        user = self._find_by_email(db, email)
        if not user:
            return RESET_REQUESTED_MESSAGE

        raw_token = secrets.token_urlsafe(32)
        user.password_reset_token = hash_reset_token(raw_token)
        user.password_reset_expires_at = utcnow() + timedelta(minutes=self.reset_expire_minutes)
        db.commit()

        reset_url = f"{self.frontend_url}/reset-password/{raw_token}"
        try:
            await self.notifier.send(
                recipient=user.email,
                subject="Password Reset Request",
                text=self._reset_email_text(user.name, reset_url),
                html=self._reset_email_html(user.name, reset_url),
            )
        except Exception as e:
            logger.error("Failed to send password reset email to user %s", user.id, exc_info=True)
            user.password_reset_token = None
            user.password_reset_expires_at = None
            db.commit()
            raise UpstreamFailure("Error sending password reset email. Please try again later.") from e

        return RESET_REQUESTED_MESSAGE

    def reset_password(self, db: Session, raw_token: str, password: str, confirm_password: str) -> AuthResult:
        """Set a new password using a reset token from the emailed link."""
        if not password or not confirm_password:
            raise ValidationError("New password and confirm password are required.")
        if password != confirm_password:
            raise ValidationError("Passwords do not match.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes.")

        user = (
            db.query(User)
            .filter(
                User.password_reset_token == hash_reset_token(raw_token or ""),
                User.password_reset_expires_at > utcnow(),
            )
            .first()
        )
        if not user:
            raise TokenInvalidOrExpired()

        user.password_hash = hash_password(password)
        user.password_reset_token = None
        user.password_reset_expires_at = None
        db.commit()
        return AuthResult.from_user(user)

    def _reset_email_text(self, name: str, reset_url: str) -> str:
        return (
            f"Hello {name or 'User'},\n\n"
            "You recently requested to reset your password.\n"
            f"Open the following link to choose a new one:\n\n{reset_url}\n\n"
            f"This link will expire in {self.reset_expire_minutes} minutes.\n"
            "If you did not request this, please ignore this email. Your password will remain unchanged.\n"
        )

    def _reset_email_html(self, name: str, reset_url: str) -> str:
        return (
            f"<p>Hello {escape(name or 'User')},</p>"
            "<p>You recently requested to reset your password.</p>"
            f'<p><a href="{reset_url}">Reset Your Password</a></p>'
            f"<p>This link will expire in {self.reset_expire_minutes} minutes.</p>"
            "<p>If you did not request this, please ignore this email. Your password will remain unchanged.</p>"
        )
