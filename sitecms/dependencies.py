"""Shared FastAPI dependencies: collaborators, authentication and form parsing."""

from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, Request, Response
from starlette.datastructures import UploadFile

from sitecms.config import get_settings
from sitecms.errors import PermissionDenied
from sitecms.services.auth import AuthService
from sitecms.services.jwt import JWTService, get_jwt_service
from sitecms.services.media import MediaFile, MediaStore
from sitecms.services.notifier import Notifier

AUTH_COOKIE_NAME = "token"
COOKIE_PATH = "/"


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# --- Collaborators built at startup (see main.lifespan) ---


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_auth_service(notifier: Notifier = Depends(get_notifier)) -> AuthService:
    return AuthService(notifier)


# --- Authentication ---


def _user_from_token(token: str | None, jwt_service: JWTService) -> CurrentUser | None:
    if not token:
        return None
    payload = jwt_service.decode_token(token)
    if not payload:
        return None
    return CurrentUser(user_id=int(payload["sub"]), email=payload["email"], role=payload.get("role", "user"))


def get_current_user(request: Request, jwt_service: JWTService = Depends(get_jwt_service)) -> CurrentUser:
    """Extract and validate user from Bearer token or cookie. Raises 401 if invalid."""
    token: str | None = None

    # Check Authorization header first
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]

    # Fall back to cookie
    if not token:
        token = request.cookies.get(AUTH_COOKIE_NAME)

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = _user_from_token(token, jwt_service)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require an authenticated admin. Raises 403 for other roles."""
    if not user.is_admin:
        raise PermissionDenied("Admin access required")
    return user


# --- Session cookie ---


def _cookie_attributes() -> dict[str, Any]:
    """Attributes shared by setting and clearing the cookie; browsers ignore a clear that doesn't match."""
    production = get_settings().is_production
    return {
        "path": COOKIE_PATH,
        "httponly": True,
        "secure": production,
        "samesite": "none" if production else "lax",
    }


def set_auth_cookie(response: Response, token: str) -> None:
    """Set the authentication cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=get_settings().JWT_EXPIRE_MINUTES * 60,
        **_cookie_attributes(),
    )


def clear_auth_cookie(response: Response) -> None:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE_NAME, **_cookie_attributes())


# --- Submissions ---


@dataclass
class Submission:
    """Fields and files of a JSON or multipart request body."""

    fields: dict[str, Any]
    files: dict[str, MediaFile]


async def read_submission(request: Request) -> Submission:
    """Read a JSON or form body. Uploaded files are read into memory."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Malformed JSON body") from None
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        return Submission(fields=body, files={})

    form = await request.form()
    fields: dict[str, Any] = {}
    files: dict[str, MediaFile] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if value.filename:
                files[key] = MediaFile(
                    field_name=key,
                    filename=value.filename,
                    content_type=value.content_type,
                    data=await value.read(),
                )
        else:
            fields[key] = value
    return Submission(fields=fields, files=files)
