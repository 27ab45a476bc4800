"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import (
    CurrentUser,
    clear_auth_cookie,
    get_auth_service,
    get_current_user,
    set_auth_cookie,
)
from sitecms.rate_limit import limiter
from sitecms.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordResetRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from sitecms.schemas.base import MessageResponse
from sitecms.services.auth import AuthResult, AuthService
from sitecms.services.jwt import JWTService, get_jwt_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _auth_response(result: AuthResult, message: str, jwt_service: JWTService) -> AuthResponse:
    token = jwt_service.create_token(user_id=result.user_id, email=result.email, role=result.role)
    return AuthResponse(
        message=message,
        user=UserResponse(id=result.user_id, name=result.name, email=result.email, role=result.role),
        token=token,
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
@limiter.limit("5/minute")
def signup(
    request: Request,
    body: SignupRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AuthResponse:
    """Register a new user account."""
    result = auth_service.register(db, body.name, body.email, body.password)
    return _auth_response(result, "User registered successfully.", jwt_service)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AuthResponse:
    """Authenticate, set the session cookie and return a JWT."""
    result = auth_service.authenticate(db, body.email, body.password)
    payload = _auth_response(result, "Logged in successfully.", jwt_service)
    set_auth_cookie(response, payload.token)
    return payload


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully.")


@router.get("/me", response_model=UserResponse)
def me(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Return the profile of the authenticated user."""
    return UserResponse.model_validate(auth_service.get_user(db, user.user_id))


@router.post("/update-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def update_password(
    request: Request,
    body: UpdatePasswordRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Change the password of the authenticated user."""
    auth_service.update_password(
        db, user.user_id, body.current_password, body.new_password, body.confirm_new_password
    )
    return MessageResponse(message="Password updated successfully.")


@router.post("/request-password-reset", response_model=MessageResponse)
@limiter.limit("3/minute")
async def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Email a password reset link. The response does not reveal whether the email is registered."""
    message = await auth_service.request_password_reset(db, body.email)
    return MessageResponse(message=message)


@router.post("/reset-password/{token}", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    token: str,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using the token from the reset link."""
    auth_service.reset_password(db, token, body.password, body.confirm_password)
    return MessageResponse(message="Password has been reset successfully.")
