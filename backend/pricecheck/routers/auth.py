"""
Authentication API endpoints.

Handles registration, login, token refresh and logout.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pricecheck.config import Settings
from pricecheck.database import get_db
from pricecheck.dependencies import get_app_settings, get_token_store, require_auth
from pricecheck.errors import UnauthenticatedError
from pricecheck.schemas.common import Message
from pricecheck.schemas.user import (
    LoginResponse,
    RefreshRequest,
    User as UserSchema,
    UserIdentity,
    UserLogin,
    UserRegister,
)
from pricecheck.services.auth import (
    Identity,
    authenticate_user,
    get_user_by_id,
    issue_tokens,
    register_user,
    revoke_refresh_token,
    rotate_refresh_token,
)
from pricecheck.services.sessions import RefreshTokenStore

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_response(user) -> UserSchema:
    return UserSchema(user_id=user.id, email=user.email, role=user.role, created_at=user.created_at)


def _login_response(user, access_token: str, refresh_token: str) -> LoginResponse:
    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserIdentity(user_id=user.id, email=user.email, role=user.role),
    )


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user account.

    - **email**: Valid email address
    - **password**: Password (min 8 characters)

    New accounts start with the BASIC role.
    """
    user = register_user(db, data.email, data.password)
    return _user_response(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    store: RefreshTokenStore = Depends(get_token_store),
):
    """
    Login with email and password.

    Returns an access token, a refresh token and the caller's identity.
    """
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise UnauthenticatedError("Incorrect email or password")

    access_token, refresh_token = await issue_tokens(user, store, settings)
    return _login_response(user, access_token, refresh_token)


@router.post("/refresh", response_model=LoginResponse)
async def refresh(
    data: RefreshRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    store: RefreshTokenStore = Depends(get_token_store),
):
    """Exchange a refresh token for a new token pair. The old refresh token is revoked."""
    user, access_token, refresh_token = await rotate_refresh_token(db, data.refresh_token, store, settings)
    return _login_response(user, access_token, refresh_token)


@router.post("/logout", response_model=Message)
async def logout(
    data: RefreshRequest,
    settings: Settings = Depends(get_app_settings),
    store: RefreshTokenStore = Depends(get_token_store),
):
    """
    Revoke a refresh token.

    Access tokens stay valid until they expire; discard them client-side.
    """
    await revoke_refresh_token(data.refresh_token, store, settings)
    return Message(message="Logged out successfully")


@router.get("/me", response_model=UserSchema)
def get_me(identity: Identity = Depends(require_auth), db: Session = Depends(get_db)):
    """Get the current authenticated user's profile."""
    return _user_response(get_user_by_id(db, identity.user_id))
