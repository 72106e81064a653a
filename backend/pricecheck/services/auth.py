"""
Authentication Service

Handles password hashing, account registration, login, JWT issuance and
resolution of bearer tokens into caller identities.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pricecheck.config import Settings
from pricecheck.database import is_valid_id
from pricecheck.errors import ConflictError, NotFoundError, UnauthenticatedError
from pricecheck.models import User, Role
from pricecheck.services.sessions import RefreshTokenStore

# Password hashing
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


@dataclass(frozen=True)
class Identity:
    """The caller behind a verified access token."""
    user_id: int
    email: str
    role: Role


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user: User, token_type: str, expires_delta: timedelta, settings: Settings) -> tuple[str, str]:
    jti = uuid.uuid4().hex
    to_encode = {
        "sub": str(user.id),  # JWT sub must be a string
        "email": user.email,
        "role": user.role.value,
        "type": token_type,
        "jti": jti,
        "exp": datetime.utcnow() + expires_delta,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return encoded_jwt, jti


def create_access_token(user: User, settings: Settings) -> str:
    """Create a short-lived JWT access token."""
    token, _ = _create_token(
        user, ACCESS_TOKEN, timedelta(minutes=settings.access_token_expire_minutes), settings
    )
    return token


def create_refresh_token(user: User, settings: Settings) -> tuple[str, str]:
    """Create a refresh token. Returns the token and its id."""
    return _create_token(
        user, REFRESH_TOKEN, timedelta(days=settings.refresh_token_expire_days), settings
    )


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Get a user by ID."""
    if not is_valid_id(user_id):
        return None
    return db.query(User).filter(User.id == user_id).first()


def _user_from_token(db: Session, token: Optional[str], expected_type: str, settings: Settings) -> tuple[User, dict]:
    if not token:
        raise UnauthenticatedError("Not authenticated")

    payload = decode_token(token, settings)
    if payload is None or payload.get("type") != expected_type:
        raise UnauthenticatedError("Invalid or expired token")

    # Convert sub to int (it's stored as string in JWT)
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise UnauthenticatedError("Invalid or expired token")

    user = get_user_by_id(db, user_id)
    if user is None:
        raise UnauthenticatedError("User no longer exists")
    return user, payload


def resolve_identity(db: Session, token: Optional[str], settings: Settings) -> Identity:
    """
    Resolve a bearer access token to the caller's identity.

    Role and email are read from the stored user, not the token, so role
    changes apply to tokens already issued.
    """
    user, _ = _user_from_token(db, token, ACCESS_TOKEN, settings)
    return Identity(user_id=user.id, email=user.email, role=user.role)


def register_user(db: Session, email: str, password: str) -> User:
    """Create a new BASIC account."""
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    user = User(email=email, hashed_password=hash_password(password), role=Role.BASIC)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        # Spend the same hashing time as a real check
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def issue_tokens(user: User, store: RefreshTokenStore, settings: Settings) -> tuple[str, str]:
    """Issue an access/refresh token pair and register the refresh token."""
    access_token = create_access_token(user, settings)
    refresh_token, jti = create_refresh_token(user, settings)
    await store.register(jti, user.id, timedelta(days=settings.refresh_token_expire_days))
    return access_token, refresh_token


async def rotate_refresh_token(
    db: Session, token: str, store: RefreshTokenStore, settings: Settings
) -> tuple[User, str, str]:
    """Exchange a refresh token for a new pair, revoking the old one."""
    user, payload = _user_from_token(db, token, REFRESH_TOKEN, settings)

    # Revoking is the check, so a token can be exchanged only once
    jti = payload.get("jti")
    if not jti or await store.revoke(jti) is False:
        raise UnauthenticatedError("Refresh token has been revoked")

    access_token, refresh_token = await issue_tokens(user, store, settings)
    return user, access_token, refresh_token


async def revoke_refresh_token(token: str, store: RefreshTokenStore, settings: Settings):
    """Revoke a refresh token. Unknown or expired tokens are ignored."""
    payload = decode_token(token, settings)
    if payload and payload.get("type") == REFRESH_TOKEN and payload.get("jti"):
        await store.revoke(payload["jti"])


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def set_role(db: Session, user_id: int, role: Role) -> User:
    """Change a user's role."""
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    user.role = role
    db.commit()
    db.refresh(user)
    return user
