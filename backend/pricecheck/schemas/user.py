from pydantic import EmailStr, Field
from datetime import datetime

from pricecheck.models.user import Role
from pricecheck.schemas.common import CamelModel


class UserRegister(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class UserIdentity(CamelModel):
    user_id: int
    email: str
    role: Role


class User(UserIdentity):
    created_at: datetime | None = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenPair):
    user: UserIdentity


class RoleUpdate(CamelModel):
    role: Role
