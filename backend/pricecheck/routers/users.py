"""User administration endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pricecheck.database import get_db
from pricecheck.dependencies import require
from pricecheck.schemas.user import RoleUpdate, User as UserSchema
from pricecheck.services.auth import Identity, list_users, set_role
from pricecheck.services.authorization import Capability

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserSchema])
def get_users(
    identity: Identity = Depends(require(Capability.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """List all user accounts. Requires ADMIN role."""
    return [
        UserSchema(user_id=u.id, email=u.email, role=u.role, created_at=u.created_at)
        for u in list_users(db)
    ]


@router.patch("/{user_id}/role", response_model=UserSchema)
def update_user_role(
    user_id: int,
    data: RoleUpdate,
    identity: Identity = Depends(require(Capability.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Promote or demote a user. Requires ADMIN role."""
    user = set_role(db, user_id, data.role)
    return UserSchema(user_id=user.id, email=user.email, role=user.role, created_at=user.created_at)
