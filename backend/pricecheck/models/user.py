import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from pricecheck.database import Base


class Role(str, enum.Enum):
    BASIC = "BASIC"
    VERIFIED = "VERIFIED"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.BASIC)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
