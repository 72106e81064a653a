"""
Database engine and session management.

The engine and session factory are built explicitly by ``create_app`` and
kept on ``app.state``; request handlers receive sessions through ``get_db``.
"""
import logging

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

# Integer primary keys are signed 64-bit; larger ids cannot name a row
MAX_ID = 2**63 - 1


def is_valid_id(value: int) -> bool:
    return 0 < value <= MAX_ID


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine with settings appropriate for the backend."""
    # SQLite needs different config than PostgreSQL
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Dependency for getting database sessions."""
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine, session_factory: sessionmaker, settings) -> None:
    """Create tables and bootstrap the administrator account if configured."""
    # Import models so they're registered on Base.metadata
    from pricecheck import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    if not (settings.admin_email and settings.admin_password):
        return

    from pricecheck.models import User, Role
    from pricecheck.services.auth import hash_password

    db = session_factory()
    try:
        existing = db.query(User).filter(User.email == settings.admin_email).first()
        if existing is None:
            db.add(User(
                email=settings.admin_email,
                hashed_password=hash_password(settings.admin_password),
                role=Role.ADMIN,
            ))
            db.commit()
            logger.info(f"Created bootstrap administrator {settings.admin_email}")
        elif existing.role != Role.ADMIN:
            logger.warning(
                f"Bootstrap administrator {settings.admin_email} exists with role {existing.role.value}"
            )
    finally:
        db.close()
