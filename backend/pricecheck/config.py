from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./pricecheck.db"

    # Application
    environment: str = "development"
    api_prefix: str = ""
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # JWT Authentication
    jwt_secret_key: str = "jwt-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Redis (refresh token sessions)
    redis_url: str = "redis://localhost:6379"

    # Bootstrap administrator, created on startup if missing
    admin_email: str | None = None
    admin_password: str | None = None

    # Shopping list resolution deadline
    shopping_list_timeout_seconds: float = 10.0

    # Seed data for `python -m pricecheck.seed`
    seed_dir: str = "./data/seed"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
