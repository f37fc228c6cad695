"""
Application settings.
Database credentials may be loaded from AWS Secrets Manager at startup.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # AWS
    AWS_REGION: str = "us-east-1"
    COGNITO_REGION: str = "us-east-1"

    # Database
    DATABASE_URL: str = "sqlite:///./feed.db"
    DB_SECRET_NAME: Optional[str] = None  # Secrets Manager entry with host/port/database/username/password
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a pooled connection
    DB_STATEMENT_TIMEOUT_MS: int = 5000  # PostgreSQL only

    # Cognito (external identity provider)
    COGNITO_USER_POOL_ID: Optional[str] = None
    COGNITO_CLIENT_ID: Optional[str] = None

    # Redis (identity session cache)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    SESSION_TTL: int = 900  # 15 minutes in seconds

    # Server-to-server secrets
    IDENTITY_WEBHOOK_SECRET: Optional[str] = None  # whsec_<base64> or raw string
    WEBHOOK_TOLERANCE_SECONDS: int = 300
    SYNC_API_KEY: Optional[str] = None
    ADMIN_API_KEY: Optional[str] = None

    # Optional
    DEBUG: bool = False
    AUTO_CREATE_SCHEMA: bool = False
    LOG_LEVEL: str = "INFO"
    PROJECT_NAME: str = "Feed Backend"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @property
    def use_cognito(self) -> bool:
        return bool(self.COGNITO_USER_POOL_ID and self.COGNITO_CLIENT_ID)

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

# Build DATABASE_URL from Secrets Manager only when a secret name is configured
# (e.g. in ECS). Local dev and Docker provide DATABASE_URL directly.
if settings.DB_SECRET_NAME:
    from sqlalchemy.engine import URL
    from app.aws.secrets import get_secret

    _db_secret = get_secret(settings.DB_SECRET_NAME, region_name=settings.AWS_REGION)
    settings.DATABASE_URL = URL.create(
        "postgresql+psycopg2",
        username=_db_secret["username"],
        password=_db_secret["password"],
        host=_db_secret["host"],
        port=int(_db_secret.get("port", 5432)),
        database=_db_secret["database"],
    ).render_as_string(hide_password=False)
