"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEVELOPMENT = "development"
PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "K8s Practice Application"
    environment: str = DEVELOPMENT
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Database (disabled unless DB_ENABLED=true)
    db_enabled: bool = False
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "k8s_practice"
    db_user: str = "k8s_user"
    db_password: SecretStr = SecretStr("password")
    db_ssl: bool = False

    # Connection pool
    db_pool_size: int = 20
    db_idle_timeout: int = 30  # Seconds before an idle connection is recycled
    db_connect_timeout: int = 2  # Seconds

    # CORS settings
    # Wildcard origins are served without credentials
    cors_origins: list[str] = ["*"]

    # Request size limits
    max_request_size: int = 100 * 1024  # 100KB default

    # Timing/debug headers
    expose_timing_header: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            msg = f"Invalid log level: {v}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return upper_v

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT

    @property
    def database_url(self) -> URL:
        """Get async database URL for psycopg3."""
        # DB_SSL encrypts the connection without verifying the server certificate
        query = {"sslmode": "require"} if self.db_ssl else {}
        return URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password.get_secret_value(),
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query=query,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
