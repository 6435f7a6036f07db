from pydantic_settings import BaseSettings
from pydantic import ConfigDict, SecretStr, field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase, require_min_length


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    The bearer-credential settings (JWT_*) have no defaults on purpose: the
    signing secret, issuer, audience and token lifetime must come from the
    deployment environment, never from source code.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration (PostgreSQL in deployed environments)
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # Used when no Postgres host is configured (local development)
    SQLITE_URL: str = "sqlite+aiosqlite:///./productos.db"

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_CREATE_ALL: bool = False

    # Bearer credential
    JWT_SECRET_KEY: SecretStr
    JWT_ISSUER: str
    JWT_AUDIENCE: str
    JWT_EXPIRE_MINUTES: int
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"

    # Optional seed account created at startup
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: SecretStr | None = None

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/productos-api")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    LOG_USE_QUEUE: bool = False
    LOG_QUEUE_MAX_SIZE: int = 0
    LOG_QUEUE_BLOCKING: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        - No POSTGRES_HOST configured: fall back to SQLITE_URL.
        - TESTING=True with TEST_POSTGRES_DB: use the test database so tests never
          touch the regular one.
        - Otherwise: the regular POSTGRES_DB.
        """
        if not self.POSTGRES_HOST:
            return self.SQLITE_URL

        database = self.POSTGRES_DB
        if self.TESTING and self.TEST_POSTGRES_DB:
            database = self.TEST_POSTGRES_DB

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to uppercase before Literal validation, so
        `LOG_LEVEL=debug` in the environment is accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    @field_validator("JWT_SECRET_KEY")
    def check_secret_length(cls, v: SecretStr) -> SecretStr:
        require_min_length(v.get_secret_value(), 32, "JWT_SECRET_KEY")
        return v

    @field_validator("JWT_EXPIRE_MINUTES")
    def check_token_lifetime(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("JWT_EXPIRE_MINUTES must be a positive number of minutes")
        return v

    # --- ConfigDict settings ---
    model_config = ConfigDict(
        # Load environment variables from the .env file at the project root.
        env_file=str(Path(__file__).resolve().parents[3] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings are read once per process and shared; callers receive the same instance.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
