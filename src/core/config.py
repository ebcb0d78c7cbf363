"""Configuration management using Pydantic settings."""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, PostgresDsn, computed_field
import os


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Autoflow Builder"
    VERSION: str = "1.0.0"

    # Security
    SECRET_KEY: str = Field(default="dev-secret-key-change-in-production")
    ALGORITHM: str = "HS256"

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
        ]
    )
    FRONTEND_URL: str = Field(default="http://localhost:3000")

    # Database
    POSTGRES_SERVER: str = Field(default="localhost")
    POSTGRES_USER: str = Field(default="autoflow")
    POSTGRES_PASSWORD: str = Field(default="local_dev_password")
    POSTGRES_DB: str = Field(default="autoflow")
    POSTGRES_PORT: int = Field(default=5432)

    @computed_field
    @property
    def DATABASE_URL(self) -> PostgresDsn | str:
        """Construct database URL from components."""
        # SQLALCHEMY_DATABASE_URI wins so Unix socket paths skip DSN validation
        sqlalchemy_uri = os.getenv("SQLALCHEMY_DATABASE_URI")
        if sqlalchemy_uri:
            return sqlalchemy_uri

        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # Node catalog
    NODE_CATALOG_TTL_SECONDS: int = Field(default=300)
    MAX_RECOMMENDATIONS: int = Field(default=6)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Environment settings
    ENVIRONMENT: str = Field(default="development")

    # Performance
    MAX_CONNECTIONS_COUNT: int = Field(default=10)

    # Reference data and seeding
    REFERENCE_DATA_PATH: Optional[str] = Field(default=None)
    STARTER_TEMPLATES_PATH: Optional[str] = Field(default=None)
    TEMPLATE_SEED_OWNER_ID: str = Field(default="system")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings instance, read from the environment once."""
    return Settings()


settings = get_settings()
