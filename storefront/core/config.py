from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator
from typing import List


class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Depot Storefront"

    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"
    AUTO_CREATE_TABLES: bool = True

    # Security
    SECRET_KEY: str = "dev-secret-key-change-me"
    SESSION_COOKIE_NAME: str = "storefront_session"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60  # 14 days
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Navigation
    DEFAULT_LANDING_PATH: str = "/admin"
    LOGIN_PATH: str = "/login"
    STORE_PATH: str = "/"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    # Environment
    ENVIRONMENT: str = "development"

    DEBUG: bool = False

    # Monitoring (Optional - Add to .env for production)
    SENTRY_DSN: str = ""

    # Bootstrap
    DEFAULT_ADMIN_NAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = ""

    @field_validator("ENVIRONMENT")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        return value.lower().strip()

    @model_validator(mode="after")
    def validate_production_secret(self):
        if self.ENVIRONMENT == "production":
            normalized_secret = (self.SECRET_KEY or "").strip()
            if len(normalized_secret) < 32 or "change-me" in normalized_secret.lower():
                raise ValueError("SECRET_KEY must be at least 32 chars and not use placeholders in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()
