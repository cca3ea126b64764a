from typing import Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "Storefront API"
    APP_DESCRIPTION: str = "Multi-tenant e-commerce backend with repository and unit-of-work persistence"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True
    SECRET_KEY: str = "your-super-secret-key-change-it-in-production"

    # --- Server ---
    HOST: str = "localhost"
    PORT: int = 5000

    # --- Database (MySQL/SQLModel) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "storefront"
    DB_COMMAND_TIMEOUT: int = 60  # seconds
    DB_ECHO: bool = False
    # Full SQLAlchemy URL; takes precedence over the DB_* parts (e.g. sqlite+aiosqlite:///./dev.db)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        # Build async MySQL connection URL
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Persistence policy ---
    # Reject updates whose version token no longer matches the stored row
    ENFORCE_VERSION_TOKENS: bool = True

    # --- Auth ---
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Cookie ---
    ACCESS_TOKEN_COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False  # Set True in production (HTTPS only)
    COOKIE_SAMESITE: str = "lax"  # lax, strict, none

    # --- CORS (default: any origin, credentials allowed) ---
    CORS_ALLOW_ORIGIN_REGEX: str = ".*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # --- HSTS (sent outside development only) ---
    HSTS_MAX_AGE: int = 60 * 60 * 24 * 30

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # --- API route prefixes ---
    API_V1_AUTH_PREFIX: str = "/api/v1/auth"
    API_V1_CATALOG_PREFIX: str = "/api/v1/catalog"
    API_V1_INVENTORY_PREFIX: str = "/api/v1/inventory"

    # --- Gunicorn process name (optional) ---
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
