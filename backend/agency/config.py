from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Database - Handle Render's postgres:// URL format
    DATABASE_URL: str = "sqlite:///./agency.db"

    # JWT
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 12

    # CORS - comma-separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:3000"
    FRONTEND_URL: str = "http://localhost:3000"

    APP_NAME: str = "Agentur Kundenverwaltung"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Initial admin account, created on startup when both are set
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Froxlor hosting panel
    FROXLOR_TIMEOUT_SECONDS: int = 10
    FROXLOR_DEFAULT_VERSION: str = "2.0+"

    # Optional error tracking
    SENTRY_DSN: Optional[str] = None

    @property
    def database_url_fixed(self) -> str:
        """Fix Render's postgres:// to postgresql:// for SQLAlchemy"""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def cors_origins_list(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
