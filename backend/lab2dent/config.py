"""Application configuration."""
from pydantic_settings import BaseSettings
from functools import lru_cache


DEV_JWT_SECRET_KEY = "dev-only-change-me"


class Settings(BaseSettings):
    """Application settings."""

    # App
    APP_NAME: str = "LAB2DENT Order Tracking"
    ENV: str = "development"
    DEBUG: bool = True
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # JWT
    JWT_SECRET_KEY: str = DEV_JWT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_LEEWAY_SECONDS: int = 30  # clock skew tolerance for exp validation

    # Session store ("memory" or "redis")
    SESSION_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    SESSION_KEY_PREFIX: str = "lab2dent_user"
    SESSION_TTL_SECONDS: int = 8 * 3600

    # Simulated network latency for the demo login flow. 0 disables it.
    LOGIN_SIMULATED_DELAY_SECONDS: float = 0.5

    # Orders
    ORDER_NUMBER_PREFIX: str = "ORD"
    ORDER_NUMBER_WIDTH: int = 3
    ENFORCE_FORWARD_TRANSITIONS: bool = False
    SEED_SAMPLE_DATA: bool = True

    # Analytics
    REVENUE_PER_ORDER: int = 450
    ANALYTICS_MONTHS: int = 12

    # Production photos
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_SIZE: int = 10485760  # 10MB
    ALLOWED_EXTENSIONS: str = "jpg,jpeg,png,webp,heic"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_extensions_list(self) -> list[str]:
        """Get allowed extensions as list."""
        return [ext.strip().lower() for ext in self.ALLOWED_EXTENSIONS.split(",") if ext.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
