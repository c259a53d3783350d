from pydantic_settings import BaseSettings
from pydantic import field_validator
from decimal import Decimal
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str

    # Database Connection Pool Settings
    DB_POOL_SIZE: int = 10  # Base number of connections in pool
    DB_MAX_OVERFLOW: int = 20  # Extra connections allowed beyond pool_size
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for connection from pool
    DB_POOL_RECYCLE: int = 1800  # Recycle connections after 30 minutes

    # JWT Settings (tokens are issued by the food-ordering service)
    JWT_SECRET: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60  # Lifetime of locally minted tokens

    # App Settings
    APP_NAME: str = "Restaurant HRM Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - accepts JSON string, comma-separated, or list
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
    ]

    # Food-ordering identity service
    FOOD_ORDERING_SERVICE_URL: str = "http://localhost:3001"
    IDENTITY_PROVIDER: str = "http"  # Options: http, stub
    IDENTITY_FALLBACK_TO_STUB: bool = False  # Dev only: use stub users when upstream is down
    IDENTITY_TIMEOUT_SECONDS: float = 5.0

    # Payroll constants
    PAYROLL_WORKING_DAYS_PER_MONTH: int = 22
    PAYROLL_HOURS_PER_DAY: int = 8
    PAYROLL_DEFAULT_OVERTIME_RATE: Decimal = Decimal("1.5")
    PAYROLL_SOCIAL_SECURITY_RATE: Decimal = Decimal("0.05")
    PAYROLL_SOCIAL_SECURITY_CAP: Decimal = Decimal("750")

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(',')]
        return v

    @field_validator('IDENTITY_PROVIDER')
    @classmethod
    def check_identity_provider(cls, v: str) -> str:
        v = v.lower()
        if v not in ("http", "stub"):
            raise ValueError("IDENTITY_PROVIDER must be 'http' or 'stub'")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
