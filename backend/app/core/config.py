from pydantic_settings import BaseSettings
from typing import List, Any, Optional
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "ICMS Admin API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False

    # ==========================================
    # Authentication (token verification only)
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # ==========================================
    # Object Storage (S3 / MinIO)
    # ==========================================
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET_NAME: str = "icms-media"
    S3_ENDPOINT_URL: Optional[str] = None  # Set for MinIO / Backblaze S3 endpoints
    S3_PUBLIC_BASE_URL: Optional[str] = None
    STORAGE_URL_EXPIRY: int = 86400  # 24 hours

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # ==========================================
    # Dashboard Cache (seconds)
    # ==========================================
    DASHBOARD_CACHE_DEFAULT_TTL: int = 300  # 5 minutes
    DASHBOARD_CACHE_MAX_SIZE: int = 1000
    DASHBOARD_CACHE_SWEEP_INTERVAL: int = 60  # once per minute
    DASHBOARD_OVERVIEW_TTL: int = 120  # 2 minutes
    DASHBOARD_WIDGET_TTL: int = 60  # 1 minute
    DASHBOARD_CONFIG_TTL: int = 3600  # 1 hour
    DASHBOARD_EXPORT_TTL: int = 86400  # 24 hours

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    def is_dev_mode(self) -> bool:
        return self.ENVIRONMENT == "development"


# Create settings instance
settings = Settings()
