"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:5173"
    public_base_url: str = "http://localhost:8000"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "careercraft"

    # Generative AI (any OpenAI-compatible endpoint)
    ai_api_key: str = ""
    ai_base_url: str = "https://api.deepseek.com/v1"
    ai_model: str = "deepseek-chat"

    # JWT session cookie
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 30 * 24 * 60
    cookie_name: str = "token"
    cookie_secure: Optional[bool] = None

    # Password recovery
    password_reset_expire_minutes: int = 10

    # Resume uploads
    resume_max_size_mb: int = 5
    storage_backend: str = "local"  # 'local' or 's3'
    local_upload_dir: str = "uploads"
    s3_bucket: Optional[str] = None
    s3_endpoint: Optional[str] = None
    s3_region: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    s3_public_base_url: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def session_cookie_secure(self) -> bool:
        """Secure cookies in production unless explicitly overridden."""
        if self.cookie_secure is not None:
            return self.cookie_secure
        return self.is_production

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
