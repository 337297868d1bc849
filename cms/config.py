from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

DEFAULT_JWT_SECRET = "dev-jwt-secret-change-in-production"
DEFAULT_REFRESH_SECRET = "dev-refresh-secret-change-in-production"


class Settings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite:///./data/cms.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_minutes: int = 60
    refresh_token_secret: str = DEFAULT_REFRESH_SECRET
    refresh_token_expires_days: int = 7
    bcrypt_rounds: int = 12
    password_reset_expires_minutes: int = 60

    # CORS / frontend
    cors_origins: List[str] = ["http://localhost:5173"]
    frontend_url: str = "http://localhost:5173"

    # Email
    smtp_host: str = "localhost"
    smtp_port: int = 2525
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_start_tls: bool = False
    email_from: str = "noreply@example.com"
    admin_email: str = "admin@example.com"

    # Uploads
    upload_dir: str = "./uploads"
    max_file_size: int = 10 * 1024 * 1024  # 10MB

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Rate limiting (Redis)
    redis_url: str = "redis://localhost:6379/0"
    rate_limit_enabled: bool = True
    rate_limit_window_seconds: int = 900  # 15 minutes
    rate_limit_max_requests: int = 100
    login_rate_limit_max: int = 5
    password_reset_rate_limit_max: int = 3
    password_reset_window_seconds: int = 3600  # 1 hour
    # Peers allowed to set X-Forwarded-For; other clients are keyed by socket address
    trusted_proxies: List[str] = []

    # Background jobs
    publish_check_interval_minutes: int = 5
    scheduler_enabled: bool = True
    seed_on_startup: bool = False
    default_admin_email: str = "admin@example.com"
    default_admin_password: str = "Admin@123456"

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate_secrets(self) -> None:
        """Refuse to run in production with the development JWT secrets."""
        if self.is_production and (
            self.jwt_secret == DEFAULT_JWT_SECRET
            or self.refresh_token_secret == DEFAULT_REFRESH_SECRET
        ):
            raise RuntimeError("JWT secrets must be set in production environment")


@lru_cache
def get_settings() -> Settings:
    return Settings()
