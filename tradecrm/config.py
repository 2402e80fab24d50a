"""CRM configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class CRMSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///tradecrm.db"
    echo_sql: bool = False
    app_title: str = "Trades CRM"
    log_level: str = "INFO"

    auth_secret: str = "change-me-in-production"
    auth_cookie_name: str = "auth_token"
    auth_cookie_secure: bool = False
    # 7 days
    auth_session_ttl_seconds: int = 604800
    auth_bootstrap_email: str = "admin@crm.com"
    auth_bootstrap_password: str = ""
    auth_bootstrap_name: str = "Admin User"

    # Public lead capture hardening
    capture_rate_limit_window_seconds: int = 60
    capture_rate_limit_max_submissions: int = 10
    capture_rate_limit_block_seconds: int = 300
    capture_honeypot_field: str = "website"
    # Only enable behind a proxy that overwrites X-Forwarded-For
    capture_trust_forwarded_for: bool = False

    model_config = {"env_prefix": "CRM_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}

    @property
    def cookie_secure(self) -> bool:
        return self.auth_cookie_secure or self.is_production


settings = CRMSettings()
