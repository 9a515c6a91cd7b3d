"""
Namhae Welfare — Application Configuration
Local SQLite storage, static welfare catalog. All config from .env file.
"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- App ---
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"

    # --- Storage ---
    database_path: str = "data/welfare.sqlite3"

    # --- Survey / Recommendation policy ---
    min_eligible_age: int = 65
    recommendation_limit: int = 5

    # --- Middleware ---
    rate_limit_per_minute: int = 60   # 0 disables the limiter
    cors_origins_csv: str = "*"

    # --- Security ---
    app_secret: str = "default-dev-key-change-me-in-production"

    # --- Derived ---
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_csv.split(",") if o.strip()]

    @property
    def resolved_database_path(self) -> Path:
        """Absolute database path; relative paths live under the backend root."""
        db_path = Path(self.database_path)
        if not db_path.is_absolute():
            db_path = BACKEND_ROOT / db_path
        return db_path.resolve()


@lru_cache()
def get_settings() -> Settings:
    """Cached singleton for application settings."""
    return Settings()
