from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    """Environment-driven configuration; every field maps to an upper-case env var or .env entry."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Supabase project
    supabase_url: str = ""
    supabase_key: str = ""  # anon key, used only for Supabase Auth calls
    supabase_service_role_key: Optional[str] = None  # data access; services scope queries to the caller

    # HTTP surface
    app_name: str = "axis6-backend"
    api_prefix: str = "/api/v1"
    environment: str = "development"  # development | staging | production
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"
    chat_message_rate_limit: str = "30/minute"

    # Wellness tracking rules
    default_timezone: str = "America/Santo_Domingo"
    checkin_backfill_days: int = 7
    analytics_max_period_days: int = 365
    export_max_checkins: int = 10000

    # Lapsed streak reset job
    streak_refresh_enabled: bool = False
    streak_refresh_interval_seconds: int = 3600

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
