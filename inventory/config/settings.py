from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations like deleting auth users

    # Authorization
    permission_fetch_timeout: float = 5.0  # seconds a blocking permission check waits before failing closed
    permission_cache_ttl: float = 300.0  # seconds a loaded permission set is reused before it is fetched again
    permission_retry_delay: float = 5.0  # seconds a failed fetch keeps denying before the next attempt

    # Reports
    low_stock_multiplier: float = 2  # stock <= minimum * multiplier is reported as "medium_stock"
    recent_transactions_limit: int = 10

    # App
    app_name: str = "inventory-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
