from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _validate_supabase_url(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("SUPABASE_URL must be an absolute http(s) URL.")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "wanderlust"

    # Supabase configuration (required)
    supabase_url: str
    supabase_service_key: str

    # JWT configuration
    jwt_secret: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Recommendation bot
    conversation_retention_days: int = Field(7, ge=1)
    retention_sweep_interval_seconds: int = Field(3600, ge=60)
    recommendation_limit: int = Field(5, ge=1, le=50)

    # Maintenance
    booking_cleanup_age_days: int = Field(30, ge=1)

    @model_validator(mode="after")
    def validate_settings(self):
        if not self.supabase_url or not self.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required. "
                "Get these from your Supabase project settings."
            )

        _validate_supabase_url(self.supabase_url)

        if not self.supabase_url.rstrip("/").endswith(".supabase.co"):
            raise ValueError(
                "SUPABASE_URL must be a valid Supabase project URL "
                "(e.g., https://<project>.supabase.co)"
            )

        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
