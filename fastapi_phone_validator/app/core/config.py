from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Phone Validator API", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    debug: bool = Field(default=True, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    phone_api_key: str | None = Field(default=None, alias="API_KEY")
    phone_api_base_url: str = Field(
        default="https://api.apilayer.com/number_verification/validate",
        alias="PHONE_API_BASE_URL",
    )
    phone_api_timeout: float = Field(default=10.0, alias="PHONE_API_TIMEOUT")
    phone_api_max_attempts: int = Field(default=3, ge=1, alias="PHONE_API_MAX_ATTEMPTS")
    phone_api_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        alias="PHONE_API_RETRY_DELAY_SECONDS",
    )
    phone_api_concurrency: int = Field(default=5, ge=1, alias="PHONE_API_CONCURRENCY")

    upload_max_rows: int = Field(default=20_000, alias="UPLOAD_MAX_ROWS")
    history_size: int = Field(default=5, ge=1, alias="HISTORY_SIZE")

    export_dir: str = Field(default="temp/exports/processed", alias="EXPORT_DIR")
    export_ttl_hours: int = Field(default=24, alias="EXPORT_TTL_HOURS")
    export_cleanup_enabled: bool = Field(default=True, alias="EXPORT_CLEANUP_ENABLED")
    export_cleanup_interval_minutes: int = Field(
        default=60,
        alias="EXPORT_CLEANUP_INTERVAL_MINUTES",
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
