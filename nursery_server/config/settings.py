from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_url: str = "duckdb://./data/nursery.duckdb"

    # JWT
    jwt_secret_key: str = "your-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7  # 7 days

    # API
    api_title: str = "Nursery Admin API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Period rules
    period_lead_days: int = 60
    menu_meals_per_day: int = 3

    # Dev mode
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="NURSERY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
