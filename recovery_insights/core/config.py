from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://recovery:recovery@db:5432/recovery_insights"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # IANA zone used for hour-of-day / day-of-week derivation.
    # Naive timestamps coming out of the store are read as UTC.
    TIMEZONE: str = "UTC"

    # Insight heuristics
    INSIGHT_MIN_URGES: int = 3
    INSIGHT_CONFIDENCE_CAP: int = 90
    TRIGGER_TABLE_SIZE: int = 5

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
