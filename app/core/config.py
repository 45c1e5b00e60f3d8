from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "repairflow"
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    database_url: str = "sqlite:///./repairflow.db"
    redis_url: str = "redis://localhost:6379/0"

    notification_webhook_url: str | None = None
    notification_timeout: float = 10.0

    default_locale: str = "th"

settings = Settings()
