from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./i18n_backend.db"

    # Locales
    DEFAULT_LOCALE: str = "en"
    SUPPORTED_LOCALES: list[str] = ["en"]
    LOCALES_DIR: str = "locales"

    # Cache tier: "memory", "redis" or "null"
    CACHE_STORE: str = "memory"
    CACHE_TTL_SECONDS: int | None = None
    CACHE_NAMESPACE: str = "i18n"
    # memory store only
    CACHE_MAX_ENTRIES: int = 10_000

    # Redis / Celery
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    LOG_LEVEL: str = "INFO"


settings = Settings()
