from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    DEFAULT_LOCALE: str = "en"

    BOOKING_API_BASE_URL: str | None = None
    BOOKING_SUBMIT_PATH: str = "/api/method/newlab_site.api.submit_home_visit"
    BOOKING_TIMEOUT_SECONDS: float = 30.0

    PHONE_PREFIX: str = "7"

    ATTACHMENT_MAX_BYTES: int = 2 * 1024 * 1024
    ATTACHMENT_MAX_DIMENSION: int = 1600
    ATTACHMENT_PRIMARY_QUALITY: int = 60
    ATTACHMENT_FALLBACK_QUALITY: int = 30

    CATALOG_PATH: str = "./data/catalog.json"


settings = Settings()
