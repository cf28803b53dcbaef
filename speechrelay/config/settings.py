from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    # Database
    DB_USER: str = Field("relay_admin")
    DB_PASSWORD: str = Field("RelayPass2024")
    DB_NAME: str = Field("speech_relay")
    DB_HOST: str = Field("postgres")
    DB_PORT: int = Field(5432)

    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(8000)
    DEBUG: bool = Field(False)

    # Google Cloud
    GOOGLE_APPLICATION_CREDENTIALS: str | None = Field(None)
    GOOGLE_CLOUD_PROJECT_ID: str | None = Field(None)
    GOOGLE_CLOUD_TRANSLATE_LOCATION: str | None = Field(None)
    GOOGLE_CLOUD_LOCATION: str | None = Field(None)

    # Grok (xAI) chat completions
    GROK_API_KEY: str | None = Field(None)
    GROK_API_BASE_URL: str = Field("https://api.x.ai/v1")
    GROK_TRANSLATE_MODEL: str = Field("grok-4-1-fast-reasoning")

    # Translation
    DEFAULT_TRANSLATION_ENGINE: str = Field("google-translate")

    # TTS cache + cleanup
    TTS_CACHE_DIR: str = Field("cache/tts")
    TTS_CACHE_RETENTION_DAYS: int = Field(7)
    ROOM_RETENTION_HOURS: int = Field(24)
    CLEANUP_ENABLED: bool = Field(True)

    # Metrics
    METRICS_PORT: int | None = Field(None)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )

    @field_validator("GROK_API_BASE_URL")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()
