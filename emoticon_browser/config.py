from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from pydantic import Field, field_validator

class Settings(BaseSettings):
    """Application settings loaded from environment variables (.env)."""
    environment: str = Field(default="development", alias="ENVIRONMENT")
    app_port: int = Field(default=8000, alias="APP_PORT")

    # Site hosting the datasets and the images/ tree (GitHub Pages or similar)
    site_base_url: str = Field(default="http://localhost:8000/site/", alias="SITE_BASE_URL")
    packs_path: str = Field(default="data/emoticon_pack.csv", alias="PACKS_PATH")
    emoticons_path: str = Field(default="data/emoticons.csv", alias="EMOTICONS_PATH")
    fetch_timeout: float = Field(default=10.0, alias="FETCH_TIMEOUT")

    # Existence probe for image URLs (HEAD)
    probe_images: bool = Field(default=True, alias="PROBE_IMAGES")
    probe_timeout: float = Field(default=5.0, alias="PROBE_TIMEOUT")
    probe_concurrency: int = Field(default=16, ge=1, alias="PROBE_CONCURRENCY")

    load_on_startup: bool = Field(default=True, alias="LOAD_ON_STARTUP")

    # pydantic-settings v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("site_base_url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        # urljoin drops the last segment of a base without a trailing slash
        value = value.strip()
        return value if value.endswith("/") else value + "/"

def get_settings() -> "Settings":
    return Settings()  # type: ignore[call-arg]
