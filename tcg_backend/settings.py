from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Ignore unknown env keys to prevent ValidationError on extras
    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")
    app_name: str = Field(default="TCG Backend")
    allowed_origins: str = Field(default="*")  # comma separated

    # JustTCG pricing API
    justtcg_api_key: str | None = Field(default=None, alias="JUSTTCG_API_KEY")
    justtcg_base_url: str = Field(default="https://api.justtcg.com/v1", alias="JUSTTCG_BASE_URL")

    # Image catalogs used to fill in missing card images
    pokemontcg_io_api_key: str | None = Field(default=None, alias="POKETCG_API_KEY")
    pokemontcg_base_url: str = Field(default="https://api.pokemontcg.io/v2", alias="POKETCG_BASE_URL")
    scryfall_base_url: str = Field(default="https://api.scryfall.com", alias="SCRYFALL_BASE_URL")
    image_fallback_enabled: bool = Field(default=True, alias="IMAGE_FALLBACK_ENABLED")

    # Development server (`tcg-backend` script)
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    reload: bool = Field(default=False, alias="TCG_BACKEND_RELOAD")

    http_timeout: float = Field(default=12.0, alias="HTTP_TIMEOUT")
    # Include the raw upstream card/variant in price responses (debug only)
    show_raw: bool = Field(default=False, alias="SHOW_RAW")

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide configuration."""
    return settings
