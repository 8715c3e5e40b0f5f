from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HOTCONF_",
        env_file=".env",
        extra="ignore",
    )

    # Service settings
    SERVICE_NAME: str = "config_store_service"
    SERVICE_VERSION: str = "1.0.0"

    # Source settings
    SOURCE: str = Field(
        default="config/hotconf.properties",
        description="Properties file path, package:<module>/<resource> or http(s) URL",
    )
    HTTP_TIMEOUT: float = 5.0
    # Overrides the reload interval key of the loaded properties when set
    RELOAD_INTERVAL_SECONDS: Optional[int] = None

    # Admin API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000


# Global settings instance
settings = StoreSettings()
