"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ======================
    # Timezone
    # ======================
    # Promotion windows are stored as calendar days and evaluated in this zone
    APP_TZ: str = "America/Mexico_City"

    # ======================
    # Pricing
    # ======================
    PRICING_CONFIG_DIR: str = "config"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
