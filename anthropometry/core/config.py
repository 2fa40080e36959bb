"""
Application Configuration
=========================
Uses pydantic-settings to load environment variables into a typed Settings object.
Formula constants are not configurable; only service-level settings live here.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    The .env file is automatically read thanks to the model_config below.
    """

    # Application metadata
    APP_NAME: str = "Personal Trainer Assessment Engine"
    APP_VERSION: str = "1.0.0"

    # Root log level (DEBUG shows every protocol calculation)
    LOG_LEVEL: str = "INFO"

    # Origins allowed to call the API (the evaluation wizard front-end)
    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


# Singleton instance — import this everywhere you need settings
settings = Settings()
