from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Agent
    AGENT_NAME: str = "PricePredictor"
    APP_VERSION: str = "0.1.0"

    # Prediction
    # Seeds the default noise source. Leave unset in production so every
    # call draws fresh noise.
    PREDICTION_RANDOM_SEED: int | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
