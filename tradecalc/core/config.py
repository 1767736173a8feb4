from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

# Load environment variables from .env if present
load_dotenv(ENV_PATH)

DEFAULT_MAX_LEVERAGE = 125


class Settings(BaseSettings):
    log_level: str = Field("INFO", env="LOG_LEVEL")
    max_leverage: int = Field(DEFAULT_MAX_LEVERAGE, gt=0, env="MAX_LEVERAGE")
    default_rr_ratio: Optional[float] = Field(None, env="DEFAULT_RR_RATIO")

    @field_validator("default_rr_ratio")
    @classmethod
    def validate_rr_ratio(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("default_rr_ratio must be positive")
        return value

    class Config:
        env_file = ENV_PATH
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


def get_log_level(default: Optional[str] = None) -> str:
    """Convenience accessor for log level with optional override."""
    settings = get_settings()
    return settings.log_level or (default or "INFO")
