# proxy_engine/data/settings.py
import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from proxy_engine.models.proxy_model import OptionStrategy

# Global settings instance, built once per process
_settings: Optional["Settings"] = None


class Settings(BaseModel):
    option_strategy: OptionStrategy = OptionStrategy.HEADER
    fetch_timeout: float = Field(10.0, gt=0)
    compress_timeout: float = Field(20.0, gt=0)
    min_compress_length: int = Field(1024, ge=0)
    min_transparent_compress_length: int = Field(102400, ge=0)
    default_quality: int = Field(40, ge=1, le=100)
    log_level: str = "INFO"


def load_settings() -> "Settings":
    """Reads the environment (and a .env file if present) into Settings."""
    global _settings
    if _settings is None:
        load_dotenv()
        strategy = os.getenv("OPTION_STRATEGY", OptionStrategy.HEADER.value).lower()
        try:
            option_strategy = OptionStrategy(strategy)
        except ValueError:
            raise ValueError(
                f"OPTION_STRATEGY must be 'header' or 'query', got {strategy!r}."
            )
        _settings = Settings(
            option_strategy=option_strategy,
            fetch_timeout=float(os.getenv("FETCH_TIMEOUT", "10.0")),
            compress_timeout=float(os.getenv("COMPRESS_TIMEOUT", "20.0")),
            min_compress_length=int(os.getenv("MIN_COMPRESS_LENGTH", "1024")),
            min_transparent_compress_length=int(
                os.getenv("MIN_TRANSPARENT_COMPRESS_LENGTH", "102400")
            ),
            default_quality=int(os.getenv("DEFAULT_QUALITY", "40")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
    return _settings


def reset_settings():
    """Drops the cached settings so the next load re-reads the environment."""
    global _settings
    _settings = None


def get_settings() -> "Settings":
    """
    Returns the process settings.
    Loads them lazily, so the event-style entry point works without a startup hook.
    """
    if _settings is None:
        return load_settings()
    return _settings
