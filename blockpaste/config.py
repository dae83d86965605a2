"""
Configuration module for blockpaste.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

from blockpaste.envelope import PasteFormat

# Load environment variables from .env file
load_dotenv()


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


class Settings:
    """Application settings loaded from environment variables."""

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    DEBUG: bool = _get_bool("DEBUG", "False")

    # Wire format for stored pastes, fixed for the lifetime of a deployment
    PASTE_FORMAT: PasteFormat = PasteFormat.parse(os.getenv("PASTE_FORMAT", "raw"))

    MAX_PASTE_SIZE: int = _get_int("MAX_PASTE_SIZE", 1048576)
    MAX_PATH_LENGTH: int = _get_int("MAX_PATH_LENGTH", 512)
    STORE_GET_TIMEOUT_MS: int = _get_int("STORE_GET_TIMEOUT_MS", 250)

    HTTP_HOSTNAME: str = os.getenv("HTTP_HOSTNAME", "localhost:8000")
    HTTP_BIND_ADDR: str = os.getenv("HTTP_BIND_ADDR", "localhost")
    HTTP_PORT: int = _get_int("HTTP_PORT", 8000)
    HTTP_IDLE_TIMEOUT: int = _get_int("HTTP_IDLE_TIMEOUT", 2)
    TLS_CERT_FILE: str = os.getenv("TLS_CERT_FILE", "")
    TLS_KEY_FILE: str = os.getenv("TLS_KEY_FILE", "")

    @property
    def store_get_timeout(self) -> float:
        """Store lookup deadline in seconds."""
        return self.STORE_GET_TIMEOUT_MS / 1000


settings = Settings()
