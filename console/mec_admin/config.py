import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_CONSOLE_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _CONSOLE_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "MEC Admin Console"
    app_version: str = "0.1.0"
    app_env: str = "development"

    # Admin API
    api_base_url: str = "http://localhost:5000/api"
    api_token: str = ""
    request_timeout: float = 30.0
    upload_field_name: str = "images"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_api: str = "INFO"              # HttpAdminApi adapter
    log_level_activity: str = "INFO"         # Store / asset / dashboard activity lines

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        if not self.api_base_url.startswith(("http://", "https://")):
            _config_logger.warning("api_base_url has no http(s) scheme: %s", self.api_base_url)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
