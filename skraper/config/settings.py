"""Configuration settings for the skraper HTTP client."""

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

# Environment variables are read with this prefix, e.g. SKRAPER_MAX_RETRIES
ENV_PREFIX = "SKRAPER_"


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class Settings:
    """Configuration settings for fetching provider pages.

    Attributes:
        user_agent: User-Agent header sent with every request
        request_timeout_seconds: Per-request timeout passed to the HTTP library
        request_delay_seconds: Delay before each HTTP request
        max_retries: Maximum retry attempts for transient failures
        retry_max_wait_seconds: Upper bound of the exponential backoff wait
    """

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_seconds: float = 30.0
    request_delay_seconds: float = 0.0
    max_retries: int = 3
    retry_max_wait_seconds: float = 10.0

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.
        """
        errors: list[str] = []

        if not self.user_agent.strip():
            errors.append("user_agent must not be blank")

        if self.request_timeout_seconds <= 0.0:
            errors.append("request_timeout_seconds must be positive")

        if self.request_delay_seconds < 0.0:
            errors.append("request_delay_seconds must be non-negative")

        if self.max_retries < 0:
            errors.append("max_retries must be non-negative")

        if self.retry_max_wait_seconds < 0.0:
            errors.append("retry_max_wait_seconds must be non-negative")

        if errors:
            raise ConfigurationError("; ".join(errors))


def _parse_float(value: str | None, default: float) -> float:
    """Parse a string to float, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, default: int) -> int:
    """Parse a string to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def load_settings(env_path: str | Path | None = None, validate: bool = True) -> Settings:
    """Load settings from environment variables and .env file.

    Args:
        env_path: Optional path to .env file. If None, searches for .env
                  in current directory and parent directories.
        validate: If True, validate settings after loading.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If validate=True and configuration is invalid.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    settings = Settings(
        user_agent=os.getenv(f"{ENV_PREFIX}USER_AGENT", DEFAULT_USER_AGENT),
        request_timeout_seconds=_parse_float(
            os.getenv(f"{ENV_PREFIX}REQUEST_TIMEOUT_SECONDS"), 30.0
        ),
        request_delay_seconds=_parse_float(
            os.getenv(f"{ENV_PREFIX}REQUEST_DELAY_SECONDS"), 0.0
        ),
        max_retries=_parse_int(
            os.getenv(f"{ENV_PREFIX}MAX_RETRIES"), 3
        ),
        retry_max_wait_seconds=_parse_float(
            os.getenv(f"{ENV_PREFIX}RETRY_MAX_WAIT_SECONDS"), 10.0
        ),
    )

    if validate:
        settings.validate()

    return settings
