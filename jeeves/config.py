"""
Settings read from the environment (and an optional ``.env`` file).
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from jeeves.errors import ConfigurationError

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_LOG_LEVEL = "info"


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    log_level: str = DEFAULT_LOG_LEVEL
    api_url: str = OPENAI_API_URL
    timeout: Optional[float] = None

    @property
    def debug(self) -> bool:
        return self.log_level.lower() == "debug"


def get_env(key: str) -> str:
    """Return a required environment variable or raise ConfigurationError."""
    value = os.getenv(key)
    if value is None:
        raise ConfigurationError(
            f"{key} environment variable not found, please export it via the shell and try again"
        )
    return value


def get_env_with_default(key: str, default: str) -> str:
    return os.getenv(key, default)


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"JEEVES_TIMEOUT must be a number of seconds, got {raw!r}"
        ) from None
    if timeout <= 0:
        raise ConfigurationError(f"JEEVES_TIMEOUT must be positive, got {raw!r}")
    return timeout


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build the Settings for this run.

    Variables already exported in the shell take precedence over a ``.env``
    file.
    """
    if dotenv:
        load_dotenv(override=False)

    log_level = get_env_with_default("JEEVES_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    api_key = get_env("OPENAI_API_KEY")
    model = get_env_with_default("JEEVES_OPENAI_MODEL", DEFAULT_MODEL)
    api_url = get_env_with_default("JEEVES_OPENAI_API_URL", OPENAI_API_URL)
    timeout = _parse_timeout(os.getenv("JEEVES_TIMEOUT"))

    return Settings(
        api_key=api_key,
        model=model,
        log_level=log_level,
        api_url=api_url,
        timeout=timeout,
    )
