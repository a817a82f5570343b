# config.py
"""
Startup configuration.

Values are read from the environment once at startup (a local .env file is
loaded first) and frozen into a Settings object that gets passed around
explicitly.
"""
import os
from dataclasses import dataclass
from typing import Optional

import pytz
from dotenv import load_dotenv

from errors import ConfigError

# ---------------- ENVIRONMENT KEYS ----------------
REQUIRED_KEYS = ("TOKEN", "SCRIPT_URL", "SECRET")


@dataclass(frozen=True)
class Settings:
    token: str
    script_url: str
    secret: str
    timezone: Optional[str] = None
    http_timeout: Optional[float] = None

    def tzinfo(self):
        """Return the pytz zone for reply timestamps, or None for local time."""
        if not self.timezone:
            return None
        return pytz.timezone(self.timezone)


def _clean(value):
    value = (value or "").strip()
    return value or None


def load_env(dotenv_path=None):
    """Load the local .env file into the process environment and return it."""
    load_dotenv(dotenv_path)
    return os.environ


def load_settings(env=None, dotenv_path=None) -> Settings:
    """
    Build Settings from the environment.
    Raises ConfigError when TOKEN, SCRIPT_URL or SECRET is absent.
    """
    if env is None:
        env = load_env(dotenv_path)

    values = {key: _clean(env.get(key)) for key in REQUIRED_KEYS}
    missing = [key for key, value in values.items() if value is None]
    if missing:
        raise ConfigError(missing)

    timezone = _clean(env.get("TIMEZONE"))
    if timezone:
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ConfigError(detail=f"Unknown TIMEZONE: {timezone}")

    http_timeout = _clean(env.get("HTTP_TIMEOUT"))
    if http_timeout is not None:
        try:
            http_timeout = float(http_timeout)
        except ValueError:
            raise ConfigError(detail=f"HTTP_TIMEOUT must be a number, got {http_timeout!r}")
        if http_timeout <= 0:
            raise ConfigError(detail="HTTP_TIMEOUT must be positive")

    return Settings(
        token=values["TOKEN"],
        script_url=values["SCRIPT_URL"],
        secret=values["SECRET"],
        timezone=timezone,
        http_timeout=http_timeout,
    )
