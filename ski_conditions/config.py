"""Configuration settings for the pipeline."""

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel

# Contact info for User-Agent (required by NWS API)
CONTACT_EMAIL = "ski-conditions-bot@example.com"  # Replace with real email

# User-Agent header
USER_AGENT = f"(ski-conditions-app, {CONTACT_EMAIL})"

# HTTP settings
REQUEST_TIMEOUT = 15  # seconds
MAX_RETRIES = 3
RETRY_BACKOFF_BASE = 1  # seconds, doubled per attempt

# Weather
NWS_HOST = "api.weather.gov"
FORECAST_PERIODS = 20
HOURLY_PERIODS = 24

# Publishing
GITHUB_API_URL = "https://api.github.com"
DEFAULT_CONDITIONS_PATH = "data/conditions.json"
COMMIT_MESSAGE = "Update conditions data"

# Discord rejects messages longer than this
ALERT_MAX_LENGTH = 2000

# Registry
SOURCES_YAML = Path(__file__).resolve().parent / "sources.yaml"

REQUIRED_ENV_VARS = ("GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO")


class ConfigError(Exception):
    """Required configuration is missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required environment variables: {', '.join(missing)}")


class Settings(BaseModel):
    """Runtime settings read from the environment."""
    github_token: Optional[str] = None
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None
    github_branch: Optional[str] = None
    conditions_path: str = DEFAULT_CONDITIONS_PATH
    discord_webhook: Optional[str] = None
    sources_path: Path = SOURCES_YAML

    def require_publishing(self) -> None:
        """Raise ConfigError listing every missing publishing credential."""
        missing = [
            name for name in REQUIRED_ENV_VARS
            if not getattr(self, name.lower())
        ]
        if missing:
            raise ConfigError(missing)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    A .env file in (or above) the working directory is loaded first when reading
    the real process environment.

    Args:
        env: Mapping to read instead of os.environ (used by tests)

    Returns:
        Settings object
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    sources = env.get("SKI_CONDITIONS_SOURCES")

    return Settings(
        github_token=env.get("GITHUB_TOKEN") or None,
        github_owner=env.get("GITHUB_OWNER") or None,
        github_repo=env.get("GITHUB_REPO") or None,
        github_branch=env.get("GITHUB_BRANCH") or None,
        conditions_path=env.get("CONDITIONS_PATH") or DEFAULT_CONDITIONS_PATH,
        discord_webhook=env.get("DISCORD_WEBHOOK") or None,
        sources_path=Path(sources) if sources else SOURCES_YAML,
    )
