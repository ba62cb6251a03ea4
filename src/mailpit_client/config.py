from __future__ import annotations

from typing import Optional

from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection settings for a Mailpit instance.

    Environment variables use the prefix ``MAILPIT_``, e.g. ``MAILPIT_BASE_URL``.
    ``.env`` file in project root is also supported.
    """

    base_url: HttpUrl = "http://localhost:8025"

    # Basic auth is only sent when both are set
    username: Optional[str] = None
    password: Optional[str] = None

    request_timeout: Optional[float] = None  # seconds, None -> httpx default

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MAILPIT_")

