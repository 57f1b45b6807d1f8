"""
Abillio API settings.

Environment variables:
- ABILLIO_API_URL: API base URL (default: https://api-staging.abill.io)
- ABILLIO_API_KEY: API key, sent as X-ABILLIO-KEY (required)
- ABILLIO_API_SECRET: API secret, used only as the HMAC key (required)
- ABILLIO_TIMEOUT: HTTP timeout in seconds (default: 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

DEFAULT_API_URL = "https://api-staging.abill.io"
DEFAULT_TIMEOUT = 30.0


def _mask_secret(secret: str) -> str:
    if not secret:
        return ""
    if len(secret) <= 4:
        return "*" * len(secret)
    return f"{secret[:2]}{'*' * (len(secret) - 4)}{secret[-2:]}"


@dataclass(frozen=True)
class AbillioConfig:
    api_key: str
    api_secret: str
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", (self.base_url or DEFAULT_API_URL).rstrip("/"))

    @classmethod
    def from_env(cls) -> "AbillioConfig":
        raw_timeout = os.getenv("ABILLIO_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"ABILLIO_TIMEOUT must be a number, got {raw_timeout!r}")
        return cls(
            api_key=os.getenv("ABILLIO_API_KEY", "").strip(),
            api_secret=os.getenv("ABILLIO_API_SECRET", "").strip(),
            base_url=os.getenv("ABILLIO_API_URL", "").strip() or DEFAULT_API_URL,
            timeout=timeout,
        )

    def validate(self) -> None:
        if not self.api_key:
            raise ConfigurationError("ABILLIO_API_KEY is not set in environment variables")
        if not self.api_secret:
            raise ConfigurationError("ABILLIO_API_SECRET is not set in environment variables")
        if self.timeout <= 0:
            raise ConfigurationError("ABILLIO_TIMEOUT must be positive")

    def masked_key(self) -> str:
        return _mask_secret(self.api_key)

    def __repr__(self) -> str:
        return (
            f"AbillioConfig(api_key={self.masked_key()!r}, api_secret='***', "
            f"base_url={self.base_url!r}, timeout={self.timeout!r})"
        )
