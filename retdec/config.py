from __future__ import annotations

import os
import platform
from dataclasses import dataclass

from retdec.errors import ConfigError

__version__ = "0.1.0"

DEFAULT_API_URL = "https://retdec.com/service/api"

_PLATFORM_NAMES = {
    "linux": "Linux",
    "windows": "Windows",
    "darwin": "macOS",
    "freebsd": "FreeBSD",
    "netbsd": "NetBSD",
    "openbsd": "OpenBSD",
}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def current_platform_name() -> str:
    return _PLATFORM_NAMES.get(platform.system().lower(), "Unknown")


def user_agent() -> str:
    return f"retdec-python/{__version__} ({current_platform_name()})"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    api_url: str = DEFAULT_API_URL
    request_timeout_s: int = 300
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))

    @staticmethod
    def from_env(api_key: str | None = None, api_url: str | None = None) -> "Settings":
        api_key = api_key or os.getenv("RETDEC_API_KEY") or None
        api_url = api_url or os.getenv("RETDEC_API_URL") or DEFAULT_API_URL
        timeout = os.getenv("RETDEC_REQUEST_TIMEOUT_S", "300")
        try:
            request_timeout_s = int(timeout)
        except ValueError as exc:
            raise ConfigError(f"invalid RETDEC_REQUEST_TIMEOUT_S: {timeout!r}") from exc
        log_level = os.getenv("RETDEC_LOG_LEVEL", "WARNING").upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"invalid RETDEC_LOG_LEVEL: {log_level!r}")
        return Settings(
            api_key=api_key,
            api_url=api_url,
            request_timeout_s=request_timeout_s,
            log_level=log_level,
        )
