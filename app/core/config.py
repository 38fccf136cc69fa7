"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_APP_NAME = "WalletIQ"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_BUILD_NUMBER = "local"
DEFAULT_LOGO_URL = "https://walletiq.example.com/logo.png"
DEFAULT_SUPPORT_EMAIL = "support@walletiq.example.com"
DEFAULT_LICENSE_NAME = "Proprietary"
DEFAULT_LICENSE_URL = "https://walletiq.example.com/license"
DEFAULT_PROFILE = "dev"
DEFAULT_DEV_SERVERS = ("http://localhost:8000",)
DEFAULT_PROD_SERVERS = ("https://api.walletiq.example.com",)
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORS_ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
DEFAULT_CORS_ALLOWED_HEADERS = ("Authorization", "Content-Type", "X-Request-ID")
DEFAULT_CORS_EXPOSED_HEADERS = ("x-ratelimit-limit", "x-ratelimit-remaining", "x-ratelimit-reset", "Retry-After")
DEFAULT_CORS_MAX_AGE = 3600

PRODUCTION_PROFILE = "prod"


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class ApplicationSettings:
    """Runtime settings describing the API server and its documentation."""

    name: str
    version: str
    build_number: str
    logo_url: str
    support_email: str
    license_name: str
    license_url: str
    profile: str
    dev_servers: tuple[str, ...]
    prod_servers: tuple[str, ...]
    log_level: str
    cors_enabled: bool = False
    cors_allowed_origins: tuple[str, ...] = ()
    cors_allowed_methods: tuple[str, ...] = DEFAULT_CORS_ALLOWED_METHODS
    cors_allowed_headers: tuple[str, ...] = DEFAULT_CORS_ALLOWED_HEADERS
    cors_exposed_headers: tuple[str, ...] = DEFAULT_CORS_EXPOSED_HEADERS
    cors_allow_credentials: bool = False
    cors_max_age: int = DEFAULT_CORS_MAX_AGE

    @property
    def is_production(self) -> bool:
        return self.profile == PRODUCTION_PROFILE

    @property
    def servers(self) -> tuple[str, ...]:
        return self.prod_servers if self.is_production else self.dev_servers

    def safe_for_logging(self) -> dict[str, str | list[str]]:
        """Return settings safe for logs."""
        return {
            "name": self.name,
            "version": self.version,
            "build_number": self.build_number,
            "profile": self.profile,
            "servers": list(self.servers),
            "log_level": self.log_level,
            "cors_enabled": str(self.cors_enabled).lower(),
            "cors_allowed_origins": list(self.cors_allowed_origins),
        }


@lru_cache(maxsize=1)
def get_settings() -> ApplicationSettings:
    """Load application settings from the environment."""
    return ApplicationSettings(
        name=os.getenv("WALLETIQ_APP_NAME", DEFAULT_APP_NAME),
        version=os.getenv("WALLETIQ_APP_VERSION", DEFAULT_APP_VERSION),
        build_number=os.getenv("WALLETIQ_BUILD_NUMBER", DEFAULT_BUILD_NUMBER),
        logo_url=os.getenv("WALLETIQ_LOGO_URL", DEFAULT_LOGO_URL),
        support_email=os.getenv("WALLETIQ_SUPPORT_EMAIL", DEFAULT_SUPPORT_EMAIL),
        license_name=os.getenv("WALLETIQ_LICENSE_NAME", DEFAULT_LICENSE_NAME),
        license_url=os.getenv("WALLETIQ_LICENSE_URL", DEFAULT_LICENSE_URL),
        profile=os.getenv("WALLETIQ_PROFILE", DEFAULT_PROFILE).strip().lower(),
        dev_servers=_get_list_env("WALLETIQ_DEV_SERVERS", DEFAULT_DEV_SERVERS),
        prod_servers=_get_list_env("WALLETIQ_PROD_SERVERS", DEFAULT_PROD_SERVERS),
        log_level=os.getenv("WALLETIQ_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        cors_enabled=_get_bool_env("WALLETIQ_CORS_ENABLED", False),
        cors_allowed_origins=_get_list_env("WALLETIQ_CORS_ALLOWED_ORIGINS", ()),
        cors_allowed_methods=_get_list_env("WALLETIQ_CORS_ALLOWED_METHODS", DEFAULT_CORS_ALLOWED_METHODS),
        cors_allowed_headers=_get_list_env("WALLETIQ_CORS_ALLOWED_HEADERS", DEFAULT_CORS_ALLOWED_HEADERS),
        cors_exposed_headers=_get_list_env("WALLETIQ_CORS_EXPOSED_HEADERS", DEFAULT_CORS_EXPOSED_HEADERS),
        cors_allow_credentials=_get_bool_env("WALLETIQ_CORS_ALLOW_CREDENTIALS", False),
        cors_max_age=_get_int_env("WALLETIQ_CORS_MAX_AGE", DEFAULT_CORS_MAX_AGE),
    )
