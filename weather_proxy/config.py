#  Weather Proxy - Configuration
#
#  Loads config.json, applies environment-variable overrides, and provides
#  typed access to all settings. Dot-notation path lookup: cfg("upstream.base_url")
#
#  Depends on: config.json (optional), environment
#  Used by:    all weather_proxy modules

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from limits import parse as parse_rate_limit

# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = Path(os.environ.get("WEATHER_PROXY_CONFIG", PROJECT_ROOT / "config.json"))
PUBLIC_DIR = PROJECT_ROOT / "public"


class ConfigError(Exception):
    """Raised when critical configuration is invalid."""


# ---------------------------------------------------------------------------
# Load config
# ---------------------------------------------------------------------------

_config: dict = {}


def _load_config(path: Path | None = None):
    """Load configuration from JSON file (internal, called once at import time).

    Module-level constants below are snapshots from _config.
    """
    global _config
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config.example.json to config.json or set WEATHER_PROXY_CONFIG."
        )
    with open(config_path) as f:
        _config = json.load(f)


# An explicitly named config file must exist; the default one is optional
# because every value can also come from the environment.
if "WEATHER_PROXY_CONFIG" in os.environ or CONFIG_PATH.exists():
    _load_config()


def cfg(path: str, default=None):
    """Get a config value by dot-notation path.

    Example: cfg("rate_limit.limit") -> "100 per 10 minutes"
    """
    keys = path.split(".")
    val = _config
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


def env_or_cfg(env_name: str, path: str, default=None, cast=None):
    """Environment variable if set and non-empty, else cfg(path, default)."""
    raw = os.environ.get(env_name)
    if raw is None or raw == "":
        return cfg(path, default)
    if cast is None:
        return raw
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{env_name} has an invalid value: {raw!r}") from None


# ---------------------------------------------------------------------------
# Convenience constants
# ---------------------------------------------------------------------------

# Server
HOST = env_or_cfg("HOST", "server.host", "0.0.0.0")
PORT = env_or_cfg("PORT", "server.port", 5000, cast=int)
ENVIRONMENT = env_or_cfg("APP_ENV", "server.environment", "development")
LOG_LEVEL = env_or_cfg("LOG_LEVEL", "server.log_level", "INFO")
LOG_FORMAT = env_or_cfg("LOG_FORMAT", "server.log_format", "json")
CORS_ORIGINS = cfg("server.cors_origins", ["*"])

# Upstream API
UPSTREAM_BASE_URL = env_or_cfg("API_BASE_URL", "upstream.base_url", "")
UPSTREAM_KEY_NAME = env_or_cfg("API_KEY_NAME", "upstream.key_name", "")
UPSTREAM_KEY_VALUE = env_or_cfg("API_KEY_VALUE", "upstream.key_value", "")
UPSTREAM_TIMEOUT = cfg("upstream.timeout", 10.0)

# Rate limiting
RATE_LIMIT = env_or_cfg("RATE_LIMIT", "rate_limit.limit", "100 per 10 minutes")
TRUSTED_PROXY_HOPS = env_or_cfg(
    "TRUSTED_PROXY_HOPS", "rate_limit.trusted_proxy_hops", 1, cast=int,
)

# Response cache
CACHE_DURATION = env_or_cfg("CACHE_DURATION", "cache.duration_seconds", 120, cast=int)


# ---------------------------------------------------------------------------
# Settings object
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProxySettings:
    """Immutable per-process settings handed to the forwarding pipeline."""

    upstream_base_url: str
    key_name: str
    key_value: str
    environment: str = "development"
    cache_duration: int = 120
    upstream_timeout: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def __repr__(self) -> str:
        # Keep the credential out of tracebacks and debug output
        return (
            f"ProxySettings(upstream_base_url={self.upstream_base_url!r}, "
            f"key_name={self.key_name!r}, key_value='***', "
            f"environment={self.environment!r}, cache_duration={self.cache_duration}, "
            f"upstream_timeout={self.upstream_timeout})"
        )


def load_settings() -> ProxySettings:
    """Build ProxySettings from the module constants (read at call time)."""
    return ProxySettings(
        upstream_base_url=UPSTREAM_BASE_URL,
        key_name=UPSTREAM_KEY_NAME,
        key_value=UPSTREAM_KEY_VALUE,
        environment=ENVIRONMENT,
        cache_duration=CACHE_DURATION,
        upstream_timeout=UPSTREAM_TIMEOUT,
    )


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

def validate_config():
    """Validate critical config values. Call during app startup (not at import time).

    Raises ConfigError for fatal issues, logs warnings for non-fatal ones.
    """
    _logger = logging.getLogger("weather_proxy.config")

    # Fatal: the upstream and its credential are required
    for label, val in [("upstream.base_url / API_BASE_URL", UPSTREAM_BASE_URL),
                       ("upstream.key_name / API_KEY_NAME", UPSTREAM_KEY_NAME),
                       ("upstream.key_value / API_KEY_VALUE", UPSTREAM_KEY_VALUE)]:
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(f"FATAL: {label} is missing")

    if not UPSTREAM_BASE_URL.startswith(("http://", "https://")):
        raise ConfigError(
            f"upstream.base_url must start with http:// or https://, got '{UPSTREAM_BASE_URL}'"
        )

    # Fatal: port must be valid
    if not isinstance(PORT, int) or not (1 <= PORT <= 65535):
        raise ConfigError(f"server.port must be 1-65535, got {PORT}")

    if not isinstance(UPSTREAM_TIMEOUT, (int, float)) or UPSTREAM_TIMEOUT <= 0:
        raise ConfigError(f"upstream.timeout must be > 0, got {UPSTREAM_TIMEOUT}")

    if not isinstance(CACHE_DURATION, int) or CACHE_DURATION < 0:
        raise ConfigError(f"cache.duration_seconds must be >= 0, got {CACHE_DURATION}")

    if not isinstance(TRUSTED_PROXY_HOPS, int) or TRUSTED_PROXY_HOPS < 0:
        raise ConfigError(
            f"rate_limit.trusted_proxy_hops must be >= 0, got {TRUSTED_PROXY_HOPS}"
        )

    try:
        parse_rate_limit(RATE_LIMIT)
    except ValueError:
        raise ConfigError(f"rate_limit.limit is not a valid rate limit: '{RATE_LIMIT}'") from None

    # Fatal: CORS origins must be a list of valid URLs
    if not isinstance(CORS_ORIGINS, list):
        raise ConfigError(
            f"server.cors_origins must be a list, got {type(CORS_ORIGINS).__name__}"
        )
    for origin in CORS_ORIGINS:
        if not isinstance(origin, str):
            raise ConfigError(f"CORS origin must be a string, got {type(origin).__name__}")
        if origin == "*":
            _logger.warning("CORS origin '*' allows all origins, not recommended for production")
        elif not origin.startswith(("http://", "https://")):
            raise ConfigError(
                f"CORS origin must start with http:// or https://, got '{origin}'"
            )

    # Warning: outbound URLs (credential included) are logged outside production
    if not load_settings().is_production:
        _logger.warning(
            "Running in '%s' mode: outbound upstream URLs, including the API key, "
            "will be written to the log. Set APP_ENV=production to suppress.",
            ENVIRONMENT,
        )

    if CACHE_DURATION == 0:
        _logger.warning("cache.duration_seconds is 0, response caching is disabled")
