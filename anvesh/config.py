"""
Centralized Configuration Module

All application constants, logging configuration, and settings.
Import from here instead of hardcoding values.
"""

import importlib
import os
import sys
import logging
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# ============================================================================
# Load default .env at module import time
# ============================================================================
# EngineConfig and the other classes read env vars at class creation
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent


# ============================================================================
# Environment Loading
# ============================================================================

def load_environment(env_file: Optional[str] = None):
    """
    Load environment variables from .env file.

    Args:
        env_file: Optional path to .env file. If None, uses default .env
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=True)
            logging.getLogger(__name__).info(f"Loaded environment from: {env_file}")
        else:
            logging.getLogger(__name__).warning(f"Environment file not found: {env_file}")
    else:
        load_dotenv(override=True)

    # Config classes snapshot os.environ when the module executes.
    # Callers must go through `config.<Class>` after this to see new values.
    importlib.reload(sys.modules[__name__])


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# ============================================================================
# Application Constants
# ============================================================================

class AppConfig:
    """Application-wide configuration constants"""

    # Application Info
    APP_NAME = "Anvesh"
    APP_VERSION = "1.0.0"
    APP_DESCRIPTION = "A privacy respecting meta search engine"

    # Server
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", "8080"))
    WORKERS = int(os.getenv("WORKERS", "1"))

    # API Settings
    API_PREFIX = "/api"
    CORS_ORIGINS = _split_csv(os.getenv("CORS_ORIGINS", "*"))

    # Static Files
    STATIC_DIR = str(PACKAGE_DIR / "static")
    TEMPLATES_DIR = str(PACKAGE_DIR / "templates")


class EngineConfig:
    """Upstream search engine configuration"""

    UPSTREAM_ENGINES = os.getenv("UPSTREAM_ENGINES", "duckduckgo,searx")
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # 0 = off, 1 = moderate, 2 = strict, 3 = strict + blocklist,
    # 4 = strict + blocklisted queries refused
    SAFE_SEARCH = int(os.getenv("SAFE_SEARCH", "2"))

    SEARX_URL = os.getenv("SEARX_URL", "https://searx.be")
    USER_AGENT = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
    )

    # Sleep 1-10s before dispatch to look less like a bot (non-production)
    RANDOM_DELAY = _env_bool("RANDOM_DELAY")
    MAX_RESULTS = int(os.getenv("MAX_RESULTS", "0"))  # 0 = unlimited

    @classmethod
    def get_engine_list(cls) -> List[str]:
        """Get list of active upstream engine names"""
        return [name.lower() for name in _split_csv(cls.UPSTREAM_ENGINES)]


class CacheConfig:
    """Search result cache configuration"""

    CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "60"))
    CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "1000"))
    CACHE_PURGE_INTERVAL = int(os.getenv("CACHE_PURGE_INTERVAL", "300"))


class RateLimitConfig:
    """Per-client rate limiting"""

    # Burst size
    NUMBER_OF_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "20"))
    # Seconds to refill one request
    TIME_LIMIT = int(os.getenv("RATE_LIMIT_TIME_LIMIT", "3"))


class StyleConfig:
    """Frontend theme configuration"""

    THEME = os.getenv("THEME", "simple")
    COLORSCHEME = os.getenv("COLORSCHEME", "catppuccin-mocha")

    THEMES = ["simple"]
    COLORSCHEMES = [
        "catppuccin-mocha",
        "dark-chocolate",
        "dracula",
        "gruvbox-dark",
        "monokai",
        "nord",
        "oceanic-next",
        "one-dark",
        "solarized-dark",
        "solarized-light",
        "tokyo-night",
        "tomorrow-night",
    ]


class FilterConfig:
    """Result filtering lists (one regex per line)"""

    BLOCKLIST_FILE = os.getenv("BLOCKLIST_FILE", "")
    ALLOWLIST_FILE = os.getenv("ALLOWLIST_FILE", "")


class InstanceConfig:
    """Public instance listing"""

    INSTANCES_FILE = os.getenv("INSTANCES_FILE", "docs/instances.md")


# ============================================================================
# Logging Configuration
# ============================================================================

class LogConfig:
    """Logging configuration"""

    # Log Level
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Log Format
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    # Detailed format with file/line
    DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

    # File Logging
    LOG_FILE = os.getenv("LOG_FILE")  # Optional
    LOG_FILE_MAX_BYTES = int(os.getenv("LOG_FILE_MAX_BYTES", "10485760"))  # 10MB
    LOG_FILE_BACKUP_COUNT = int(os.getenv("LOG_FILE_BACKUP_COUNT", "5"))


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """
    Configure application logging.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Optional log file path
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, LogConfig.LOG_LEVEL, logging.INFO)

    log_format = LogConfig.DETAILED_FORMAT if verbose else LogConfig.LOG_FORMAT

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=LogConfig.LOG_DATE_FORMAT
    )

    if log_file or LogConfig.LOG_FILE:
        from logging.handlers import RotatingFileHandler

        file_path = log_file or LogConfig.LOG_FILE
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=LogConfig.LOG_FILE_MAX_BYTES,
            backupCount=LogConfig.LOG_FILE_BACKUP_COUNT
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format, LogConfig.LOG_DATE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info(f"Logging to file: {file_path}")

    # Suppress noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("charset_normalizer").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={logging.getLevelName(log_level)}")


logger = logging.getLogger(__name__)


# ============================================================================
# Feature Flags
# ============================================================================

class FeatureFlags:
    """Feature flags for optional functionality"""

    ENABLE_CACHING = _env_bool("ENABLE_CACHING", "true")
    ENABLE_RATE_LIMIT = _env_bool("ENABLE_RATE_LIMIT", "true")
    ENABLE_CORS = _env_bool("ENABLE_CORS", "true")

    # Development
    DEBUG = _env_bool("DEBUG")
    RELOAD = _env_bool("RELOAD")


# ============================================================================
# Validation
# ============================================================================

def validate_config():
    """
    Validate configuration on startup.
    Raises ValueError if critical configuration is missing or invalid.
    """
    # Imported here, engines import config for their defaults
    from .repositories import EngineFactory

    errors = []

    engines = EngineConfig.get_engine_list()
    if not engines:
        errors.append("No upstream engines configured (UPSTREAM_ENGINES is empty)")

    supported = EngineFactory.get_supported_engines()
    for name in engines:
        if name not in supported:
            errors.append(f"Unknown upstream engine '{name}' (supported: {', '.join(supported)})")

    if not 0 <= EngineConfig.SAFE_SEARCH <= 4:
        errors.append(f"SAFE_SEARCH must be between 0 and 4, got {EngineConfig.SAFE_SEARCH}")

    if EngineConfig.REQUEST_TIMEOUT <= 0:
        errors.append("REQUEST_TIMEOUT must be positive")

    if not 0 < AppConfig.PORT < 65536:
        errors.append(f"PORT out of range: {AppConfig.PORT}")

    if RateLimitConfig.NUMBER_OF_REQUESTS <= 0 or RateLimitConfig.TIME_LIMIT <= 0:
        errors.append("Rate limit values must be positive")

    if StyleConfig.COLORSCHEME not in StyleConfig.COLORSCHEMES:
        logger.warning(f"Unknown colorscheme '{StyleConfig.COLORSCHEME}', falling back to default styling")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)

    logger.info(f"Configuration validated: {len(engines)} engine(s) configured")


__all__ = [
    'AppConfig',
    'EngineConfig',
    'CacheConfig',
    'RateLimitConfig',
    'StyleConfig',
    'FilterConfig',
    'InstanceConfig',
    'LogConfig',
    'FeatureFlags',
    'load_environment',
    'setup_logging',
    'validate_config',
]
