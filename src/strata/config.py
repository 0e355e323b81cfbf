"""Environment-driven settings for strata."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    value = os.getenv(key)
    if value is None:
        if default is not None:
            logger.debug(f"{key} not set, falling back to default value")
        return default
    return value


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    logger.warning(f"{key}={value!r} is not a valid boolean, using {default}")
    return default


# Persisted layout
CONFIG_FILE = "strata.yml"
OVERRIDE_FILE = "stratarc.yml"


def home_dir() -> Path:
    """Directory holding the global override file ($STRATA_HOME or ~)."""
    return Path(get_env("STRATA_HOME") or os.path.expanduser("~")).expanduser()


def default_ws_root() -> Path:
    """Workspace root used by the CLI when none is given ($STRATA_WS_ROOT or cwd)."""
    return Path(get_env("STRATA_WS_ROOT") or os.getcwd()).expanduser()


# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure and return the package logger."""
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return logging.getLogger("strata")
