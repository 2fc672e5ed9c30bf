"""Backup system configuration and naming conventions."""

import copy
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG = PROJECT_ROOT / "config" / "config.json"

# Action log written into the working directory
LOG_FILENAME = "logfile.txt"

BACKUP_SUFFIX = ".bak"

# Timestamp styles for "<name>.<timestamp>.bak"
TIMESTAMP_UNIX = "unix"
TIMESTAMP_FORMATTED = "formatted"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

DEFAULTS = {
    "backup": {
        "log_file": LOG_FILENAME,
        "timestamp_style": TIMESTAMP_UNIX,
        "keep_plain_copy": False,
        "verify_restore": True,
    },
}


def load_config(config_path: str | None = None) -> dict:
    """Load config.json and merge it over DEFAULTS.

    A missing default config is not an error; a missing explicit path is.
    """
    config = copy.deepcopy(DEFAULTS)
    path = Path(config_path) if config_path else DEFAULT_CONFIG
    if not path.exists():
        if config_path:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", path)
        return config

    with open(path) as f:
        loaded = json.load(f)

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    style = config["backup"]["timestamp_style"]
    if style not in (TIMESTAMP_UNIX, TIMESTAMP_FORMATTED):
        raise ValueError(f"Unknown timestamp_style: {style!r}")
    return config
