"""Configuration defaults and recognised values."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = str(PROJECT_ROOT / "config" / "config.json")

# Separator used by list-valued keys given as a single string
LIST_DELIMITER = ";"

# Backup partition granularities
PARTITION_YEAR = "YEAR"
PARTITION_MONTH = "MONTH"
PARTITION_DATE = "DATE"
DEFAULT_PARTITION = PARTITION_DATE

# Which directory set the delete action targets
DELETE_TARGET_ORIGIN = "origin"
DELETE_TARGET_BACKUP = "backup"
DELETE_TARGETS = (DELETE_TARGET_ORIGIN, DELETE_TARGET_BACKUP)

DEFAULT_LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
