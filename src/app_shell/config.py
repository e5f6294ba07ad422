import logging
import os
import sys
from pathlib import Path

from src.rules.loader import missing_required_env
from src.rules.models import Rules

logger = logging.getLogger(__name__)

DB_FILENAME = "lcm.db"


class Settings:
    """Process settings read from the environment."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("LCM_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / DB_FILENAME)
        self.rules_path = Path(os.environ.get("LCM_RULES_PATH", str(self.base_dir / "rules.yaml")))


def validate_ops_rules(rules: Rules, settings: Settings) -> None:
    """
    Validate operational requirements before startup.
    Exits the process if a required environment variable is missing.
    """
    missing = missing_required_env(rules)
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Configuration validated (data dir: %s)", settings.data_dir)
