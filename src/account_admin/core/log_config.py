# account_admin/core/log_config.py

import logging
from typing import Optional
from account_admin.core.config import settings

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the process (CLI scripts, workers)."""
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
