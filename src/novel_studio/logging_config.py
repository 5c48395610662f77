"""
Logging setup

Plain-text logs to the console and to a rotating file under the log directory.
"""
import logging
import logging.handlers
import os
import sys
from typing import Optional

from novel_studio.config import config

LOG_FILE_NAME = "novel_studio.log"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None,
                  to_file: Optional[bool] = None) -> None:
    """
    Configure the root logger.

    Existing root handlers are removed first so repeated calls do not
    duplicate output.
    """
    level = (level or config.log_level or "INFO").upper()
    log_dir = log_dir or config.log_dir
    to_file = config.log_to_file if to_file is None else to_file

    formatter = logging.Formatter(LOG_FORMAT)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.root.setLevel(level)

    if to_file:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logging.root.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    logging.captureWarnings(True)
