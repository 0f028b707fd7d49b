"""
Logging utilities for repodb
"""

import logging
from typing import Optional


def setup_logging(debug_mode=False, log_file: Optional[str] = None):
    """Setup logging configuration"""
    level = logging.DEBUG if debug_mode else logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=handlers,
    )

    return logging.getLogger("repodb")
