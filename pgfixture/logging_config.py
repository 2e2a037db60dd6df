"""
Process-wide logging setup for test runs.

Test modules may all ask for logging; only the first call configures it.
"""

import logging
import os
import threading
from typing import Optional, Union

_lock = threading.Lock()
_configured = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> bool:
    """
    Configure root logging once per process.

    Args:
        level: Logging level; defaults to PGFIXTURE_LOG_LEVEL or INFO

    Returns:
        True if this call performed the configuration, False if it was
        already done
    """
    global _configured
    with _lock:
        if _configured:
            return False
        if level is None:
            level = os.getenv('PGFIXTURE_LOG_LEVEL', 'INFO').upper()
        logging.basicConfig(level=level, format=LOG_FORMAT)
        _configured = True
        logging.getLogger(__name__).debug(f"Logging configured at level {level}")
        return True


def is_configured() -> bool:
    return _configured
