"""
Logging configuration for hop.

Quiet by default: the terminal only shows what the commands print.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path


def configure_quiet_mode(quiet: bool = True):
    """
    Keep log records and Python warnings off the terminal.

    Args:
        quiet: If True, suppress verbose output. If False, show everything.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("hop").setLevel(logging.WARNING)
    else:
        warnings.filterwarnings("default")
        logging.getLogger("hop").setLevel(logging.NOTSET)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger("hop").setLevel(logging.DEBUG)


def configure_ops_log(log_dir):
    """Configure a persistent operations log.

    Writes to {log_dir}/hop-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of --verbose.
    Returns the handler so it can be removed again.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "hop-ops.log"

    hop_logger = logging.getLogger("hop")
    for existing in hop_logger.handlers:
        if (isinstance(existing, RotatingFileHandler)
                and Path(existing.baseFilename) == log_path.resolve()):
            return existing

    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    hop_logger.addHandler(handler)
    # Ensure hop logger allows INFO through even in quiet mode
    if hop_logger.level == logging.NOTSET or hop_logger.level > logging.INFO:
        hop_logger.setLevel(logging.INFO)

    return handler
