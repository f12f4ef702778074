"""
Application-wide logging setup.
"""

import logging
import sys

HANDLER_NAME = "arsmooth-console"


def setup_logging(verbose: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler (for terminal output)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Repeated setup replaces our handler instead of stacking another one
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)

    # Per-frame smoother logs are only interesting when debugging
    logging.getLogger('arsmooth').setLevel(level)
    logging.getLogger('arsmooth.filters').setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger('arsmooth.tracking').setLevel(level)
