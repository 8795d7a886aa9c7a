import logging
import sys
import traceback

from colorlog import ColoredFormatter

LOGGER_NAME = "stack_deployer"


def setup_logger(debug_mode=False):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    formatter = ColoredFormatter(
        "%(log_color)s[%(levelname)s] %(message)s",
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "red,bg_white",
        }
    )

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    return logger


def print_stack_trace():
    """Log the current traceback when debug logging is active."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(traceback.format_exc())


def configure_logger(mode: str = "") -> logging.Logger:
    """
    Reconfigure the shared logger from a configuration ``mode`` value.

    Args:
        mode: "DEBUG" enables debug output, anything else keeps INFO.

    Returns:
        The reconfigured logger.
    """
    debug_mode = (mode or "").upper() == "DEBUG"
    setup_logger(debug_mode=debug_mode)
    if debug_mode:
        logger.debug("Debug mode is active.")
    return logger


# Logger defaults to INFO unless reconfigured from the deployer config.
logger = setup_logger(debug_mode=False)
