"""
Logging setup for scripts and notebooks using the package.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level: int = logging.INFO) -> logging.Logger:
    """
    Send the package's log records to the console.

    Calling it again only updates the level; no second handler is added.

    Args:
        log_level: Logging level.

    Returns:
        The ``kmeanspp`` logger.
    """
    logger = logging.getLogger('kmeanspp')
    logger.setLevel(log_level)

    console_handler = next(
        (h for h in logger.handlers if getattr(h, '_kmeanspp_console', False)),
        None,
    )
    if console_handler is None:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler._kmeanspp_console = True
        logger.addHandler(console_handler)
    console_handler.setLevel(log_level)

    return logger
