"""Logging infrastructure for repowatch.

Every module logs below the "repowatch" logger (see get_logger()); the
CLI configures that one logger once with setup_logger().
"""

import logging
import logging.handlers
import os

LOGGER_PREFIX = "repowatch"

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Rotation of the file handler
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def setup_logger(
    name: str = LOGGER_PREFIX,
    log_dir: str = "/var/log/repowatch",
    level: str = "INFO",
    file_logging: bool = False,
    console_logging: bool = True,
) -> logging.Logger:
    """Configure the repowatch logger.

    Poll start and settlement are logged at INFO, each probe at DEBUG.

    Args:
        name: Logger name, "repowatch" to cover every module
        log_dir: Directory of the rotating <name>.log file
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        file_logging: Also log to a file in log_dir
        console_logging: Log to stderr

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a logging level name
        OSError: If log_dir cannot be created
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    logger = logging.getLogger(name)
    logger.setLevel(level_value)

    # Handlers are only attached on first setup
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []

    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{name}.log"),
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUP_COUNT,
            )
        )

    if console_logging:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the repowatch namespace.

    Args:
        name: Component name (e.g. "poller" or "wait.rpm")

    Returns:
        Logger instance
    """
    if name == LOGGER_PREFIX or name.startswith(LOGGER_PREFIX + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")
