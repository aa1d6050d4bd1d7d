"""Logger module."""

import logging
import sys

import colorlog

loggers: dict[str, logging.Logger] = {}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_logger(
    name: str,
    log_handler: str = "stdout",
    log_level: str = "INFO",
    log_color: bool = False,
) -> logging.Logger:
    """Get logger.

    Args:
        name: The name of the logger.
        log_handler: The log handler type ('stdout' or 'stderr').
        log_level: The logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').
        log_color: Whether to use colored output.

    Returns:
        logging.Logger: Configured logger instance.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    streams = {"stdout": sys.stdout, "stderr": sys.stderr}
    if log_handler not in streams:
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    if log_level not in LOG_LEVELS:
        err_msg = f"Invalid log level: {log_level}"
        raise ValueError(err_msg)

    logger = logging.getLogger(name) if not log_color else colorlog.getLogger(name)

    if not log_color:
        handler = logging.StreamHandler(streams[log_handler])
    else:
        handler = colorlog.StreamHandler(streams[log_handler])

    level = LOG_LEVELS[log_level]

    logger.setLevel(level)
    handler.setLevel(level)

    if not log_color:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s %(asctime)s - %(name)s - %(levelname)s - %(message)s",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    loggers[name] = logger
    return logger


def set_log_level(log_level: str) -> None:
    """Change the level of every logger handed out by get_logger.

    Args:
        log_level: The logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').

    Raises:
        ValueError: If an invalid log level is provided.
    """
    if log_level not in LOG_LEVELS:
        err_msg = f"Invalid log level: {log_level}"
        raise ValueError(err_msg)

    level = LOG_LEVELS[log_level]
    for logger in loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


__all__ = ["LOG_LEVELS", "get_logger", "set_log_level"]
