"""Logging configuration."""

import logging
import os
import sys

from pydantic import BaseModel

PACKAGE_LOGGER = "toolcall_sanitizer"


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls, debug_mode: bool = False) -> "LogConfig":
        """Build a config from LOG_LEVEL, forcing DEBUG in debug mode."""
        if debug_mode:
            return cls(level="DEBUG")
        return cls(level=os.getenv("LOG_LEVEL", "INFO"))


def setup_logging(config: LogConfig | None = None) -> None:
    """Set up logging configuration for the application."""
    if config is None:
        config = LogConfig.from_env()

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(config.level.upper())

    # Set specific log levels for third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Module loggers inherit the package level set by setup_logging unless
    an explicit level is given.

    Args:
        name: Module name (typically __name__)
        level: Optional explicit level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(level.upper())

    return logger
