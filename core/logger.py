"""
Service logger setup

Applies LoggingConfig to the root logger once per process so every module
can keep using ``logging.getLogger(__name__)``.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("order_service")
"""

import logging
from typing import Optional

from core.config import LoggingConfig

_configured = False


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Install handlers on the root logger (idempotent)"""
    global _configured
    if _configured:
        return

    config = config or LoggingConfig.from_env()
    formatter = logging.Formatter(config.log_format)
    root = logging.getLogger()
    root.setLevel(config.log_level.upper())

    if config.enable_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured = True


def setup_service_logger(service_name: str, config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Configure logging and return the named service logger"""
    configure_logging(config)
    return logging.getLogger(service_name)
