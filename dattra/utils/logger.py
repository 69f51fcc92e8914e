"""
Logging configuration for the medical fee calculator.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Dict, Any
import sys


def setup_logger(
    name: str = 'dattra',
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file name (if None, uses name.log)
        log_dir: Log directory (if None, uses 'logs')
        config: Additional configuration options

    Returns:
        Configured logger instance
    """
    config = config or {}

    logger = logging.getLogger(name)
    logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    log_path = Path(log_dir or 'logs')

    if config.get('log_to_file', True):
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / (log_file or f'{name}.log'),
            maxBytes=config.get('max_log_size', 10 * 1024 * 1024),  # 10MB
            backupCount=config.get('backup_count', 5),
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    # Errors also go to their own file
    if config.get('separate_error_log', True):
        log_path.mkdir(parents=True, exist_ok=True)

        error_handler = logging.handlers.RotatingFileHandler(
            log_path / f'{name}_errors.log',
            maxBytes=config.get('max_log_size', 10 * 1024 * 1024),
            backupCount=config.get('backup_count', 5),
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        logger.addHandler(error_handler)

    logger.info(f"Logger '{name}' initialized with level {level}")

    return logger


def configure_library_loggers(level: str = 'WARNING'):
    """
    Configure logging levels for third-party libraries.

    Args:
        level: Logging level for libraries
    """
    library_loggers = [
        'streamlit',
        'watchdog',
        'urllib3',
    ]

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    for lib_name in library_loggers:
        logging.getLogger(lib_name).setLevel(numeric_level)
