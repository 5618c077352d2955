"""Logging configuration shared by the CLI and library entry points"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

BASE_LOGGER = "geoprobe"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


def resolve_log_level(verbose: bool = False, quiet: bool = False, silent: bool = False,
                      default: str = "WARNING") -> int:
    """Map verbosity flags to a logging level"""
    if silent:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return getattr(logging, str(default).upper(), logging.WARNING)


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger once per invocation.
    
    Console output goes to stdout at ``level``; an optional rotating log file
    (5MB max, 3 backups) always records DEBUG and above.
    """
    base_logger = logging.getLogger(BASE_LOGGER)
    base_logger.setLevel(logging.DEBUG if log_file else level)
    
    # Clear existing handlers to avoid duplication
    for handler in list(base_logger.handlers):
        base_logger.removeHandler(handler)
        handler.close()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    base_logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=5*1024*1024,  # 5MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        base_logger.addHandler(file_handler)
    
    return base_logger


def log_structured(logger: logging.Logger, level: str, message: str, **context):
    """Log with structured context data appended as ``key=value`` pairs"""
    log_level = getattr(logging, level.upper(), logging.INFO)
    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} | {context_str}"
    logger.log(log_level, message)
