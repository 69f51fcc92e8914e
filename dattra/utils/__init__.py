"""
Utility modules for parsing, validation, history and logging.
"""

from .history import HistoryStore
from .validator import DataValidator
from .logger import setup_logger

__all__ = ['HistoryStore', 'DataValidator', 'setup_logger']
