"""
Dattra - calculator for AIH medical fees (honorários médicos).
"""

from .config import APP_NAME, APP_VERSION, load_config

__version__ = APP_VERSION

__all__ = ['APP_NAME', 'APP_VERSION', 'load_config', '__version__']
