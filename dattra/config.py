"""
Configuration for the Dattra fee calculator.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

APP_NAME = "Dattra"
APP_VERSION = "0.1.0"
APP_SUBTITLE = "Cálculo de Honorários Médicos"

DEFAULT_CONFIG: Dict[str, Any] = {
    'calculator': {
        'anesthesia_rate': 0.30,
        'first_assistant_rate': 0.30,
        'other_assistant_rate': 0.20,
    },
    'validator': {
        'max_assistants': 5,
        'tolerance': 1e-6,
    },
    'procedures': {
        'table_path': None,  # None uses the bundled table
    },
    'history': {
        'history_file': 'data/historico.json',
        'max_entries': 500,
    },
    'report': {
        'organization': 'DATTRA',
        'output_dir': 'output',
    },
    'logging': {
        'level': 'INFO',
        'log_dir': 'logs',
        'log_to_file': True,
        'separate_error_log': True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration, overriding the defaults with a JSON file.

    Args:
        config_path: Path to config.json (None returns the defaults)

    Returns:
        Configuration dictionary with one section per component
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(config_path)
    logger = logging.getLogger('dattra.config')

    if not config_path.exists():
        error_msg = f"Config file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    with open(config_path, 'r', encoding='utf-8') as f:
        overrides = json.load(f)

    logger.info(f"Loaded configuration from: {config_path}")
    return _merge(DEFAULT_CONFIG, overrides)
