"""
Configuration Discovery
=======================

Looks up compression options for a project: an explicit file, or the first
match found walking upwards from a start directory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pipeline_configs import CompressionConfig, resolve_config
from pipeline_errors import ConfigurationError

logger = logging.getLogger(__name__)

PACKAGE_JSON_KEY = 'compress'

SEARCH_PLACES = (
    'package.json',
    '.compressrc',
    '.compressrc.json',
    'compress.config.json',
)


def _read_json(path: Path) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}", cause=e)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}", cause=e)


def load_config_file(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Load compression options from a single file.

    ``package.json`` files contribute their ``compress`` key only; a
    ``package.json`` without one yields ``None``.
    """
    path = Path(path)
    data = _read_json(path)
    if path.name == 'package.json':
        data = data.get(PACKAGE_JSON_KEY) if isinstance(data, dict) else None
        if data is None:
            return None
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def search_config(start_dir: Union[str, Path, None] = None,
                  stop_dir: Union[str, Path, None] = None) -> Optional[Tuple[Path, Dict[str, Any]]]:
    """
    Search ``start_dir`` and its parents for compression options.

    Args:
        start_dir: Directory to start from (defaults to the working directory)
        stop_dir: Last directory to inspect before giving up

    Returns:
        ``(path, options)`` for the first match, or ``None``
    """
    current = Path(start_dir or Path.cwd()).resolve()
    stop = Path(stop_dir).resolve() if stop_dir else None

    while True:
        for name in SEARCH_PLACES:
            candidate = current / name
            if not candidate.is_file():
                continue
            options = load_config_file(candidate)
            if options is not None:
                logger.info(f"Using compression config from {candidate}")
                return candidate, options
        if current == stop or current.parent == current:
            return None
        current = current.parent


def load_config(config_path: Union[str, Path, None] = None,
                search_from: Union[str, Path, None] = None,
                overrides: Optional[Dict[str, Any]] = None) -> CompressionConfig:
    """
    Resolve the configuration for a run.

    Raises:
        ConfigurationError: if the config file is missing, unreadable or invalid
    """
    discovered: Optional[Dict[str, Any]] = None
    if config_path is not None:
        if not Path(config_path).is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
        discovered = load_config_file(config_path)
    else:
        found = search_config(search_from)
        if found is None:
            logger.debug("No compression config found, using defaults")
        else:
            discovered = found[1]
    return resolve_config(discovered, overrides)
