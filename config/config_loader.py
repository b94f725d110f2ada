import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

_CONFIG_CACHE = {}


def load_config(path: str | None = None) -> dict:
    """
    Load YAML config with per-file cache.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    key = str(config_path)

    if key in _CONFIG_CACHE:
        return _CONFIG_CACHE[key]

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    logger.info("Loaded config %s", config_path)

    _CONFIG_CACHE[key] = data
    return data


def clear_config_cache():
    _CONFIG_CACHE.clear()
