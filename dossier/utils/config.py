"""
Settings loader.

Non-secret defaults live in dossier/config/defaults.yaml and are loaded with
OmegaConf. Set DOSSIER_CONFIG_PATH to point at an alternative file.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "defaults.yaml"


@lru_cache(maxsize=None)
def _load(config_path: str) -> Dict[str, Any]:
    return OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)


def load_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the settings file as a plain nested dict.

    Args:
        config_path: Optional path to a YAML file (defaults to DOSSIER_CONFIG_PATH
                     env variable, then the packaged defaults.yaml)

    Returns:
        Nested dict with env interpolations resolved
    """
    if config_path is None:
        config_path = Path(os.getenv("DOSSIER_CONFIG_PATH") or DEFAULT_CONFIG_PATH)
    return _load(str(config_path))


def get_setting(dotted_key: str, config_path: Optional[Path] = None) -> Any:
    """
    Look up a single setting by dotted key, e.g. get_setting("export.raster_scale").

    Raises:
        KeyError: If any segment of the key is missing
    """
    node: Any = load_settings(config_path)
    for part in dotted_key.split("."):
        node = node[part]
    return node
