"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any

from weightforge.constants import CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_config(name: str) -> Any:
    """Load a config file from the package config/ directory."""
    return load_json(CONFIG_DIR / name)
