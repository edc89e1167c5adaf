"""Engine settings loaded from config with constant fallbacks."""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from weightforge.constants import (
    DEFAULT_CAPACITY,
    DEFAULT_MIRROR_AXIS,
    DEFAULT_PRUNE_THRESHOLD,
    EDITOR_CONFIG_NAME,
    MIRROR_TOLERANCE_SQ,
    SETTLE_TOLERANCE,
    SLIDER_HANDLE_WIDTH,
    WEIGHT_EPSILON,
)
from weightforge.core.config_loader import load_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """Tunable numbers shared by every weight editing operation."""
    capacity: int = DEFAULT_CAPACITY
    epsilon: float = WEIGHT_EPSILON
    settle_tolerance: float = SETTLE_TOLERANCE
    prune_threshold: float = DEFAULT_PRUNE_THRESHOLD
    mirror_axis: int = DEFAULT_MIRROR_AXIS
    mirror_tolerance_sq: float = MIRROR_TOLERANCE_SQ
    slider_handle_width: float = SLIDER_HANDLE_WIDTH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineSettings":
        """Build settings from a config dict, ignoring unknown keys."""
        settings = cls()
        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown setting: %s", key)
                continue
            default = getattr(settings, key)
            overrides[key] = type(default)(value)
        settings = replace(settings, **overrides)
        if settings.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {settings.capacity}")
        if settings.mirror_axis not in (0, 1, 2):
            raise ValueError(f"mirror_axis must be 0, 1 or 2, got {settings.mirror_axis}")
        return settings

    @classmethod
    def load(cls, name: str = EDITOR_CONFIG_NAME) -> "EngineSettings":
        """Load settings from config.  Falls back to defaults on failure."""
        try:
            data = load_config(name)
            return cls.from_dict(data)
        except (FileNotFoundError, ValueError, TypeError) as e:
            logger.warning("Weight editor config unusable, using defaults: %s", e)
            return cls()
