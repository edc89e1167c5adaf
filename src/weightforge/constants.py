"""Shared constants and paths for weightforge."""

from pathlib import Path

# Package paths
PACKAGE_ROOT = Path(__file__).parent
CONFIG_DIR = PACKAGE_ROOT / "config"
EDITOR_CONFIG_NAME = "weight_editor.json"

# Weight budget
WEIGHT_EPSILON = 1e-4          # weights at or below this are treated as absent
SETTLE_TOLERANCE = 1e-3        # |sum - 1| allowed for a settled set
COMMIT_TOLERANCE = 1e-3        # |sum - 1| accepted by host storage

# Host storage holds at most this many influences per vertex
DEFAULT_CAPACITY = 4

# Prune
DEFAULT_PRUNE_THRESHOLD = 0.01

# Mirror: axis index negated to find the opposite vertex (0=x, 1=y, 2=z)
DEFAULT_MIRROR_AXIS = 0
MIRROR_TOLERANCE_SQ = 1e-4

# Partition slider (pixels)
SLIDER_HANDLE_WIDTH = 10.0
