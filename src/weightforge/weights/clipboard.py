"""Copy/paste of a whole vertex's weights."""

import logging

from weightforge.core.errors import EmptyClipboard
from weightforge.weights.weight_set import WeightEntry, WeightSet

logger = logging.getLogger(__name__)


class Clipboard:
    """Holds one owned snapshot of (bone, weight) pairs.

    Lock flags are not copied; pasted entries always start unlocked.
    """

    def __init__(self) -> None:
        self._pairs: tuple[tuple[int, float], ...] | None = None

    @property
    def has_content(self) -> bool:
        return bool(self._pairs)

    def __len__(self) -> int:
        """Number of bones held."""
        return len(self._pairs) if self._pairs else 0

    def copy(self, weights: WeightSet) -> tuple[tuple[int, float], ...]:
        self._pairs = tuple(weights.pairs())
        logger.info("Copied %d bone weight(s)", len(self._pairs))
        return self._pairs

    def paste(self) -> WeightSet:
        """Return a fresh, unlocked weight set built from the snapshot."""
        if not self._pairs:
            raise EmptyClipboard("Nothing has been copied")
        return WeightSet(WeightEntry(bid, w) for bid, w in self._pairs)

    def clear(self) -> None:
        self._pairs = None
