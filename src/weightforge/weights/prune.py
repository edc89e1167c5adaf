"""Threshold pruning of small unlocked weights."""

import logging
from dataclasses import dataclass, field

from weightforge.constants import DEFAULT_PRUNE_THRESHOLD
from weightforge.weights.normalization import NormalizationEngine, NormalizationResult
from weightforge.weights.weight_set import WeightEntry, WeightSet

logger = logging.getLogger(__name__)


@dataclass
class PruneResult:
    """Entries removed by a prune and the normalization that followed."""
    removed: list[WeightEntry] = field(default_factory=list)
    normalization: NormalizationResult | None = None

    @property
    def changed(self) -> bool:
        return bool(self.removed)


class PruneFilter:
    """Removes unlocked bones below a threshold, then rebalances.

    Locked bones are never pruned.  A prune that would empty the set is
    skipped entirely.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_PRUNE_THRESHOLD,
        engine: NormalizationEngine | None = None,
    ) -> None:
        self.threshold = threshold
        self.engine = engine or NormalizationEngine()

    def prune(self, weights: WeightSet, threshold: float | None = None) -> PruneResult:
        limit = self.threshold if threshold is None else threshold
        doomed = [
            e.influence_id for e in weights
            if not e.locked and e.weight < limit
        ]
        if not doomed:
            return PruneResult()
        if len(doomed) == len(weights):
            logger.info(
                "Prune at %.4f would remove every bone; skipped", limit,
            )
            return PruneResult()

        removed = weights.remove(doomed)
        logger.info("Pruned %d bone(s) below %.4f", len(removed), limit)
        return PruneResult(removed=removed, normalization=self.engine.normalize(weights))
