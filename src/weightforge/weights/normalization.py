"""Lock-aware rebalancing of a vertex's weight budget.

Locked bones keep their weight; unlocked bones are scaled together so the
whole set sums to 1.0 again, each keeping its share relative to the others.
"""

import logging
from dataclasses import dataclass

from weightforge.constants import WEIGHT_EPSILON
from weightforge.weights.weight_set import WeightSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of one normalization pass.

    locked_overflow : locked bones fill (or exceed) the budget and every
        unlocked bone was forced to zero.  The set is valid but the caller
        should tell the user the lock configuration leaves nothing to edit.
    unallocated : budget left unassigned because the set has no unlocked
        bone to receive it.
    """
    locked_overflow: bool = False
    unallocated: float = 0.0

    @property
    def clean(self) -> bool:
        return not self.locked_overflow and self.unallocated <= WEIGHT_EPSILON


class NormalizationEngine:
    """Redistributes unlocked weights around the locked budget."""

    def __init__(self, epsilon: float = WEIGHT_EPSILON) -> None:
        self.epsilon = epsilon

    def normalize(self, weights: WeightSet) -> NormalizationResult:
        """Rebalance *weights* in place and clear its dirty flag."""
        result = self._rebalance(weights)
        weights.dirty = False
        return result

    def _rebalance(self, weights: WeightSet) -> NormalizationResult:
        unlocked = weights.unlocked_indices()
        locked_total = weights.locked_total()

        if locked_total >= 1.0 - self.epsilon:
            for i in unlocked:
                weights.assign(i, 0.0)
            if unlocked or locked_total > 1.0 + self.epsilon:
                logger.warning(
                    "Locked bones hold %.4f of the budget; %d unlocked bone(s) zeroed",
                    locked_total, len(unlocked),
                )
                return NormalizationResult(locked_overflow=True)
            return NormalizationResult()

        budget = 1.0 - locked_total
        if not unlocked:
            logger.warning(
                "No unlocked bones to receive the remaining %.4f of the budget", budget,
            )
            return NormalizationResult(unallocated=budget)

        unlocked_total = weights.unlocked_total()
        if unlocked_total > self.epsilon:
            scale = budget / unlocked_total
            for i in unlocked:
                weights.assign(i, weights[i].weight * scale)
        else:
            # All unlocked weights are zero: hand the budget to the first one
            weights.assign(unlocked[0], budget)
            for i in unlocked[1:]:
                weights.assign(i, 0.0)
        return NormalizationResult()


def normalize_plain(weights: WeightSet, epsilon: float = WEIGHT_EPSILON) -> bool:
    """Scale every entry, locked or not, so the set sums to 1.0.

    Returns False (leaving the set untouched) when there is nothing to scale.
    """
    total = weights.total_weight()
    if total <= epsilon:
        return False
    for i, entry in enumerate(weights.entries):
        weights.assign(i, entry.weight / total)
    weights.dirty = False
    return True
