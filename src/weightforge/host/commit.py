"""Writing a weight set back to host storage."""

import logging

from weightforge.constants import WEIGHT_EPSILON
from weightforge.core.errors import DegenerateWeightSet
from weightforge.host.interfaces import HistoryRecorder, WeightStore
from weightforge.weights.weight_set import WeightSet

logger = logging.getLogger(__name__)


def commit_weights(
    store: WeightStore,
    history: HistoryRecorder | None,
    point_id: int,
    weights: WeightSet,
    capacity: int | None = None,
    epsilon: float = WEIGHT_EPSILON,
) -> WeightSet:
    """Reduce *weights* to the slot count and write them.

    The slot count is the store's capacity, further limited by *capacity*
    when given.  History is recorded before the write.  Returns the reduced
    set that was written.  An empty or all-zero set is rejected before
    anything is recorded or written.
    """
    if not len(weights):
        raise DegenerateWeightSet(f"Vertex {point_id} would have no bone weights")
    slots = store.capacity if capacity is None else min(capacity, store.capacity)
    reduced = weights.reduce_to_capacity(slots, epsilon)
    if history is not None:
        history.record_before_mutation(point_id)
    store.set_weights(point_id, reduced.pairs())
    logger.debug("Committed %d bone weight(s) to vertex %d", len(reduced), point_id)
    return reduced
