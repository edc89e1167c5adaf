"""Weight editing session for the currently selected vertex.

Wires the weight set, slider, prune, clipboard and mirror operations to the
host's storage, skeleton, picking and undo.  Every edit that should be
visible to the host is committed immediately, the way the interactive tool
behaves.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from weightforge.core.errors import InvalidOperation
from weightforge.core.events import EventBus, EventType
from weightforge.core.settings import EngineSettings
from weightforge.host.commit import commit_weights
from weightforge.host.interfaces import (
    HistoryRecorder,
    PickingService,
    SkeletonTable,
    WeightStore,
)
from weightforge.weights.clipboard import Clipboard
from weightforge.weights.mirror import MirrorResolver, MirrorResult
from weightforge.weights.normalization import (
    NormalizationEngine,
    NormalizationResult,
    normalize_plain,
)
from weightforge.weights.partition_slider import PartitionSlider
from weightforge.weights.prune import PruneFilter, PruneResult
from weightforge.weights.weight_set import Influence, WeightEntry, WeightSet

logger = logging.getLogger(__name__)


class WeightEditorSession:
    """Owns the weight set of one selected vertex at a time.

    The clipboard survives selection changes; the weight set and any slider
    drag do not.
    """

    def __init__(
        self,
        store: WeightStore,
        skeleton: SkeletonTable,
        picking: PickingService,
        history: Optional[HistoryRecorder] = None,
        settings: Optional[EngineSettings] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.store = store
        self.skeleton = skeleton
        self.picking = picking
        self.history = history
        self.settings = settings or EngineSettings.load()
        self.events = events or EventBus()

        self.engine = NormalizationEngine(self.settings.epsilon)
        self.pruner = PruneFilter(self.settings.prune_threshold, self.engine)
        self.clipboard = Clipboard()
        self.slider = PartitionSlider(handle_width=self.settings.slider_handle_width)
        self.mirror_resolver = MirrorResolver(
            store, skeleton, picking, history, self.settings,
        )

        self.point_id: Optional[int] = None
        self.weights: Optional[WeightSet] = None
        self._drag_recorded = False

    # ── Selection ─────────────────────────────────────────────────────

    @property
    def has_selection(self) -> bool:
        return self.point_id is not None

    def select_point(self, point_id: int) -> WeightSet:
        """Load *point_id*'s weights, replacing the current set."""
        self.weights = WeightSet.load(
            self.store.get_weights(point_id), self.settings.epsilon,
        )
        self.point_id = point_id
        self.slider.bind(self.weights)
        self._drag_recorded = False
        self.events.publish(EventType.SELECTION_CHANGED, point_id=point_id)
        return self.weights

    def pick(self, cursor: Any) -> Optional[int]:
        """Select the vertex nearest *cursor*.  Returns None on a miss."""
        point_id = self.picking.nearest_point(cursor)
        if point_id is None:
            return None
        self.select_point(point_id)
        return point_id

    def deselect(self) -> None:
        self.point_id = None
        self.weights = None
        self.slider.bind(None)
        self.events.publish(EventType.SELECTION_CHANGED, point_id=None)

    def refresh(self) -> None:
        """Re-read the selected vertex from the host, e.g. after undo/redo.

        Lock flags of bones still present are kept.
        """
        if self.point_id is None:
            return
        locked = {e.influence_id for e in self.weights if e.locked} if self.weights else set()
        self.select_point(self.point_id)
        for bid in locked:
            if bid in self.weights:
                self.weights.set_locked(bid, True)

    def influence(self, influence_id: int) -> Influence:
        name = self.skeleton.name_of(influence_id)
        return Influence(influence_id, name if name is not None else f"Bone {influence_id}")

    def rows(self) -> list[tuple[Influence, WeightEntry]]:
        """Bone and entry per row of the details table."""
        if self.weights is None:
            return []
        return [(self.influence(e.influence_id), e) for e in self.weights]

    def _require_weights(self) -> WeightSet:
        if self.weights is None or self.point_id is None:
            raise InvalidOperation("No vertex selected")
        return self.weights

    # ── Direct edits ──────────────────────────────────────────────────

    def set_weight(self, influence_id: int, value: float) -> WeightSet:
        """Type a new weight for one bone; the others rebalance around it."""
        weights = self._require_weights()
        weights.set_weight(influence_id, value)
        self._report(self.engine.normalize(weights))
        self.commit()
        return weights

    def toggle_lock(self, influence_id: int) -> bool:
        weights = self._require_weights()
        locked = weights.toggle_lock(influence_id)
        self.events.publish(
            EventType.WEIGHTS_CHANGED, point_id=self.point_id, weights=weights,
        )
        return locked

    def normalize(self) -> NormalizationResult:
        """Rebalance around the locked bones and commit."""
        weights = self._require_weights()
        result = self.engine.normalize(weights)
        self._report(result)
        self.commit()
        return result

    def prune(self, threshold: Optional[float] = None) -> PruneResult:
        weights = self._require_weights()
        result = self.pruner.prune(weights, threshold)
        if result.changed:
            self._report(result.normalization)
            self.commit()
        return result

    # ── Slider ────────────────────────────────────────────────────────

    def grab_boundary(self, boundary: int, token: Optional[int] = None) -> bool:
        self._require_weights()
        grabbed = self.slider.grab(boundary, token)
        if grabbed:
            self._drag_recorded = False
            self.events.publish(
                EventType.DRAG_STARTED, token=self.slider.token, boundary=boundary,
            )
        return grabbed

    def drag_boundary(self, delta: float, token: Optional[int] = None) -> bool:
        """Move the grabbed boundary by a weight delta and commit.

        History is recorded once per gesture, on the first change.
        """
        if self.weights is None:
            return False
        changed = self.slider.drag(delta, token)
        if changed:
            self.commit(record_history=not self._drag_recorded)
            self._drag_recorded = True
        return changed

    def release_boundary(self, token: Optional[int] = None) -> bool:
        released = self.slider.release(token)
        if released:
            self.events.publish(EventType.DRAG_ENDED, token=self.slider.token)
        return released

    # ── Clipboard ─────────────────────────────────────────────────────

    def copy_weights(self) -> int:
        """Copy the selected vertex's weights.  Returns the bone count."""
        weights = self._require_weights()
        self.clipboard.copy(weights)
        logger.info("Copied weights from vertex %d", self.point_id)
        self.events.publish(EventType.CLIPBOARD_CHANGED, count=len(self.clipboard))
        return len(self.clipboard)

    def paste_weights(self) -> WeightSet:
        """Replace the selected vertex's weights with the clipboard."""
        self._require_weights()
        pasted = self.clipboard.paste()
        self.weights = pasted
        self.slider.bind(pasted)
        self.commit()
        logger.info("Pasted weights to vertex %d", self.point_id)
        return pasted

    # ── Mirror ────────────────────────────────────────────────────────

    def mirror(self) -> MirrorResult:
        """Copy the selected vertex's weights onto its mirror vertex.

        Unresolved bones come back in ``MirrorResult.warnings``.
        """
        weights = self._require_weights()
        result = self.mirror_resolver.mirror(self.point_id, weights)
        if result.target_point == self.point_id:
            self.refresh()
        self.events.publish(
            EventType.MIRROR_APPLIED,
            source=result.source_point,
            target=result.target_point,
            warnings=result.warnings,
        )
        return result

    # ── Commit ────────────────────────────────────────────────────────

    def commit(self, record_history: bool = True) -> WeightSet:
        """Write the current set to the host.  Returns what was written.

        A set left short of the budget (only locked bones remain) is scaled
        in place to match the written weights, keeping order and locks.
        """
        weights = self._require_weights()
        if weights.dirty:
            self._report(self.engine.normalize(weights))
        written = commit_weights(
            self.store,
            self.history if record_history else None,
            self.point_id,
            weights,
            self.settings.capacity,
            self.settings.epsilon,
        )
        if not weights.is_settled(self.settings.settle_tolerance):
            normalize_plain(weights, self.settings.epsilon)
            self.events.publish(
                EventType.WEIGHTS_CHANGED, point_id=self.point_id, weights=weights,
            )
        self.events.publish(
            EventType.WEIGHTS_COMMITTED, point_id=self.point_id, pairs=written.pairs(),
        )
        return written

    def _report(self, result: Optional[NormalizationResult]) -> None:
        if result is not None and result.locked_overflow:
            self.events.publish(
                EventType.LOCK_BUDGET_EXCEEDED,
                point_id=self.point_id,
                locked_total=self.weights.locked_total(),
            )
