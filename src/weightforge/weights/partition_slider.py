"""Two-sided partition slider over a vertex's weight budget.

The weights are laid out as contiguous spans on [0, 1] in set order.
Boundary ``i`` sits between entry ``i`` and entry ``i + 1``.  Dragging a
boundary moves weight between the nearest unlocked entry on its left and
the nearest unlocked entry on its right, skipping locked entries in between
("smart lock").  The transfer is strictly two-party, so the total is
conserved without a normalization pass.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from weightforge.constants import SLIDER_HANDLE_WIDTH
from weightforge.weights.weight_set import WeightSet

logger = logging.getLogger(__name__)

_slider_tokens = itertools.count(1)


@dataclass(frozen=True)
class DragSession:
    """A grabbed boundary and the slider that owns the gesture."""
    boundary: int
    token: int


def find_unlocked(weights: WeightSet, start: int, leftward: bool) -> Optional[int]:
    """Index of the nearest unlocked entry scanning from *start*, or None."""
    if leftward:
        indices = range(min(start, len(weights) - 1), -1, -1)
    else:
        indices = range(max(start, 0), len(weights))
    for i in indices:
        if not weights[i].locked:
            return i
    return None


def transfer(weights: WeightSet, left: int, right: int, delta: float) -> bool:
    """Move *delta* of weight from entry *right* to entry *left*.

    A side that would go negative is clamped at zero and the overflow is
    passed through to the other side, keeping ``left + right`` constant.
    Returns True if either weight changed.
    """
    old_left = weights[left].weight
    old_right = weights[right].weight
    new_left = old_left + delta
    new_right = old_right - delta

    if new_left < 0.0:
        new_left, new_right = 0.0, old_left + old_right
    elif new_right < 0.0:
        new_left, new_right = old_left + old_right, 0.0

    if new_left == old_left and new_right == old_right:
        return False
    weights.assign(left, new_left)
    weights.assign(right, new_right)
    return True


class PartitionSlider:
    """Drag state machine for one partition slider widget.

    States are ``Idle`` (``drag_session is None``) and ``Dragging``.  Only
    events carrying this slider's token affect it, so two sliders on screen
    at once cannot disturb each other's gesture.
    """

    def __init__(
        self,
        weights: Optional[WeightSet] = None,
        handle_width: float = SLIDER_HANDLE_WIDTH,
    ) -> None:
        self.token = next(_slider_tokens)
        self.weights = weights
        self.handle_width = handle_width
        self.drag_session: Optional[DragSession] = None
        # Called after every drag update that changed a weight
        self.on_changed: Optional[Callable[[], None]] = None

    @property
    def dragging(self) -> bool:
        return self.drag_session is not None

    def bind(self, weights: Optional[WeightSet]) -> None:
        """Point the slider at a different weight set, dropping any drag."""
        self.weights = weights
        self.drag_session = None

    # ── Boundary eligibility ──────────────────────────────────────────

    @property
    def boundary_count(self) -> int:
        if self.weights is None:
            return 0
        return max(len(self.weights) - 1, 0)

    def targets(self, boundary: int) -> Optional[tuple[int, int]]:
        """(left, right) entry indices a drag of *boundary* would move."""
        if not 0 <= boundary < self.boundary_count:
            return None
        left = find_unlocked(self.weights, boundary, leftward=True)
        right = find_unlocked(self.weights, boundary + 1, leftward=False)
        if left is None or right is None:
            return None
        return left, right

    def can_grab(self, boundary: int) -> bool:
        return self.targets(boundary) is not None

    def grabbable_boundaries(self) -> list[int]:
        return [b for b in range(self.boundary_count) if self.can_grab(b)]

    # ── State machine ─────────────────────────────────────────────────

    def _owns(self, token: Optional[int]) -> bool:
        return token is None or token == self.token

    def grab(self, boundary: int, token: Optional[int] = None) -> bool:
        """Start dragging *boundary*.  Ignored while already dragging."""
        if not self._owns(token) or self.dragging:
            return False
        if not self.can_grab(boundary):
            return False
        self.drag_session = DragSession(boundary=boundary, token=self.token)
        logger.debug("Slider %d grabbed boundary %d", self.token, boundary)
        return True

    def drag(self, delta: float, token: Optional[int] = None) -> bool:
        """Apply a weight delta to the grabbed boundary (positive = rightward).

        Returns True if any weight changed.
        """
        if not self._owns(token) or not self.dragging:
            return False
        pair = self.targets(self.drag_session.boundary)
        if pair is None:
            return False
        changed = transfer(self.weights, pair[0], pair[1], delta)
        if changed and self.on_changed:
            self.on_changed()
        return changed

    def release(self, token: Optional[int] = None) -> bool:
        """End the drag.  Deltas already applied stay applied."""
        if not self._owns(token) or not self.dragging:
            return False
        logger.debug(
            "Slider %d released boundary %d", self.token, self.drag_session.boundary,
        )
        self.drag_session = None
        return True

    # ── Pixel layout ──────────────────────────────────────────────────

    def segments(self, width: float) -> list[tuple[float, float]]:
        """(start_x, span) of each entry for a bar *width* pixels wide."""
        if self.weights is None:
            return []
        spans = []
        x = 0.0
        for entry in self.weights:
            span = entry.weight * width
            spans.append((x, span))
            x += span
        return spans

    def boundary_positions(self, width: float) -> list[float]:
        return [start + span for start, span in self.segments(width)[:-1]]

    def boundary_at(self, x: float, width: float) -> Optional[int]:
        """Grabbable boundary whose handle contains pixel *x*, nearest first."""
        half = self.handle_width / 2.0
        best = None
        best_dist = half
        for boundary, pos in enumerate(self.boundary_positions(width)):
            dist = abs(x - pos)
            if dist <= best_dist and self.can_grab(boundary):
                best = boundary
                best_dist = dist
        return best

    # ── Pointer events ────────────────────────────────────────────────

    def on_mouse_press(self, x: float, width: float) -> bool:
        """Handle mouse press. Returns True if a boundary was grabbed."""
        if width <= 0.0 or self.dragging:
            return False
        boundary = self.boundary_at(x, width)
        if boundary is None:
            return False
        return self.grab(boundary)

    def on_mouse_drag(self, dx: float, width: float) -> bool:
        """Handle mouse drag by *dx* pixels. Returns True if weights changed."""
        if width <= 0.0:
            return False
        return self.drag(dx / width)

    def on_mouse_release(self) -> bool:
        return self.release()
