"""Host collaborators the weight editor consumes.

The editor never owns mesh storage, the skeleton, picking or undo; a host
application provides objects satisfying these protocols.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from weightforge.core.math_utils import Vec3


@runtime_checkable
class WeightStore(Protocol):
    """Per-vertex bone weights with a fixed number of slots."""

    @property
    def capacity(self) -> int:
        ...

    def get_weights(self, point_id: int) -> list[tuple[int, float]]:
        ...

    def set_weights(self, point_id: int, pairs: Sequence[tuple[int, float]]) -> None:
        """Replace a vertex's weights.  *pairs* holds at most ``capacity``
        entries summing to 1.0."""
        ...


@runtime_checkable
class SkeletonTable(Protocol):
    """Bone names and vertex positions."""

    def name_of(self, influence_id: int) -> Optional[str]:
        ...

    def id_of(self, name: str) -> Optional[int]:
        ...

    def position_of(self, point_id: int) -> Vec3:
        ...


@runtime_checkable
class PickingService(Protocol):

    def nearest_point(self, cursor: Any) -> Optional[int]:
        ...

    def nearest_point_to_position(self, position: Vec3) -> Optional[int]:
        ...


@runtime_checkable
class HistoryRecorder(Protocol):

    def record_before_mutation(self, point_id: int) -> None:
        ...
