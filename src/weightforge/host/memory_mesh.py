"""In-memory skinned mesh implementing every host collaborator.

Stores weights as fixed-slot ``(V, K)`` arrays, the layout GPU skinning
buffers use.  Intended for headless tools and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.spatial import cKDTree

from weightforge.constants import COMMIT_TOLERANCE
from weightforge.core.math_utils import Vec3, as_vec3

logger = logging.getLogger(__name__)

# World-space radius for cursor picking
PICK_RADIUS = 0.1


@dataclass
class UndoRecord:
    """Slot arrays of one vertex captured before a write."""
    point_id: int
    bone_indices: np.ndarray
    weights: np.ndarray


class InMemorySkinnedMesh:
    """Vertex positions, a bone name table and per-vertex weight slots.

    Parameters
    ----------
    positions : (V, 3) array-like
        Rest positions of the vertices.
    bone_names : sequence of str
        Bone name per bone index.
    bone_indices : (V, K) int array-like
        Bone index per weight slot.
    weights : (V, K) float array-like
        Weight per slot; unused slots hold 0.
    commit_tolerance : float
        Largest |sum - 1| :meth:`set_weights` accepts.
    """

    def __init__(
        self,
        positions,
        bone_names: Sequence[str],
        bone_indices,
        weights,
        pick_radius: float = PICK_RADIUS,
        commit_tolerance: float = COMMIT_TOLERANCE,
    ) -> None:
        self.positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        self.bone_indices = np.array(bone_indices, dtype=np.int32, ndmin=2)
        self.weights = np.array(weights, dtype=np.float64, ndmin=2)
        if self.bone_indices.shape != self.weights.shape:
            raise ValueError(
                f"bone_indices {self.bone_indices.shape} and weights "
                f"{self.weights.shape} differ in shape"
            )
        if len(self.weights) != len(self.positions):
            raise ValueError(
                f"{len(self.weights)} weight rows for {len(self.positions)} vertices"
            )
        self.bone_names = list(bone_names)
        self._name_to_id = {name: i for i, name in enumerate(self.bone_names)}
        self.pick_radius = pick_radius
        self.commit_tolerance = commit_tolerance
        self._tree = cKDTree(self.positions)
        self.history: list[UndoRecord] = []

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    # ── WeightStore ───────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self.weights.shape[1]

    def get_weights(self, point_id: int) -> list[tuple[int, float]]:
        self._check_point(point_id)
        return [
            (int(b), float(w))
            for b, w in zip(self.bone_indices[point_id], self.weights[point_id])
            if w > 0.0
        ]

    def set_weights(self, point_id: int, pairs: Sequence[tuple[int, float]]) -> None:
        self._check_point(point_id)
        if len(pairs) > self.capacity:
            raise ValueError(
                f"{len(pairs)} weights exceed the {self.capacity} slots per vertex"
            )
        total = sum(w for _, w in pairs)
        if pairs and abs(total - 1.0) > self.commit_tolerance:
            raise ValueError(f"Weights for vertex {point_id} sum to {total:.6f}")
        for bid, w in pairs:
            if not 0 <= bid < len(self.bone_names):
                raise ValueError(f"Unknown bone index {bid}")
            if w < 0.0:
                raise ValueError(f"Negative weight {w} for bone {bid}")

        self.bone_indices[point_id] = 0
        self.weights[point_id] = 0.0
        for slot, (bid, w) in enumerate(pairs):
            self.bone_indices[point_id, slot] = bid
            self.weights[point_id, slot] = w

    # ── SkeletonTable ─────────────────────────────────────────────────

    def name_of(self, influence_id: int) -> Optional[str]:
        if 0 <= influence_id < len(self.bone_names):
            return self.bone_names[influence_id]
        return None

    def id_of(self, name: str) -> Optional[int]:
        return self._name_to_id.get(name)

    def position_of(self, point_id: int) -> Vec3:
        self._check_point(point_id)
        return self.positions[point_id].copy()

    # ── PickingService ────────────────────────────────────────────────

    def nearest_point(self, cursor) -> Optional[int]:
        """Nearest vertex to a world-space cursor within ``pick_radius``."""
        dist, idx = self._tree.query(as_vec3(cursor))
        if not np.isfinite(dist) or dist > self.pick_radius:
            return None
        return int(idx)

    def nearest_point_to_position(self, position: Vec3) -> Optional[int]:
        if self.vertex_count == 0:
            return None
        _, idx = self._tree.query(as_vec3(position))
        return int(idx)

    # ── HistoryRecorder ───────────────────────────────────────────────

    def record_before_mutation(self, point_id: int) -> None:
        self._check_point(point_id)
        self.history.append(UndoRecord(
            point_id=point_id,
            bone_indices=self.bone_indices[point_id].copy(),
            weights=self.weights[point_id].copy(),
        ))

    def undo(self) -> Optional[int]:
        """Restore the most recent record.  Returns the vertex restored."""
        if not self.history:
            return None
        record = self.history.pop()
        self.bone_indices[record.point_id] = record.bone_indices
        self.weights[record.point_id] = record.weights
        logger.debug("Undid weight write on vertex %d", record.point_id)
        return record.point_id

    def _check_point(self, point_id: int) -> None:
        if not 0 <= point_id < self.vertex_count:
            raise IndexError(f"Vertex {point_id} out of range (0..{self.vertex_count - 1})")
