"""Left/right symmetry: copy a vertex's weights onto its mirror vertex.

The mirror vertex is found by reflecting the source position through one
axis plane.  Each bone is swapped for its opposite-side counterpart by
name; bones without a side marker are treated as centre bones and kept.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from weightforge.core.errors import (
    DegenerateWeightSet,
    MirrorBoneUnresolved,
    MirrorTargetNotFound,
)
from weightforge.core.math_utils import mirror_position, squared_distance
from weightforge.core.settings import EngineSettings
from weightforge.host.commit import commit_weights
from weightforge.host.interfaces import (
    HistoryRecorder,
    PickingService,
    SkeletonTable,
    WeightStore,
)
from weightforge.weights.normalization import normalize_plain
from weightforge.weights.weight_set import WeightEntry, WeightSet

logger = logging.getLogger(__name__)

# Tried in order; the first pattern that matches decides the mirrored name.
_SIDE_PATTERNS = (
    (re.compile(r"Left|Right"), {"Left": "Right", "Right": "Left"}),
    (re.compile(r"_[LR](?![A-Za-z])"), {"_L": "_R", "_R": "_L"}),
    (re.compile(r"\.[LR]$"), {".L": ".R", ".R": ".L"}),
)


def mirror_bone_name(name: str) -> str:
    """Opposite-side bone name, or *name* itself for a centre bone."""
    for pattern, swap in _SIDE_PATTERNS:
        mirrored, count = pattern.subn(lambda m: swap[m.group(0)], name)
        if count:
            return mirrored
    return name


@dataclass
class MirrorResult:
    """Weights written to the mirror vertex and bones that were dropped."""
    source_point: int
    target_point: int
    weights: WeightSet
    warnings: list[MirrorBoneUnresolved] = field(default_factory=list)


class MirrorResolver:
    """Resolves mirror vertices and bones against the host."""

    def __init__(
        self,
        store: WeightStore,
        skeleton: SkeletonTable,
        picking: PickingService,
        history: HistoryRecorder | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self.store = store
        self.skeleton = skeleton
        self.picking = picking
        self.history = history
        self.settings = settings or EngineSettings.load()

    def find_target(self, point_id: int) -> int:
        """Vertex sitting at the mirrored position of *point_id*."""
        source = self.skeleton.position_of(point_id)
        mirrored = mirror_position(source, self.settings.mirror_axis)
        candidate = self.picking.nearest_point_to_position(mirrored)
        if candidate is None:
            raise MirrorTargetNotFound(point_id, mirrored)
        dist_sq = squared_distance(self.skeleton.position_of(candidate), mirrored)
        if dist_sq >= self.settings.mirror_tolerance_sq:
            raise MirrorTargetNotFound(point_id, mirrored)
        return candidate

    def mirror_weights(
        self, weights: WeightSet,
    ) -> tuple[WeightSet, list[MirrorBoneUnresolved]]:
        """Swap every bone for its mirrored counterpart.

        Bones whose mirrored name is unknown are dropped and reported.
        The result is unlocked and not yet normalized.
        """
        merged: dict[int, float] = {}
        warnings: list[MirrorBoneUnresolved] = []
        for entry in weights:
            name = self.skeleton.name_of(entry.influence_id)
            if name is None:
                name = f"Bone {entry.influence_id}"
            mirrored_name = mirror_bone_name(name)
            mirrored_id = self.skeleton.id_of(mirrored_name)
            if mirrored_id is None:
                warning = MirrorBoneUnresolved(entry.influence_id, name, mirrored_name)
                logger.warning("Mirror skipped bone: %s", warning)
                warnings.append(warning)
                continue
            merged[mirrored_id] = merged.get(mirrored_id, 0.0) + entry.weight
        return WeightSet(WeightEntry(bid, w) for bid, w in merged.items()), warnings

    def mirror(self, point_id: int, weights: WeightSet) -> MirrorResult:
        """Write the mirrored copy of *weights* onto the mirror of *point_id*."""
        target = self.find_target(point_id)
        mirrored, warnings = self.mirror_weights(weights)
        if not normalize_plain(mirrored, self.settings.epsilon):
            raise DegenerateWeightSet(
                f"No bone of vertex {point_id} could be mirrored"
            )
        written = commit_weights(
            self.store, self.history, target, mirrored,
            self.settings.capacity, self.settings.epsilon,
        )
        logger.info(
            "Mirrored %d bone weight(s) from vertex %d to vertex %d (%d skipped)",
            len(written), point_id, target, len(warnings),
        )
        return MirrorResult(
            source_point=point_id,
            target_point=target,
            weights=written,
            warnings=warnings,
        )
