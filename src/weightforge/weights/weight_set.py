"""Per-vertex ordered collection of bone weights with lock flags.

A WeightSet is the unit every editing operation works on.  Entries are
immutable values; the set replaces an entry when its weight or lock flag
changes, so copies taken by the clipboard or the mirror never alias a live
set.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, Iterator

from weightforge.constants import SETTLE_TOLERANCE, WEIGHT_EPSILON
from weightforge.core.errors import DegenerateWeightSet, InvalidOperation
from weightforge.core.math_utils import clamp


@dataclass(frozen=True)
class Influence:
    """A bone as named by the host skeleton table."""
    id: int
    name: str


@dataclass(frozen=True)
class WeightEntry:
    """One bone's share of a vertex's weight budget (fraction of 1.0)."""
    influence_id: int
    weight: float
    locked: bool = False


class WeightSet:
    """Ordered, duplicate-free bone weights for a single vertex.

    Order is the layout order of the partition slider.  Capacity is
    unbounded while editing; :meth:`reduce_to_capacity` trims for commit.
    """

    def __init__(self, entries: Iterable[WeightEntry] = ()) -> None:
        self._entries: list[WeightEntry] = []
        self.dirty = False
        for entry in entries:
            if entry.weight < 0.0:
                raise ValueError(
                    f"Negative weight {entry.weight} for bone {entry.influence_id}"
                )
            if entry.influence_id in self:
                raise ValueError(f"Duplicate bone {entry.influence_id}")
            self._entries.append(entry)

    @classmethod
    def load(
        cls,
        raw_pairs: Iterable[tuple[int, float]],
        epsilon: float = WEIGHT_EPSILON,
    ) -> WeightSet:
        """Build a set from host (bone, weight) pairs.

        Pairs at or below *epsilon* are dropped.  Repeated bones are merged.
        No normalization is applied.
        """
        merged: dict[int, float] = {}
        for influence_id, weight in raw_pairs:
            weight = float(weight)
            if weight <= epsilon:
                continue
            influence_id = int(influence_id)
            merged[influence_id] = merged.get(influence_id, 0.0) + weight
        return cls(WeightEntry(bid, w) for bid, w in merged.items())

    # ── Read access ───────────────────────────────────────────────────

    @property
    def entries(self) -> tuple[WeightEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WeightEntry]:
        return iter(tuple(self._entries))

    def __contains__(self, influence_id: object) -> bool:
        return any(e.influence_id == influence_id for e in self._entries)

    def __getitem__(self, index: int) -> WeightEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        body = ", ".join(
            f"{e.influence_id}:{e.weight:.4f}{'L' if e.locked else ''}"
            for e in self._entries
        )
        return f"WeightSet([{body}])"

    def index_of(self, influence_id: int) -> int:
        for i, e in enumerate(self._entries):
            if e.influence_id == influence_id:
                return i
        raise InvalidOperation(f"Bone {influence_id} is not weighted on this vertex")

    def entry(self, influence_id: int) -> WeightEntry:
        return self._entries[self.index_of(influence_id)]

    def weights(self) -> list[float]:
        return [e.weight for e in self._entries]

    def pairs(self) -> list[tuple[int, float]]:
        """(bone, weight) pairs in set order, as host storage expects them."""
        return [(e.influence_id, e.weight) for e in self._entries]

    def unlocked_indices(self) -> list[int]:
        return [i for i, e in enumerate(self._entries) if not e.locked]

    def total_weight(self) -> float:
        return math.fsum(e.weight for e in self._entries)

    def locked_total(self) -> float:
        return math.fsum(e.weight for e in self._entries if e.locked)

    def unlocked_total(self) -> float:
        return math.fsum(e.weight for e in self._entries if not e.locked)

    def is_settled(self, tolerance: float = SETTLE_TOLERANCE) -> bool:
        """True when no edit is pending and the weights sum to 1.0."""
        if self.dirty or not self._entries:
            return False
        return abs(self.total_weight() - 1.0) <= tolerance

    # ── Mutation ──────────────────────────────────────────────────────

    def set_weight(self, influence_id: int, new_weight: float) -> WeightEntry:
        """Directly edit one bone's weight, clamped to [0, 1].

        The set becomes dirty and needs a normalization pass before commit.
        """
        index = self.index_of(influence_id)
        entry = self._entries[index]
        if entry.locked:
            raise InvalidOperation(f"Bone {influence_id} is locked")
        try:
            value = float(new_weight)
        except (TypeError, ValueError):
            raise InvalidOperation(f"Weight {new_weight!r} is not a number") from None
        if not math.isfinite(value):
            raise InvalidOperation(f"Weight {new_weight!r} is not finite")
        entry = replace(entry, weight=clamp(value, 0.0, 1.0))
        self._entries[index] = entry
        self.dirty = True
        return entry

    def set_locked(self, influence_id: int, locked: bool) -> WeightEntry:
        index = self.index_of(influence_id)
        entry = replace(self._entries[index], locked=bool(locked))
        self._entries[index] = entry
        return entry

    def toggle_lock(self, influence_id: int) -> bool:
        """Flip the lock flag of a bone and return the new flag."""
        entry = self.entry(influence_id)
        return self.set_locked(influence_id, not entry.locked).locked

    def assign(self, index: int, weight: float) -> None:
        """Overwrite the weight at *index*, bypassing lock checks.

        Used by redistribution passes that already respect locks.
        """
        if weight < 0.0:
            raise ValueError(f"Negative weight {weight} at index {index}")
        self._entries[index] = replace(self._entries[index], weight=weight)

    def remove(self, influence_ids: Iterable[int]) -> list[WeightEntry]:
        """Drop the given bones and return the removed entries."""
        doomed = set(influence_ids)
        removed = [e for e in self._entries if e.influence_id in doomed]
        self._entries = [e for e in self._entries if e.influence_id not in doomed]
        return removed

    def copy(self) -> WeightSet:
        clone = WeightSet(self._entries)
        clone.dirty = self.dirty
        return clone

    # ── Commit ────────────────────────────────────────────────────────

    def reduce_to_capacity(self, n: int, epsilon: float = WEIGHT_EPSILON) -> WeightSet:
        """Keep the *n* heaviest bones, renormalized to sum to 1.0.

        Ties keep their original order.  The result is ordered by descending
        weight, the order host storage slots are filled in.
        """
        if n < 1:
            raise ValueError(f"Capacity must be >= 1, got {n}")
        ranked = sorted(self._entries, key=lambda e: e.weight, reverse=True)[:n]
        total = math.fsum(e.weight for e in ranked)
        if total <= epsilon:
            raise DegenerateWeightSet(f"Cannot reduce {self!r}: no weight to keep")

        scaled = [e.weight / total for e in ranked]
        # Rounding residual goes to the heaviest bone
        scaled[0] = max(0.0, scaled[0] + (1.0 - math.fsum(scaled)))
        return WeightSet(replace(e, weight=w) for e, w in zip(ranked, scaled))
