"""Errors raised by weight editing operations.

Every operation validates its input before touching a weight set, so any of
these leaves the set exactly as it was.
"""


class WeightEditError(Exception):
    """Base class for all weight editing errors."""


class InvalidOperation(WeightEditError):
    """Editing a locked entry, an unknown influence, or with no point selected."""


class EmptyClipboard(WeightEditError):
    """Paste requested before anything was copied."""


class MirrorTargetNotFound(WeightEditError):
    """No vertex sits at the mirrored position."""

    def __init__(self, point_id: int, position) -> None:
        self.point_id = point_id
        self.position = tuple(float(c) for c in position)
        super().__init__(
            f"No mirror vertex for point {point_id} at {self.position}"
        )


class MirrorBoneUnresolved(WeightEditError):
    """A mirrored bone name has no match in the skeleton.

    Collected as a warning by the mirror operation, never raised by it.
    """

    def __init__(self, influence_id: int, source_name: str, mirrored_name: str) -> None:
        self.influence_id = influence_id
        self.source_name = source_name
        self.mirrored_name = mirrored_name
        super().__init__(
            f"Bone '{mirrored_name}' (mirror of '{source_name}') not found"
        )


class DegenerateWeightSet(WeightEditError):
    """All weights collapsed to zero with nothing locked to hold the budget."""
