"""EventBus for decoupled publish/subscribe communication."""

from enum import Enum, auto
from typing import Any, Callable
from collections import defaultdict


class EventType(Enum):
    # Selection
    SELECTION_CHANGED = auto()     # data: point_id (int | None)

    # Weight edits
    WEIGHTS_CHANGED = auto()       # data: point_id (int), weights (WeightSet)
    WEIGHTS_COMMITTED = auto()     # data: point_id (int), pairs (list[tuple[int, float]])
    LOCK_BUDGET_EXCEEDED = auto()  # data: point_id (int), locked_total (float)

    # Clipboard
    CLIPBOARD_CHANGED = auto()     # data: count (int)

    # Mirror
    MIRROR_APPLIED = auto()        # data: source (int), target (int), warnings (list)

    # Partition slider drag
    DRAG_STARTED = auto()          # data: token (int), boundary (int)
    DRAG_ENDED = auto()            # data: token (int)


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
