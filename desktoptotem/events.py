"""
Tracker notifications for the presentation layer.

The tray, popup and dashboard subscribe here instead of polling the
tracker. Handlers run synchronously on the thread that made the change,
after the change is stored.
"""
from typing import Any, Callable, Dict, List, Optional
from enum import Enum


class TrackerEvent(Enum):
    """Events emitted by the usage tracker."""

    ITEMS_CHANGED = "items_changed"  # context.items: the new ranked list
    COUNTS_RESET = "counts_reset"  # context.watermark
    NOTE_CHANGED = "note_changed"  # context.path, context.note (None = deleted)


class EventContext:
    """Context passed to event handlers with relevant objects."""

    def __init__(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        attrs = ', '.join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"EventContext({attrs})"


EventHandler = Callable[[EventContext], None]


class EventDispatcher:
    """
    Delivers tracker events to registered handlers in registration order.

    Example:
        dispatcher.register(TrackerEvent.ITEMS_CHANGED, on_items)
        dispatcher.emit(TrackerEvent.ITEMS_CHANGED, EventContext(items=items))
    """

    def __init__(self) -> None:
        self._handlers: Dict[TrackerEvent, List[EventHandler]] = {}

    def register(self, event: TrackerEvent, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unregister(self, event: TrackerEvent, handler: EventHandler) -> None:
        if event in self._handlers:
            try:
                self._handlers[event].remove(handler)
            except ValueError:
                pass

    def emit(self, event: TrackerEvent, context: EventContext) -> None:
        """
        Call every handler for `event`.

        A failing handler is reported and skipped so the others still run.
        """
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(context)
            except Exception as e:
                print(f"Error in event handler for {event.value}: {e}")

    def clear(self, event: Optional[TrackerEvent] = None) -> None:
        """Clear handlers for an event, or all events if none specified."""
        if event:
            self._handlers.pop(event, None)
        else:
            self._handlers.clear()
