"""Event types and a type-keyed publish/subscribe manager."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

Callback = Callable[["Event"], None]


class Event:
    """Base class of everything dispatched through an EventManager."""


class WindowEventType(Enum):
    RESIZE = auto()


@dataclass
class WindowEvent(Event):
    type: WindowEventType = WindowEventType.RESIZE
    prev_width: int = 0
    prev_height: int = 0
    new_width: int = 0
    new_height: int = 0


@dataclass
class SwapchainInvalidateEvent(Event):
    new_swapchain_extents: tuple[float, float] = (0.0, 0.0)


@dataclass
class FrameSyncFenceEvent(Event):
    pass


@dataclass
class FrameStartEvent(Event):
    pass


@dataclass
class EngineUpdateEvent(Event):
    pass


@dataclass
class EngineRenderEvent(Event):
    pass


@dataclass
class FrameEndEvent(Event):
    pass


@dataclass
class EngineShutdownEvent(Event):
    pass


class EventListener:
    """A callback that can be registered for one event type.

    The callback in effect at registration time is the one that is called.
    Closing the listener (or leaving its ``with`` block) deregisters it.
    """

    def __init__(self, callback: Optional[Callback] = None) -> None:
        self.callback = callback
        self._manager: Optional[EventManager] = None
        self._event_type: Optional[type] = None

    @property
    def event_type(self) -> Optional[type]:
        return self._event_type

    def close(self) -> None:
        if self._manager is not None:
            self._manager.deregister_listener(self)

    def __enter__(self) -> "EventListener":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EventManager:
    """Delivers events to the listeners registered for their exact type."""

    def __init__(self) -> None:
        self._listeners: dict[type, list[tuple[EventListener, Callback]]] = {}

    def register_listener(self, event_type: type, listener: EventListener) -> None:
        if not (isinstance(event_type, type) and issubclass(event_type, Event)):
            raise TypeError(f"{event_type!r} is not an Event type")
        if listener.callback is None:
            raise ValueError("Failed to register event listener, no callback provided")
        listener._event_type = event_type
        listener._manager = self
        self._listeners.setdefault(event_type, []).append((listener, listener.callback))

    def deregister_listener(self, listener: EventListener) -> None:
        entries = self._listeners.get(listener._event_type, [])
        for position, (registered, _) in enumerate(entries):
            if registered is listener:
                del entries[position]
                break

    def dispatch_event(self, event: Event) -> None:
        for _, callback in list(self._listeners.get(type(event), ())):
            callback(event)