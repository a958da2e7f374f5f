"""Pointer and keyboard event streams shared by the whole window.

Listeners attach only while an interaction needs them. `subscribe` returns
a `Subscription` that must be released when the interaction ends; it can
also be used as a context manager.
"""

import logging
from enum import StrEnum
from typing import Callable, Generic, List, Optional, TypeVar

from attrs import define, field

logger = logging.getLogger(__name__)
VERBOSE = 10

CANCEL_KEY = "Escape"

E = TypeVar("E")


class PointerKind(StrEnum):
    MOVE = "move"
    RELEASE = "release"


@define(frozen=True)
class PointerEvent:
    """A pointer move or button release.

    Attributes:
        kind: Move or release.
        x: Horizontal position, in the same coordinates as the press that
            started the interaction.
    """

    kind: PointerKind
    x: int


@define(frozen=True)
class KeyEvent:
    """A key press, identified by name (e.g. "Escape")."""

    key: str


@define(eq=False)
class EventStream(Generic[E]):
    """A stream of events with dynamically attached listeners.

    Attributes:
        name: Label used in log messages.
    """

    name: str
    _listeners: List[Callable[[E], None]] = field(factory=list, init=False)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Callable[[E], None]) -> "Subscription[E]":
        """Attach a listener until the returned subscription is released."""
        self._listeners.append(callback)
        logger.log(
            VERBOSE,
            "EventStream %s: subscribed (%d listeners)",
            self.name,
            len(self._listeners),
        )
        return Subscription(stream=self, callback=callback)

    def _remove(self, callback: Callable[[E], None]) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            logger.debug(
                "EventStream %s: listener already removed", self.name
            )

    def emit(self, event: E) -> int:
        """Deliver an event to every current listener.

        Listeners may release their subscription while being called.

        Returns:
            The number of listeners that received the event.
        """
        listeners = list(self._listeners)
        for callback in listeners:
            callback(event)
        return len(listeners)


@define(eq=False)
class Subscription(Generic[E]):
    """Handle of one listener attached to an `EventStream`.

    Attributes:
        stream: The stream the listener is attached to.
        callback: The listener.
        active: False once released.
    """

    stream: EventStream[E]
    callback: Callable[[E], None]
    active: bool = True

    def release(self) -> None:
        """Detach the listener; calling it again has no effect."""
        if not self.active:
            return
        self.active = False
        self.stream._remove(self.callback)
        logger.log(
            VERBOSE,
            "EventStream %s: released (%d listeners)",
            self.stream.name,
            self.stream.listener_count,
        )

    def __enter__(self) -> "Subscription[E]":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> Optional[bool]:
        self.release()
        return None
