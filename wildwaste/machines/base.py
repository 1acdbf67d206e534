"""Observable single-container state machine shared by the session and report machines."""

import dataclasses
from typing import Any, Awaitable, Callable, Generic, TypeVar

from wildwaste.errors import ApiError, network_error
from wildwaste.utils.parsing import read_envelope

S = TypeVar("S")

Observer = Callable[[Any], None]


class StateMachine(Generic[S]):
    """Holds exactly one immutable state snapshot and notifies observers on change.

    Transitions are synchronous; network calls are the only await points, so a
    reader never observes a partial update.
    """

    # Prefix for messages built from exceptions raised before any response.
    network_message = "Connection error"

    def __init__(self, initial: S):
        self._state = initial
        self._observers: list[Observer] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call observer(state) after every transition. Returns an unsubscribe function."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _set(self, state: S) -> None:
        self._state = state
        for observer in list(self._observers):
            observer(state)

    def _update(self, **changes) -> None:
        """Replace the listed fields of a dataclass snapshot."""
        self._set(dataclasses.replace(self._state, **changes))

    async def _send(self, call: Callable[..., Awaitable], *args, fallback: str) -> dict:
        """Run one transport call and return the successful response body.

        Raises ApiError for every failure: network when the call raised,
        server or parse when the response says so.
        """
        try:
            response = await call(*args)
        except Exception as exc:
            raise ApiError(network_error(exc, self.network_message)) from exc
        return read_envelope(response, fallback)
