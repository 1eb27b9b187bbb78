"""In-flight request tracking used to drive loading indicators."""

from __future__ import annotations

from contextlib import contextmanager
from itertools import count
from typing import Callable, Iterator


class PendingRequestTracker:
    """Track backend requests that have been dispatched but not yet settled.

    One tracker is created per workflow and handed to a client view bound
    with `HttpJobApiClient.client_bind_tracker`.
    """

    def __init__(self):
        self._pending: dict[int, str] = {}
        self._listeners: list[Callable[[tuple[str, ...]], None]] = []
        self._sequence = count(1)

    def tracker_pending_labels(self) -> tuple[str, ...]:
        """Return labels of requests currently in flight, oldest first.

        Returns:
            tuple[str, ...]: Pending request labels.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return tuple(self._pending.values())

    def tracker_is_busy(self) -> bool:
        """Return whether any request is in flight.

        Returns:
            bool: True when at least one request is pending.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return bool(self._pending)

    def tracker_subscribe(self, listener: Callable[[tuple[str, ...]], None]) -> Callable[[], None]:
        """Register a listener called with the pending labels after every change.

        The listener is invoked immediately with the current labels.

        Args:
            listener: Callback receiving pending labels.

        Returns:
            Callable[[], None]: Unsubscribe callback.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        self._listeners.append(listener)
        listener(self.tracker_pending_labels())

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @contextmanager
    def tracker_track(self, label: str) -> Iterator[None]:
        """Mark one request as pending for the duration of the block.

        Args:
            label: Request label, e.g. `GET /v1/specs`.

        Returns:
            Iterator[None]: Context manager body.

        Raises:
            Exception: Re-raises whatever the tracked block raises.
        """

        request_key = next(self._sequence)
        self._pending[request_key] = label
        self._tracker_notify()
        try:
            yield
        finally:
            self._pending.pop(request_key, None)
            self._tracker_notify()

    def _tracker_notify(self) -> None:
        labels = self.tracker_pending_labels()
        for listener in list(self._listeners):
            listener(labels)
