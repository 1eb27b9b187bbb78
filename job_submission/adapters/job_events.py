"""WebSocket subscription to live job events with idle-timeout reconnection."""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Callable, Final

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

LOGGER = logging.getLogger(__name__)

IDLE_TIMEOUT_CLOSE_CODE: Final[int] = 1001


class JobEventSubscription:
    """Stream decoded JSON messages from one job event WebSocket endpoint.

    The stream transparently reconnects when the server closes the socket
    with the idle-timeout code `1001`. Any other closure ends the stream and
    leaves `subscription_reconnect_required()` set until the caller explicitly
    reconnects.
    """

    def __init__(self, url: str, connect: Callable[[str], Any] | None = None):
        """Initialize the subscription.

        Args:
            url: WebSocket URL, e.g. `wss://host/api/v1/jobs/events`.
            connect: Optional connection factory returning an async context manager.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when url is blank.
        """

        normalized_url = url.strip()
        if not normalized_url:
            raise ValueError("url must not be blank")
        self._url = normalized_url
        self._connect = connect or websockets.connect
        self._reconnect_required = False
        self._connection_count = 0

    def subscription_url(self) -> str:
        return self._url

    def subscription_reconnect_required(self) -> bool:
        """Return whether the stream stopped and needs an explicit reconnect.

        Returns:
            bool: True after a non-idle closure or a connection failure.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self._reconnect_required

    def subscription_connection_count(self) -> int:
        return self._connection_count

    def subscription_reconnect(self) -> AsyncIterator[Any]:
        """Clear the reconnect flag and return a fresh event stream.

        Returns:
            AsyncIterator[Any]: New stream of decoded messages.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        LOGGER.info("Reconnecting job event subscription url=%s", self._url)
        self._reconnect_required = False
        return self.subscription_events()

    async def subscription_events(self) -> AsyncIterator[Any]:
        """Yield decoded messages until the socket closes for a reason other than idleness.

        Returns:
            AsyncIterator[Any]: Decoded JSON messages in arrival order.

        Raises:
            RuntimeError: This method does not raise runtime errors; failures set the reconnect flag.
        """

        while True:
            close_code: int | None = None
            try:
                async with self._connect(self._url) as websocket:
                    self._connection_count += 1
                    async for message in websocket:
                        decoded_message = _adapter_decode_event_message(message)
                        if decoded_message is not None:
                            yield decoded_message
                    close_code = websocket.close_code
            except ConnectionClosed as error:
                close_code = error.rcvd.code if error.rcvd is not None else None
            except (OSError, WebSocketException) as error:
                LOGGER.warning("Job event subscription failed url=%s error=%s", self._url, error)
                self._reconnect_required = True
                return

            if close_code == IDLE_TIMEOUT_CLOSE_CODE:
                LOGGER.info("Job event socket idle-closed; reconnecting url=%s", self._url)
                continue

            LOGGER.warning("Job event socket closed url=%s code=%s", self._url, close_code)
            self._reconnect_required = True
            return


def _adapter_decode_event_message(message: str | bytes) -> Any | None:
    try:
        return json.loads(message)
    except (json.JSONDecodeError, UnicodeDecodeError):
        LOGGER.warning("Discarding undecodable job event message")
        return None
