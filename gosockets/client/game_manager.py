"""Connection manager: socket lifecycle, receive loop and movement."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from websockets.asyncio.client import connect as websocket_connect
from websockets.exceptions import WebSocketException

from ..common.constants import (
    CLOSE_GOING_AWAY,
    CONNECTION_ERROR_MESSAGE,
    CONNECTION_LOST_MESSAGE,
    DECODING_ERROR_MESSAGE,
    DEFAULT_SERVER_URL,
    ENCODING_ERROR_MESSAGE,
    GRID_HEIGHT,
    GRID_WIDTH,
)
from ..common.models import Player, Position
from ..common.protocol import (
    ProtocolError,
    deserialize_game_message,
    serialize_position_update,
)
from .game_state import GameSnapshot, GameState, StateListener

logger = logging.getLogger(__name__)

# Opens a socket to a URL; the result needs async recv(), send() and close()
Connector = Callable[[str], Awaitable[Any]]


def _open_websocket(url: str) -> Awaitable[Any]:
    # No handshake timeout and no keepalive pings: a dead peer only shows
    # up once the transport reports it.
    return websocket_connect(url, open_timeout=None, ping_interval=None)


class GameManager:
    """Keeps the game connection and the local view of all players in sync.

    Example usage:
        async def main():
            manager = GameManager()

            @manager.on_change
            def on_change(snapshot):
                print(snapshot.current_player, snapshot.other_players)

            if await manager.connect():
                await manager.move_player_by(50, 0)
                await manager.wait_until_disconnected()

    Every method must be called from the event loop that called ``connect``;
    the receive loop runs as a task on that same loop, so all state mutation
    happens in one place.
    """

    def __init__(
        self,
        url: str = DEFAULT_SERVER_URL,
        grid_width: float = GRID_WIDTH,
        grid_height: float = GRID_HEIGHT,
        connector: Connector | None = None,
        state: GameState | None = None,
    ) -> None:
        self.url = url
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.state = state or GameState()
        self._connector = connector or _open_websocket
        self._websocket: Any = None
        self._receive_task: asyncio.Task[None] | None = None
        self._connect_lock = asyncio.Lock()

    # Observable state

    @property
    def current_player(self) -> Player | None:
        return self.state.current_player

    @property
    def other_players(self) -> list[Player]:
        return self.state.other_players

    @property
    def is_connected(self) -> bool:
        return self.state.is_connected

    @property
    def connection_error(self) -> str | None:
        return self.state.connection_error

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    def on_change(self, callback: StateListener) -> StateListener:
        """Decorator for state changes."""
        return self.state.on_change(callback)

    # Connection lifecycle

    async def connect(self, url: str | None = None) -> bool:
        """Open the connection and start receiving.

        Args:
            url: Server URL, defaults to the one given at construction.

        Returns:
            True if connected afterwards, False otherwise.
        """
        async with self._connect_lock:
            if self.state.is_connected:
                logger.debug("Already connected, ignoring connect()")
                return True

            url = url or self.url
            try:
                websocket = await self._connector(url)
            except (OSError, ValueError, WebSocketException) as e:
                # ValueError: urllib rejects some URLs websockets parses (bad port)
                logger.error(f"Failed to connect to {url}: {e}")
                self.state.set_error(CONNECTION_ERROR_MESSAGE)
                return False

            self._websocket = websocket
            self.state.mark_connected()
            self._receive_task = asyncio.create_task(
                self._receive_messages(websocket)
            )
            logger.info(f"Connected to {url}")
            return True

    async def disconnect(self) -> None:
        """Close the connection and forget all players."""
        websocket, self._websocket = self._websocket, None
        receive_task, self._receive_task = self._receive_task, None

        self.state.reset()

        if receive_task and receive_task is not asyncio.current_task():
            receive_task.cancel()
            try:
                await receive_task
            except asyncio.CancelledError:
                pass

        if websocket is not None:
            try:
                await websocket.close(code=CLOSE_GOING_AWAY, reason="")
            except (OSError, WebSocketException) as e:
                logger.debug(f"Error closing websocket: {e}")
            logger.info("Disconnected")

    async def wait_until_disconnected(self) -> None:
        """Block until the receive loop ends."""
        if self._receive_task is not None:
            await asyncio.wait({self._receive_task})

    # Receive loop

    async def _receive_messages(self, websocket: Any) -> None:
        """Receive and apply server events until the connection drops."""
        while self.state.is_connected and self._websocket is websocket:
            try:
                frame = await websocket.recv()
            except (OSError, WebSocketException) as e:
                self._handle_connection_lost(websocket, e)
                return

            logger.debug(f"Received message: {frame!r}")
            try:
                message = deserialize_game_message(frame)
            except ProtocolError as e:
                logger.warning(f"{DECODING_ERROR_MESSAGE} {e}")
                continue

            self.state.apply(message)

    def _handle_connection_lost(self, websocket: Any, error: Exception) -> None:
        if self._websocket is not websocket:
            # disconnect() already tore this socket down
            return
        logger.error(f"Failed to receive websocket message: {error}")
        self._websocket = None
        self._receive_task = None
        self.state.mark_disconnected(CONNECTION_LOST_MESSAGE)

    # Movement

    async def move_player(self, position: Position) -> None:
        """Move the local player and tell the server.

        The local position changes immediately and is not rolled back if the
        send fails.
        """
        if not self.state.is_connected:
            return

        self.state.move_current_player(position)

        try:
            payload = serialize_position_update(position)
        except ProtocolError as e:
            logger.warning(f"{ENCODING_ERROR_MESSAGE} {e}")
            return

        await self._send_message(payload)

    async def move_player_by(self, dx: float, dy: float) -> None:
        """Move the local player by a delta, clamped to the grid."""
        current = self.state.current_player
        if current is None:
            return

        target = current.position.offset(dx, dy).clamped(
            self.grid_width, self.grid_height
        )
        await self.move_player(target)

    async def _send_message(self, payload: str) -> None:
        """Send a frame to the server."""
        websocket = self._websocket
        if websocket is None:
            return
        try:
            await websocket.send(payload)
        except (OSError, WebSocketException) as e:
            logger.warning(f"Error sending position update: {e}")
