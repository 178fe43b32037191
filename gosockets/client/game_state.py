"""Player state store: the client's view of who is where."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..common.constants import SERVER_ERROR_MESSAGE
from ..common.models import Player, Position
from ..common.protocol import GameMessage, MessageType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable copy of the observable state."""

    current_player: Player | None
    other_players: tuple[Player, ...]
    is_connected: bool
    connection_error: str | None

    @property
    def total_player_count(self) -> int:
        return len(self.other_players) + (1 if self.current_player else 0)


StateListener = Callable[[GameSnapshot], None]


class GameState:
    """Owns the current player, the other players and the connection flags.

    All mutation goes through this class. Other players are kept in join
    order and never hold two entries with the same id. Listeners registered
    with ``on_change`` receive a snapshot after every mutation.
    """

    def __init__(self) -> None:
        self._current_player: Player | None = None
        self._other_players: list[Player] = []
        self._is_connected = False
        self._connection_error: str | None = None
        self._listeners: list[StateListener] = []

    # Read access

    @property
    def current_player(self) -> Player | None:
        return self._current_player

    @property
    def other_players(self) -> list[Player]:
        return list(self._other_players)

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @property
    def connection_error(self) -> str | None:
        return self._connection_error

    @property
    def total_player_count(self) -> int:
        return len(self._other_players) + (1 if self._current_player else 0)

    def get_player(self, player_id: str) -> Player | None:
        """Get another player by ID."""
        for p in self._other_players:
            if p.id == player_id:
                return p
        return None

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            current_player=(
                self._current_player.copy() if self._current_player else None
            ),
            other_players=tuple(p.copy() for p in self._other_players),
            is_connected=self._is_connected,
            connection_error=self._connection_error,
        )

    # Listeners

    def on_change(self, callback: StateListener) -> StateListener:
        """Decorator registering a state change listener."""
        self._listeners.append(callback)
        return callback

    def remove_listener(self, callback: StateListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Error in state listener: {e}", exc_info=e)

    # Connection transitions

    def mark_connected(self) -> None:
        self._is_connected = True
        self._connection_error = None
        self._notify()

    def mark_disconnected(self, error: str | None = None) -> None:
        """Leave the Connected state, optionally reporting why.

        Player state is left untouched; see ``reset`` for a full teardown.
        """
        self._is_connected = False
        if error is not None:
            self._connection_error = error
        self._notify()

    def set_error(self, message: str) -> None:
        self._connection_error = message
        self._notify()

    def reset(self) -> None:
        """Disconnect and forget every player."""
        self._is_connected = False
        self._current_player = None
        self._other_players = []
        self._notify()

    # Local movement

    def move_current_player(self, position: Position) -> bool:
        """Optimistically move the local player. Returns False if none."""
        if self._current_player is None:
            return False
        self._current_player.position = position
        self._notify()
        return True

    # Server events

    def apply(self, message: GameMessage) -> None:
        """Apply one server event."""
        msg_type = message.type
        player_id = message.player_id
        position = message.position

        if msg_type == MessageType.WELCOME:
            if player_id is None or position is None:
                return
            # The server's identity assignment always wins
            self._current_player = Player(player_id, position)

        elif msg_type == MessageType.PLAYER_JOINED:
            if player_id is None or position is None:
                return
            if self._is_self(player_id) or self.get_player(player_id):
                return
            self._other_players.append(Player(player_id, position))

        elif msg_type == MessageType.PLAYER_LEFT:
            if player_id is None:
                return
            remaining = [p for p in self._other_players if p.id != player_id]
            if len(remaining) == len(self._other_players):
                return
            self._other_players = remaining

        elif msg_type == MessageType.POSITION_UPDATE:
            if player_id is None or position is None:
                return
            if self._is_self(player_id):
                # Our own echo; local state is already ahead
                return
            player = self.get_player(player_id)
            if player is None:
                # Unknown remote player: no-op until join semantics are settled
                logger.debug(f"Position update for unknown player {player_id}")
                return
            player.position = position

        elif msg_type == MessageType.ERROR:
            self._connection_error = SERVER_ERROR_MESSAGE

        self._notify()

    def _is_self(self, player_id: str) -> bool:
        return self._current_player is not None and self._current_player.id == player_id
