"""JSON wire protocol between the game client and server.

Incoming frames (server -> client):

    {"type": "welcome", "playerId": "abc", "position": {"x": 0, "y": 0}}

``type`` is one of the ``MessageType`` values. ``playerId`` and ``position``
are present only where the message kind needs them; ``error`` carries
neither.

Outgoing frames (client -> server) carry a movement intent:

    {"position": {"x": 10.0, "y": 20.0}}
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .models import Position


class ProtocolError(ValueError):
    """Raised when a frame cannot be encoded or decoded."""


class MessageType(str, Enum):
    WELCOME = "welcome"
    PLAYER_JOINED = "playerJoined"
    PLAYER_LEFT = "playerLeft"
    POSITION_UPDATE = "positionUpdate"
    ERROR = "error"


@dataclass(frozen=True)
class GameMessage:
    """A decoded server event."""

    type: MessageType
    player_id: str | None = None
    position: Position | None = None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _position_to_dict(position: Position) -> dict[str, float]:
    if not (_is_number(position.x) and _is_number(position.y)):
        raise ProtocolError(f"Non-numeric coordinates: {position}")
    _to_finite_float(position.x)
    _to_finite_float(position.y)
    return {"x": position.x, "y": position.y}


def _to_finite_float(value: int | float) -> float:
    # Integers past the float range overflow instead of becoming inf
    try:
        result = float(value)
    except OverflowError:
        raise ProtocolError(f"coordinate out of range: {value}") from None
    if not math.isfinite(result):
        raise ProtocolError(f"coordinate must be finite: {value}")
    return result


def _position_from_dict(data: Any) -> Position:
    if not isinstance(data, dict):
        raise ProtocolError("position must be an object")
    x = data.get("x")
    y = data.get("y")
    if not (_is_number(x) and _is_number(y)):
        raise ProtocolError("position needs numeric x and y")
    return Position(_to_finite_float(x), _to_finite_float(y))


# POSITION_UPDATE (client -> server)


def serialize_position_update(position: Position) -> str:
    """Encode a movement intent as a JSON text frame."""
    body = {"position": _position_to_dict(position)}
    try:
        return json.dumps(body, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ProtocolError(str(e)) from e


def deserialize_position_update(data: str | bytes) -> Position:
    """Decode a movement intent (used by tests and tooling)."""
    body = _load_object(data)
    if "position" not in body:
        raise ProtocolError("missing position")
    return _position_from_dict(body["position"])


# Server events (server -> client)


def serialize_game_message(message: GameMessage) -> str:
    """Encode a server event as a JSON text frame."""
    body: dict[str, Any] = {"type": message.type.value}
    if message.player_id is not None:
        body["playerId"] = message.player_id
    if message.position is not None:
        body["position"] = _position_to_dict(message.position)
    return json.dumps(body, allow_nan=False)


def deserialize_game_message(data: str | bytes) -> GameMessage:
    """Decode one incoming frame.

    Text and binary frames are both accepted; binary frames must hold UTF-8
    JSON. Raises ProtocolError on anything that is not a well-formed event.
    """
    body = _load_object(data)

    raw_type = body.get("type")
    if raw_type is None:
        raise ProtocolError("missing type")
    try:
        msg_type = MessageType(raw_type)
    except ValueError:
        raise ProtocolError(f"unknown message type: {raw_type!r}") from None

    player_id = body.get("playerId")
    if player_id is not None and not isinstance(player_id, str):
        raise ProtocolError("playerId must be a string")

    raw_position = body.get("position")
    position = None if raw_position is None else _position_from_dict(raw_position)

    return GameMessage(type=msg_type, player_id=player_id, position=position)


def _load_object(data: str | bytes) -> dict[str, Any]:
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"frame is not UTF-8: {e}") from e
    try:
        body = json.loads(data)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and the int digit limit
        raise ProtocolError(f"malformed JSON: {e}") from e
    if not isinstance(body, dict):
        raise ProtocolError("frame must be a JSON object")
    return body
