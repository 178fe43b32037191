"""Player and position types shared by the codec and the state store."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Position:
    """A point in grid coordinates."""

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Position:
        """Return this position moved by (dx, dy)."""
        return Position(self.x + dx, self.y + dy)

    def clamped(self, width: float, height: float) -> Position:
        """Return this position clamped to [0, width] x [0, height]."""
        return Position(
            max(0.0, min(width, self.x)),
            max(0.0, min(height, self.y)),
        )


@dataclass(eq=False)
class Player:
    """A player known to the client.

    Two players are equal when their ids match, whatever their positions.
    """

    id: str
    position: Position

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def copy(self) -> Player:
        return replace(self)
