"""Keyboard input mapping for the terminal client."""

from __future__ import annotations

from blessed.keyboard import Keystroke

# (dx, dy) unit vectors, scaled by the movement step
_MOVEMENT_KEYS: dict[str, tuple[int, int]] = {
    "w": (0, -1),
    "k": (0, -1),
    "s": (0, 1),
    "j": (0, 1),
    "a": (-1, 0),
    "h": (-1, 0),
    "d": (1, 0),
    "l": (1, 0),
}

_MOVEMENT_KEY_NAMES: dict[str, tuple[int, int]] = {
    "KEY_UP": (0, -1),
    "KEY_DOWN": (0, 1),
    "KEY_LEFT": (-1, 0),
    "KEY_RIGHT": (1, 0),
}


def get_movement(key: Keystroke, step: float) -> tuple[float, float] | None:
    """Return the (dx, dy) delta for a movement key, or None."""
    direction = None
    if key.is_sequence:
        direction = _MOVEMENT_KEY_NAMES.get(key.name or "")
    elif str(key):
        direction = _MOVEMENT_KEYS.get(str(key).lower())
    if direction is None:
        return None
    return direction[0] * step, direction[1] * step


def is_quit_key(key: Keystroke) -> bool:
    return not key.is_sequence and str(key).lower() == "q"


def is_connect_key(key: Keystroke) -> bool:
    return not key.is_sequence and str(key).lower() == "c"


def is_disconnect_key(key: Keystroke) -> bool:
    return not key.is_sequence and str(key).lower() == "x"
