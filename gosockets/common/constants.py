"""Shared constants."""

DEFAULT_SERVER_URL = "ws://localhost:8080/ws"

# Grid dimensions in world units
GRID_WIDTH = 200.0
GRID_HEIGHT = 150.0

# Distance covered by one step of the movement controls
MOVE_STEP = 50.0

# Room capacity enforced by the server
MAX_PLAYERS = 10

# WebSocket close code sent on disconnect ("going away")
CLOSE_GOING_AWAY = 1001

# User-visible messages
CONNECTION_ERROR_MESSAGE = "Unable to connect to the game server."
CONNECTION_LOST_MESSAGE = "Connection lost"
SERVER_ERROR_MESSAGE = "Error from the game server."
ENCODING_ERROR_MESSAGE = "Failed to encode message."
DECODING_ERROR_MESSAGE = "Failed to decode message."
