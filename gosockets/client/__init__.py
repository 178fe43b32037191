"""Client-side connection and state management.

Example usage:

    from gosockets.client import GameManager

    async def main():
        manager = GameManager("ws://localhost:8080/ws")

        @manager.on_change
        def on_change(snapshot):
            print(f"{snapshot.total_player_count} players")

        if await manager.connect():
            await manager.move_player_by(50, 0)
            await manager.wait_until_disconnected()

    asyncio.run(main())
"""

from .game_manager import GameManager
from .game_state import GameSnapshot, GameState

__all__ = [
    "GameManager",
    "GameSnapshot",
    "GameState",
]
