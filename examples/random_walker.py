#!/usr/bin/env python3
"""Example headless client that wanders around the grid.

The walker:
- Moves one step in a random direction every second
- Logs players joining, leaving and the connection dropping

Usage:
    python examples/random_walker.py [--url URL] [--step STEP]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random

from gosockets.client import GameManager, GameSnapshot
from gosockets.common.constants import DEFAULT_SERVER_URL, MOVE_STEP

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("random_walker")
logging.getLogger("websockets").setLevel(logging.WARNING)

# Movement interval (seconds)
MOVE_INTERVAL = 1.0

DIRECTIONS = [(0, -1), (0, 1), (-1, 0), (1, 0)]


async def main() -> None:
    parser = argparse.ArgumentParser(description="Random walker for go-sockets")
    parser.add_argument("--url", default=DEFAULT_SERVER_URL, help="Server URL")
    parser.add_argument("--step", type=float, default=MOVE_STEP, help="Step size")
    args = parser.parse_args()

    manager = GameManager(args.url)
    known: set[str] = set()

    @manager.on_change
    def on_change(snapshot: GameSnapshot) -> None:
        ids = {p.id for p in snapshot.other_players}
        for player_id in ids - known:
            logger.info(f"Player joined: {player_id}")
        for player_id in known - ids:
            logger.info(f"Player left: {player_id}")
        known.clear()
        known.update(ids)

    logger.info(f"Connecting to {args.url}...")
    if not await manager.connect():
        logger.error(f"Failed to connect: {manager.connection_error}")
        return

    movement_task = asyncio.create_task(wander(manager, args.step))
    try:
        await manager.wait_until_disconnected()
        if manager.connection_error:
            logger.error(manager.connection_error)
    finally:
        movement_task.cancel()
        try:
            await movement_task
        except asyncio.CancelledError:
            pass
        await manager.disconnect()


async def wander(manager: GameManager, step: float) -> None:
    """Take one random step per interval."""
    while True:
        await asyncio.sleep(MOVE_INTERVAL)
        dx, dy = random.choice(DIRECTIONS)
        await manager.move_player_by(dx * step, dy * step)
        if manager.current_player:
            pos = manager.current_player.position
            logger.info(f"Moved to ({pos.x:.0f}, {pos.y:.0f})")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
