"""Client entry point."""

import argparse
import asyncio
import logging

from ..common.constants import DEFAULT_SERVER_URL, MOVE_STEP
from .game_manager import GameManager
from .log_buffer import LogBuffer
from .terminal_client import TerminalClient


def setup_logging(log_file: str | None, log_buffer: LogBuffer) -> None:
    """Configure logging with in-memory buffer and optional file output."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # The TUI shows INFO and above from the buffer
    log_buffer.setLevel(logging.INFO)
    root.addHandler(log_buffer)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        root.addHandler(file_handler)

    # Frame-level debug output from websockets is too noisy
    logging.getLogger("websockets").setLevel(logging.WARNING)


def main() -> None:
    parser = argparse.ArgumentParser(description="Go-Sockets grid game client")
    parser.add_argument("--url", default=DEFAULT_SERVER_URL, help="Server URL")
    parser.add_argument(
        "--step", type=float, default=MOVE_STEP, help="Distance moved per key press"
    )
    parser.add_argument(
        "--log", help="Log file path (in addition to in-memory log buffer)"
    )
    parser.add_argument(
        "--no-connect",
        action="store_true",
        help="Start disconnected and wait for the connect key",
    )
    args = parser.parse_args()

    log_buffer = LogBuffer(maxlen=200)
    setup_logging(args.log, log_buffer)

    async def run_client() -> None:
        manager = GameManager(args.url)
        client = TerminalClient(manager, args.step, log_buffer)
        if not args.no_connect:
            await manager.connect()
        await client.run()

    try:
        asyncio.run(run_client())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
