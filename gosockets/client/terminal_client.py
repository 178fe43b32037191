"""Interactive terminal front end driving a GameManager."""

from __future__ import annotations

import asyncio
import logging
import warnings
from typing import Any

from blessed import Terminal
from blessed.keyboard import Keystroke

from .game_manager import GameManager
from .game_state import GameSnapshot
from .input_handler import get_movement, is_connect_key, is_disconnect_key, is_quit_key
from .log_buffer import LogBuffer
from .terminal_ui import TerminalUI
from .viewport import Viewport

_logger = logging.getLogger(__name__)

# Log lines shown under the player list
VISIBLE_LOG_LINES = 5


def _asyncio_exception_handler(
    loop: asyncio.AbstractEventLoop, context: dict[str, Any]
) -> None:
    """Send unhandled task exceptions to logging instead of stderr."""
    exception = context.get("exception")
    message = context.get("message", "Unhandled exception in asyncio task")
    if exception:
        _logger.error(f"{message}: {exception}", exc_info=exception)
    else:
        _logger.error(message)


class TerminalClient:
    def __init__(
        self,
        manager: GameManager,
        step: float,
        log_buffer: LogBuffer | None = None,
        terminal: Terminal | None = None,
    ) -> None:
        self.manager = manager
        self.step = step
        self.log_buffer = log_buffer
        self.term: Any = terminal or Terminal()
        # Leave room for the frame, status bar and player list
        self.viewport = Viewport(
            width=max(10, min(80, self.term.width - 2)),
            height=max(5, min(20, self.term.height - 20)),
        )
        self.ui = TerminalUI(self.term, self.viewport)
        self.running = False
        self._needs_render = True
        self._log_version = -1
        manager.on_change(self._on_state_change)

    def _on_state_change(self, snapshot: GameSnapshot) -> None:
        self._needs_render = True

    async def run(self) -> None:
        """Main client loop."""
        self.running = True
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(_asyncio_exception_handler)
        logging.captureWarnings(True)
        warnings.filterwarnings("always")

        try:
            with self.term.fullscreen(), self.term.cbreak(), self.term.hidden_cursor():
                while self.running:
                    # Drain all pending input
                    while True:
                        key = self.term.inkey(timeout=0)
                        if not key:
                            break
                        await self.handle_key(key)

                    if self.log_buffer and self.log_buffer.version != self._log_version:
                        self._log_version = self.log_buffer.version
                        self._needs_render = True

                    if self._needs_render:
                        self._render()
                        self._needs_render = False

                    await asyncio.sleep(0.05)
        finally:
            self.running = False
            await self.manager.disconnect()
            self.ui.cleanup()

    async def handle_key(self, key: Keystroke) -> None:
        """Handle keyboard input."""
        if is_quit_key(key):
            self.running = False
            return

        if is_connect_key(key):
            await self.manager.connect()
            return

        if is_disconnect_key(key):
            await self.manager.disconnect()
            return

        movement = get_movement(key, self.step)
        if movement is not None:
            await self.manager.move_player_by(*movement)

    def _render(self) -> None:
        entries = (
            self.log_buffer.get_entries(VISIBLE_LOG_LINES) if self.log_buffer else None
        )
        self.ui.render(
            self.manager.snapshot(),
            self.manager.grid_width,
            self.manager.grid_height,
            entries,
        )
