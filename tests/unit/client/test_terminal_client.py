"""Tests for the terminal front end: key mapping, viewport and rendering."""

from __future__ import annotations

import asyncio
import logging

from blessed import Terminal
from blessed.keyboard import Keystroke

from gosockets.client.game_manager import GameManager
from gosockets.client.game_state import GameSnapshot
from gosockets.client.input_handler import (
    get_movement,
    is_connect_key,
    is_disconnect_key,
    is_quit_key,
)
from gosockets.client.log_buffer import LogBuffer
from gosockets.client.terminal_client import TerminalClient
from gosockets.client.terminal_ui import TerminalUI
from gosockets.client.viewport import Viewport
from gosockets.common.models import Player, Position


def key(text: str) -> Keystroke:
    return Keystroke(ucs=text)


def arrow(name: str, code: int) -> Keystroke:
    return Keystroke(ucs="\x1b[A", code=code, name=name)


class TestInputHandler:
    def test_wasd(self) -> None:
        assert get_movement(key("w"), 50) == (0, -50)
        assert get_movement(key("a"), 50) == (-50, 0)
        assert get_movement(key("s"), 50) == (0, 50)
        assert get_movement(key("d"), 50) == (50, 0)

    def test_vi_keys_and_uppercase(self) -> None:
        assert get_movement(key("H"), 10) == (-10, 0)
        assert get_movement(key("k"), 10) == (0, -10)

    def test_arrows(self) -> None:
        assert get_movement(arrow("KEY_UP", 259), 5) == (0, -5)
        assert get_movement(arrow("KEY_RIGHT", 261), 5) == (5, 0)

    def test_other_keys_do_not_move(self) -> None:
        assert get_movement(key("z"), 50) is None
        assert get_movement(key(""), 50) is None

    def test_command_keys(self) -> None:
        assert is_quit_key(key("q"))
        assert is_connect_key(key("C"))
        assert is_disconnect_key(key("x"))
        assert not is_quit_key(key("w"))


class TestViewport:
    def test_corners(self) -> None:
        viewport = Viewport(width=41, height=16)
        assert viewport.to_cell(0, 0, 200, 150) == (0, 0)
        assert viewport.to_cell(200, 150, 200, 150) == (40, 15)

    def test_middle(self) -> None:
        viewport = Viewport(width=41, height=16)
        assert viewport.to_cell(100, 75, 200, 150) == (20, 8)

    def test_out_of_range_clamped(self) -> None:
        viewport = Viewport(width=10, height=5)
        assert viewport.to_cell(-50, 999, 200, 150) == (0, 4)


class TestTerminalUI:
    def make_ui(self) -> TerminalUI:
        return TerminalUI(Terminal(force_styling=None), Viewport(width=21, height=6))

    def test_players_drawn_on_grid(self) -> None:
        snapshot = GameSnapshot(
            current_player=Player("me", Position(0, 0)),
            other_players=(Player("p2", Position(200, 150)),),
            is_connected=True,
            connection_error=None,
        )
        lines = self.make_ui().build_lines(snapshot, 200, 150)
        grid = lines[2:8]
        assert grid[0] == "|@" + "." * 20 + "|"
        assert grid[-1] == "|" + "." * 20 + "@|"
        assert any("Connected" in line and "(2/10)" in line for line in lines)
        assert any("p2 at (200, 150)" in line for line in lines)

    def test_error_shown(self) -> None:
        snapshot = GameSnapshot(None, (), False, "Connection lost")
        lines = self.make_ui().build_lines(snapshot, 200, 150)
        assert "Connection lost" in lines
        assert any("Disconnected" in line for line in lines)


class TestLogBuffer:
    def test_keeps_latest_entries(self) -> None:
        buffer = LogBuffer(maxlen=2)
        log = logging.getLogger("gosockets.client.test")
        log.addHandler(buffer)
        log.setLevel(logging.INFO)
        try:
            for i in range(3):
                log.info(f"message {i}")
        finally:
            log.removeHandler(buffer)
        entries = buffer.get_entries()
        assert [e.message for e in entries] == ["message 1", "message 2"]
        assert entries[0].name == "client.test"
        assert buffer.version == 3
        assert buffer.get_entries(1)[0].message == "message 2"
        assert buffer.get_entries(0) == []


class TestTerminalClientKeys:
    def test_keys_drive_manager(self) -> None:
        class Socket:
            def __init__(self) -> None:
                self.sent: list[str] = []
                self.incoming: asyncio.Queue[str] = asyncio.Queue()
                self.incoming.put_nowait(
                    '{"type":"welcome","playerId":"me","position":{"x":100,"y":100}}'
                )

            async def recv(self) -> str:
                return await self.incoming.get()

            async def send(self, data: str) -> None:
                self.sent.append(data)

            async def close(self, code: int = 1000, reason: str = "") -> None:
                pass

        async def scenario() -> None:
            socket = Socket()

            async def connector(url: str) -> Socket:
                return socket

            manager = GameManager(connector=connector)
            client = TerminalClient(
                manager, step=50, terminal=Terminal(force_styling=None)
            )
            await client.handle_key(key("c"))
            assert manager.is_connected
            while manager.current_player is None:
                await asyncio.sleep(0)

            await client.handle_key(key("s"))
            assert manager.current_player.position == Position(100, 150)
            assert len(socket.sent) == 1

            await client.handle_key(key("x"))
            assert not manager.is_connected
            assert manager.current_player is None

            await client.handle_key(key("q"))
            assert not client.running

        asyncio.run(scenario())
