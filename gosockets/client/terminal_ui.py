"""Terminal UI rendering with blessed."""

from __future__ import annotations

from blessed import Terminal

from ..common.constants import MAX_PLAYERS
from .game_state import GameSnapshot
from .log_buffer import LogEntry
from .viewport import Viewport


class TerminalUI:
    def __init__(self, terminal: Terminal, viewport: Viewport):
        self.term = terminal
        self.viewport = viewport

    def render(
        self,
        snapshot: GameSnapshot,
        grid_width: float,
        grid_height: float,
        log_entries: list[LogEntry] | None = None,
    ) -> None:
        """Render the game state to the terminal."""
        lines = self.build_lines(snapshot, grid_width, grid_height, log_entries)
        print("\n".join(lines), end="", flush=True)

    def build_lines(
        self,
        snapshot: GameSnapshot,
        grid_width: float,
        grid_height: float,
        log_entries: list[LogEntry] | None = None,
    ) -> list[str]:
        output = []

        # Clear screen and move to top
        output.append(self.term.home + self.term.clear)

        occupied = self._occupied_cells(snapshot, grid_width, grid_height)

        # Draw the grid, framed by walls
        border = "+" + "-" * self.viewport.width + "+"
        output.append(border)
        for row in range(self.viewport.height):
            cells = "".join(
                occupied.get((col, row), ".") for col in range(self.viewport.width)
            )
            output.append("|" + cells + "|")
        output.append(border)

        # Status bar
        output.append("")
        if snapshot.is_connected:
            status = self.term.green("Connected")
        else:
            status = self.term.red("Disconnected")
        line = f"[{status}] Players ({snapshot.total_player_count}/{MAX_PLAYERS})"
        me = snapshot.current_player
        if me:
            line += f" | Position: ({me.position.x:.0f}, {me.position.y:.0f})"
        output.append(line)

        if snapshot.connection_error:
            output.append(self.term.red(snapshot.connection_error))

        # Player list
        output.append("")
        output.append("Players:")
        if me:
            output.append(f"  > {me.id} at ({me.position.x:.0f}, {me.position.y:.0f})")
        for p in snapshot.other_players:
            output.append(f"    {p.id} at ({p.position.x:.0f}, {p.position.y:.0f})")

        # Recent log lines
        if log_entries:
            output.append("")
            for entry in log_entries:
                text = f"{entry.level[0]} {entry.name}: {entry.message}"
                output.append(self.term.dim(text))

        # Controls
        output.append("")
        output.append("Controls: C=Connect, X=Disconnect, WASD/HJKL/Arrows=Move, Q=Quit")

        return output

    def _occupied_cells(
        self, snapshot: GameSnapshot, grid_width: float, grid_height: float
    ) -> dict[tuple[int, int], str]:
        """Map viewport cells to player markers. The local player wins ties."""
        cells: dict[tuple[int, int], str] = {}
        for p in snapshot.other_players:
            cell = self.viewport.to_cell(
                p.position.x, p.position.y, grid_width, grid_height
            )
            cells[cell] = self.term.bold_yellow("@")
        me = snapshot.current_player
        if me:
            cell = self.viewport.to_cell(
                me.position.x, me.position.y, grid_width, grid_height
            )
            cells[cell] = self.term.bold_green("@")
        return cells

    def cleanup(self) -> None:
        """Restore terminal state."""
        print(self.term.normal + self.term.clear, end="")
