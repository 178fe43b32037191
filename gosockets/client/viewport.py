"""Mapping of grid coordinates onto terminal cells."""

from dataclasses import dataclass


@dataclass
class Viewport:
    """Scales the continuous game grid into a fixed block of cells."""

    width: int
    height: int

    def to_cell(
        self, x: float, y: float, grid_width: float, grid_height: float
    ) -> tuple[int, int]:
        """
        Convert a grid position to a (column, row) inside the viewport.

        The grid edges map onto the first and last cell, so (0, 0) is the
        top-left cell and (grid_width, grid_height) the bottom-right one.
        """
        col = round(x / grid_width * (self.width - 1)) if grid_width > 0 else 0
        row = round(y / grid_height * (self.height - 1)) if grid_height > 0 else 0
        # Clamp to viewport bounds
        col = max(0, min(col, self.width - 1))
        row = max(0, min(row, self.height - 1))
        return col, row
