# algorithms/entities/grid.py

import math
from typing import Optional

import numpy as np

from algorithms.utils.consts import CELL_SIZE, FOOTPRINT, GRID_HEIGHT, GRID_WIDTH
from algorithms.utils.types import Cell, ForbiddenRegion, Waypoint


class Grid:
    """
    Represents the 50x50 lawn/floor grid.
    Holds the forbidden area and validates robot footprint placements.
    """

    def __init__(
        self,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        footprint: int = FOOTPRINT,
        cell_size: int = CELL_SIZE,
        forbidden_area: Optional[ForbiddenRegion] = None,
    ):
        self.width = width
        self.height = height
        self.footprint = footprint
        self.cell_size = cell_size
        self.forbidden_area = forbidden_area

    def set_forbidden_area(self, region: Optional[ForbiddenRegion]) -> None:
        self.forbidden_area = region

    @property
    def max_col(self) -> int:
        return self.width - self.footprint

    @property
    def max_row(self) -> int:
        return self.height - self.footprint

    def is_within_bounds(self, col: int, row: int) -> bool:
        """
        Check if (col, row) is a valid footprint origin,
        i.e. the whole F x F body stays on the grid.
        """
        return 0 <= col <= self.max_col and 0 <= row <= self.max_row

    def is_footprint_forbidden(self, col: int, row: int) -> bool:
        """
        True iff any cell of the F x F body anchored at (col, row)
        falls inside the forbidden area. Bounds are not checked here.
        """
        region = self.forbidden_area
        if region is None:
            return False

        for dx in range(self.footprint):
            for dy in range(self.footprint):
                if region.contains(col + dx, row + dy):
                    return True
        return False

    def is_reachable(self, col: int, row: int) -> bool:
        """
        Check if the robot can be placed at origin (col, row).
        """
        if not self.is_within_bounds(col, row):
            return False
        return not self.is_footprint_forbidden(col, row)

    def forbidden_origin_mask(self) -> np.ndarray:
        """
        Boolean mask over every valid origin, indexed [row, col].
        True where the footprint would overlap the forbidden area.
        """
        mask = np.zeros((self.max_row + 1, self.max_col + 1), dtype=bool)
        region = self.forbidden_area
        if region is None:
            return mask

        cols = np.arange(self.max_col + 1)
        rows = np.arange(self.max_row + 1)
        # Body spans [origin, origin + F - 1]; overlap test per axis
        col_hit = (cols <= region.x2) & (cols + self.footprint - 1 >= region.x1)
        row_hit = (rows <= region.y2) & (rows + self.footprint - 1 >= region.y1)
        mask[np.ix_(row_hit, col_hit)] = True
        return mask

    # -------------------------------------------------------------------------
    # Cell <-> continuous coordinates
    # -------------------------------------------------------------------------

    def cell_to_waypoint(self, cell: Cell) -> Waypoint:
        """Centre of the footprint anchored at cell."""
        offset = self.cell_size * self.footprint / 2
        return Waypoint(cell.col * self.cell_size + offset, cell.row * self.cell_size + offset)

    def waypoint_to_cell(self, x: float, y: float) -> Cell:
        """Inverse of cell_to_waypoint for footprint centres."""
        half = self.footprint // 2
        col = int(math.floor(x / self.cell_size)) - half
        row = int(math.floor(y / self.cell_size)) - half
        return Cell(col, row)
