# IN THIS FILE: CELL, WAYPOINT, FORBIDDENREGION, ROBOTSTATE, PLANCONTEXT

from typing import List, Optional

from algorithms.utils.consts import BATTERY_FULL
from algorithms.utils.enums import MotionMode


class Cell:
    """
    A footprint origin on the grid (column, row), 0-indexed.
    The robot's F x F body extends right and down from this cell.
    """

    def __init__(self, col: int, row: int):
        self.col = col
        self.row = row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return False
        return self.col == other.col and self.row == other.row

    def __hash__(self) -> int:
        return hash((self.col, self.row))

    def __repr__(self) -> str:
        return f"Cell(col={self.col}, row={self.row})"

    def manhattan(self, other: 'Cell') -> int:
        return abs(self.col - other.col) + abs(self.row - other.row)


class Waypoint:
    """
    A continuous-space target for one step of a path.
    Same units as the robot position (cell size * cells).
    """

    def __init__(self, x: float, y: float):
        self.x = x
        self.y = y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Waypoint):
            return False
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"Waypoint(x={self.x}, y={self.y})"

    def get_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


class ForbiddenRegion:
    """
    Axis-aligned rectangle in cell coordinates, bounds inclusive.
    Always stored normalized (x1 <= x2, y1 <= y2). Not clipped to the grid.
    """

    def __init__(self, x1: int, y1: int, x2: int, y2: int):
        self.x1 = min(x1, x2)
        self.y1 = min(y1, y2)
        self.x2 = max(x1, x2)
        self.y2 = max(y1, y2)

    def contains(self, col: int, row: int) -> bool:
        return self.x1 <= col <= self.x2 and self.y1 <= row <= self.y2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ForbiddenRegion):
            return False
        return (self.x1, self.y1, self.x2, self.y2) == (other.x1, other.y1, other.x2, other.y2)

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"ForbiddenRegion(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"

    def get_dict(self) -> dict:
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}


class RobotState:
    """
    Everything a renderer needs to draw the robot.
    Invariant: 0 <= battery <= 100.
    """

    def __init__(self, x: float, y: float, angle: float = 0.0, battery: float = BATTERY_FULL,
                 mode: MotionMode = MotionMode.IDLE):
        self.x = x
        self.y = y
        self.angle = angle          # heading in radians, 0 = +x, clockwise on screen
        self.battery = battery
        self.mode = mode

    def __repr__(self) -> str:
        return (f"RobotState(x={self.x:.2f}, y={self.y:.2f}, angle={self.angle:.3f}, "
                f"battery={self.battery:.2f}, mode={self.mode.value})")


class PlanContext:
    """
    The coverage path being executed and where we are in it.
    resume_index is only meaningful while diverting or charging.
    """

    def __init__(self, path: Optional[List[Waypoint]] = None):
        self.path: List[Waypoint] = path if path is not None else []
        self.index = 0
        self.resume_index = 0

    @property
    def is_empty(self) -> bool:
        return not self.path

    @property
    def is_exhausted(self) -> bool:
        return self.index >= len(self.path)

    @property
    def current_target(self) -> Optional[Waypoint]:
        if self.is_exhausted:
            return None
        return self.path[self.index]

    @property
    def progress(self) -> float:
        if not self.path:
            return 0.0
        return min(self.index, len(self.path)) / len(self.path)

    def upcoming(self, limit: int) -> List[Waypoint]:
        """Next waypoints still to be visited, at most limit of them."""
        return self.path[self.index:self.index + limit]

    def replace(self, path: List[Waypoint]) -> None:
        """Swap in a freshly generated plan; the old index means nothing for it."""
        self.path = path
        self.index = 0
        self.resume_index = 0

    def clear(self) -> None:
        self.replace([])
