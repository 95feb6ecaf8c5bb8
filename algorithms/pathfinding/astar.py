import heapq
import itertools
from typing import Dict, List, Optional

from algorithms.entities.grid import Grid
from algorithms.utils.types import Cell, Waypoint

# 4-connected moves only (dc, dr)
NEIGHBOR_OFFSETS = [(1, 0), (-1, 0), (0, 1), (0, -1)]


class AStarNode:
    def __init__(self, cell: Cell, g_cost: int, h_cost: int, seq: int, parent: Optional['AStarNode'] = None):
        self.cell = cell
        self.g_cost = g_cost
        self.h_cost = h_cost
        self.f_cost = g_cost + h_cost
        self.seq = seq          # insertion order, breaks f-cost ties deterministically
        self.parent = parent

    def __lt__(self, other):
        return (self.f_cost, self.seq) < (other.f_cost, other.seq)


class AStar:
    """
    Shortest footprint-origin path between two cells.
    Uniform step cost, Manhattan heuristic, forbidden placements skipped.
    """

    def __init__(self, grid: Grid):
        self.grid = grid

    def heuristic(self, current: Cell, goal: Cell) -> int:
        # Manhattan is admissible and consistent on a 4-connected unit grid
        return current.manhattan(goal)

    def get_neighbors(self, cell: Cell) -> List[Cell]:
        neighbors = []
        for dc, dr in NEIGHBOR_OFFSETS:
            nc, nr = cell.col + dc, cell.row + dr
            if self.grid.is_reachable(nc, nr):
                neighbors.append(Cell(nc, nr))
        return neighbors

    def search(self, start: Cell, goal: Cell) -> List[Cell]:
        """
        Cells from start to goal, EXCLUDING start. Empty if the goal cannot
        be reached or start == goal.
        """
        if start == goal:
            return []

        counter = itertools.count()
        open_set: List[AStarNode] = []
        heapq.heappush(open_set, AStarNode(start, 0, self.heuristic(start, goal), next(counter)))
        closed_set = set()

        # Best known cost per cell, scoped to this call
        g_scores: Dict[Cell, int] = {start: 0}

        while open_set:
            current_node = heapq.heappop(open_set)
            curr = current_node.cell

            if curr == goal:
                return self._reconstruct_path(current_node)

            if curr in closed_set:
                continue
            closed_set.add(curr)

            for next_cell in self.get_neighbors(curr):
                if next_cell in closed_set:
                    continue

                tentative_g = current_node.g_cost + 1
                if next_cell in g_scores and g_scores[next_cell] <= tentative_g:
                    continue

                g_scores[next_cell] = tentative_g
                heapq.heappush(open_set, AStarNode(
                    next_cell, tentative_g, self.heuristic(next_cell, goal), next(counter), current_node
                ))

        return []  # No path found

    def find_path(self, start_col: int, start_row: int, end_col: int, end_row: int) -> List[Waypoint]:
        """
        Waypoints (footprint centres) from start towards end, start excluded.
        An empty list means no progress is possible to this target.
        """
        cells = self.search(Cell(start_col, start_row), Cell(end_col, end_row))
        return [self.grid.cell_to_waypoint(c) for c in cells]

    def _reconstruct_path(self, node: AStarNode) -> List[Cell]:
        path = []
        # Stop before the start node (the one without a parent)
        while node.parent is not None:
            path.append(node.cell)
            node = node.parent
        return path[::-1]
