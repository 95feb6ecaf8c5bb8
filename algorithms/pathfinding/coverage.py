from typing import List

import numpy as np

from algorithms.entities.grid import Grid
from algorithms.pathfinding.astar import AStar
from algorithms.utils.types import Cell, Waypoint


class CoveragePlan:
    """
    Result of one planning call.

    waypoints: the stitched path, in traversal order
    targets:   serpentine visitation order the path was stitched from
    skipped:   targets the pathfinder could not reach (left uncovered)
    """

    def __init__(self, waypoints: List[Waypoint], targets: List[Cell], skipped: List[Cell]):
        self.waypoints = waypoints
        self.targets = targets
        self.skipped = skipped

    @property
    def is_complete(self) -> bool:
        return not self.skipped

    def __repr__(self) -> str:
        return (f"CoveragePlan(waypoints={len(self.waypoints)}, targets={len(self.targets)}, "
                f"skipped={len(self.skipped)})")


class CoveragePlanner:
    """
    Builds a full-coverage path: a boustrophedon scan over footprint origins,
    stitched together with A* so detours around the forbidden area are legal.

    Holds no state between calls; the grid passed in is read, never modified.
    Regenerate whenever the forbidden area changes.
    """

    def __init__(self, grid: Grid, verbose: bool = True):
        self.grid = grid
        self.astar = AStar(grid)
        self.verbose = verbose

    def coverage_targets(self) -> List[Cell]:
        """
        Serpentine visitation order. Row bands are stepped by the footprint
        size; even bands run left-to-right, odd bands right-to-left.
        Forbidden placements are simply left out.
        """
        mask = self.grid.forbidden_origin_mask()
        targets = []

        for band, row in enumerate(range(0, self.grid.max_row + 1, self.grid.footprint)):
            free_cols = np.flatnonzero(~mask[row])
            if band % 2 == 1:
                free_cols = free_cols[::-1]
            targets.extend(Cell(int(col), row) for col in free_cols)

        return targets

    def plan_coverage(self, home_cell: Cell) -> CoveragePlan:
        targets = self.coverage_targets()

        waypoints: List[Waypoint] = []
        skipped: List[Cell] = []
        current = home_cell

        for target in targets:
            if target == current:
                continue

            segment = self.astar.search(current, target)
            if not segment:
                # Unreachable (e.g. walled in by the forbidden area): stay put, try the next one
                skipped.append(target)
                continue

            waypoints.extend(self.grid.cell_to_waypoint(c) for c in segment)
            current = target

        plan = CoveragePlan(waypoints, targets, skipped)
        if self.verbose:
            print(f"🧭 Coverage plan from {home_cell}: {len(targets)} targets, {len(waypoints)} waypoints")
            if not plan.is_complete:
                print(f"🛑 SKIPPED UNREACHABLE TARGETS: {len(skipped)}")
        return plan

    def generate_coverage_plan(self, home_cell: Cell) -> List[Waypoint]:
        return self.plan_coverage(home_cell).waypoints
