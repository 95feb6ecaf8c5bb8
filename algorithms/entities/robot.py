# IN THIS FILE: ROBOT MOTION & BATTERY STATE MACHINE

import math
import random
from typing import List, Optional

from algorithms.entities.grid import Grid
from algorithms.pathfinding.coverage import CoveragePlan, CoveragePlanner
from algorithms.utils.config import SimulationConfig
from algorithms.utils.consts import ACTIVE_PATH_WINDOW, BATTERY_EMPTY, BATTERY_FULL
from algorithms.utils.enums import MotionMode, Rotation
from algorithms.utils.scheduler import ScheduledCall, TickScheduler
from algorithms.utils.types import Cell, ForbiddenRegion, PlanContext, RobotState, Waypoint


class Robot:
    """
    Executes a coverage plan one tick at a time.

    Modes: IDLE -> MOVING -> DIVERTING (battery low) -> CHARGING -> MOVING
    (resuming where it left off), or IDLE on stop/reset/plan complete.

    Nothing in here raises during normal operation: an empty or finished
    path just means the robot stays where it is.
    """

    def __init__(self, x: float, y: float, angle: float = 0.0,
                 config: Optional[SimulationConfig] = None,
                 rng: Optional[random.Random] = None):
        """
        Args:
            x, y: Starting position (continuous units)
            angle: Starting heading in radians
            config: Simulation parameters, defaults if omitted
            rng: Random source for home placement (seeded from config if omitted)
        """
        self.config = config if config is not None else SimulationConfig()
        self.grid = Grid(
            self.config.grid_width,
            self.config.grid_height,
            self.config.footprint,
            self.config.cell_size,
        )
        self.planner = CoveragePlanner(self.grid, verbose=self.config.verbose)
        self.scheduler = TickScheduler()
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        self.state = RobotState(x, y, angle)
        self.plan = PlanContext()
        self.last_plan: Optional[CoveragePlan] = None
        self.home = Waypoint(0, 0)

        # Bumped by stop()/reset() so stale deferred starts do nothing
        self._epoch = 0
        self._pending_start: Optional[ScheduledCall] = None

        self.set_random_home()

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> MotionMode:
        return self.state.mode

    @property
    def battery(self) -> float:
        return self.state.battery

    @property
    def path(self) -> List[Waypoint]:
        return self.plan.path

    @property
    def active_path(self) -> List[Waypoint]:
        """What the robot is heading for next: the station while diverting."""
        if self.state.mode is MotionMode.DIVERTING:
            return [self.home]
        return self.plan.upcoming(ACTIVE_PATH_WINDOW)

    @property
    def forbidden_area(self) -> Optional[ForbiddenRegion]:
        return self.grid.forbidden_area

    @property
    def home_cell(self) -> Cell:
        return self.grid.waypoint_to_cell(self.home.x, self.home.y)

    def snapshot(self) -> dict:
        region = self.grid.forbidden_area
        return {
            "x": self.state.x,
            "y": self.state.y,
            "angle": self.state.angle,
            "battery": self.state.battery,
            "mode": self.state.mode.value,
            "home": self.home.get_dict(),
            "forbidden_area": region.get_dict() if region else None,
            "path_index": self.plan.index,
            "path_length": len(self.plan.path),
            "resume_index": self.plan.resume_index,
            "progress": self.plan.progress,
            "skipped_targets": len(self.last_plan.skipped) if self.last_plan else 0,
            "tick": self.scheduler.tick_count,
            "active_path": [w.get_dict() for w in self.active_path],
        }

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def set_random_home(self) -> None:
        """Place the charging station on a random interior cell."""
        margin = self.config.home_margin
        max_col = min(self.grid.width - 1 - margin, self.grid.max_col)
        max_row = min(self.grid.height - 1 - margin, self.grid.max_row)
        home = Cell(self.rng.randint(margin, max_col), self.rng.randint(margin, max_row))
        self.home = self.grid.cell_to_waypoint(home)

    def generate_path(self) -> None:
        """Replan coverage from the home cell and start again from its first waypoint."""
        self.last_plan = self.planner.plan_coverage(self.home_cell)
        self.plan.replace(self.last_plan.waypoints)

    def set_forbidden_area(self, region: Optional[ForbiddenRegion]) -> None:
        """Replace (or clear, with None) the forbidden area and replan immediately."""
        self.grid.set_forbidden_area(region)
        self.generate_path()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Move to a freshly placed home station and begin (or continue) the plan
        after start_delay_ticks. Returns immediately.
        """
        self.set_random_home()
        if self.plan.is_empty or self.plan.is_exhausted:
            self.generate_path()

        self._invalidate_pending_start()
        self.state.mode = MotionMode.IDLE
        self.state.x = self.home.x
        self.state.y = self.home.y

        epoch = self._epoch
        self._pending_start = self.scheduler.call_later(
            self.config.start_delay_ticks, lambda: self._begin_moving(epoch)
        )

    def stop(self) -> None:
        self._invalidate_pending_start()
        if self.state.mode in (MotionMode.DIVERTING, MotionMode.CHARGING):
            self.plan.index = self.plan.resume_index
        self.state.mode = MotionMode.IDLE

    def reset(self, x: float, y: float, angle: float = 0.0) -> None:
        self._invalidate_pending_start()
        self.scheduler.cancel_all()
        self.state = RobotState(x, y, angle)
        self.plan.clear()
        self.last_plan = None
        self.set_random_home()

    def rotate(self, rotation: Rotation) -> None:
        self.state.angle += rotation.sign * self.config.angular_step

    def rotate_left(self) -> None:
        self.rotate(Rotation.LEFT)

    def rotate_right(self) -> None:
        self.rotate(Rotation.RIGHT)

    def _invalidate_pending_start(self) -> None:
        self._epoch += 1
        if self._pending_start is not None:
            self._pending_start.cancel()
            self._pending_start = None

    def _begin_moving(self, epoch: int) -> None:
        if epoch != self._epoch or self.state.mode is not MotionMode.IDLE:
            return
        self._pending_start = None
        self.state.mode = MotionMode.MOVING

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def advance(self) -> None:
        """One simulation tick."""
        self.scheduler.tick()

        mode = self.state.mode
        if mode is MotionMode.CHARGING:
            self._charge()
        elif mode is MotionMode.MOVING:
            self._follow_path()
        elif mode is MotionMode.DIVERTING:
            self._return_home()

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.advance()

    def _charge(self) -> None:
        self.state.battery += self.config.charge_rate
        if self.state.battery >= BATTERY_FULL:
            self.state.battery = BATTERY_FULL
            self.state.mode = MotionMode.MOVING
            self.plan.index = self.plan.resume_index
            self._log(f"🔋 Charged, resuming at waypoint {self.plan.index}/{len(self.plan.path)}")

    def _follow_path(self) -> None:
        if self.plan.is_empty or self.plan.is_exhausted:
            return

        if self.state.battery <= self.config.low_battery:
            self.plan.resume_index = self.plan.index
            self.state.mode = MotionMode.DIVERTING
            self._log(f"🪫 Battery {self.state.battery:.2f}%, heading home from waypoint {self.plan.index}")
            return

        if self._step_towards(self.plan.current_target):
            self.plan.index += 1
            if self.plan.is_exhausted:
                self.state.mode = MotionMode.IDLE
                self._log(f"✅ Coverage complete ({len(self.plan.path)} waypoints)")
        self._drain()

    def _return_home(self) -> None:
        if self._step_towards(self.home):
            self.state.mode = MotionMode.CHARGING
            self._log(f"🏠 Docked at ({self.home.x}, {self.home.y}), charging")
        else:
            self._drain()

    def _step_towards(self, target: Waypoint) -> bool:
        """Move up to one speed-length towards target. True if we arrived (snapped)."""
        dx = target.x - self.state.x
        dy = target.y - self.state.y
        if math.hypot(dx, dy) < self.config.speed:
            self.state.x = target.x
            self.state.y = target.y
            return True

        heading = math.atan2(dy, dx)
        self.state.x += self.config.speed * math.cos(heading)
        self.state.y += self.config.speed * math.sin(heading)
        self.state.angle = heading
        return False

    def _drain(self) -> None:
        self.state.battery = max(BATTERY_EMPTY, self.state.battery - self.config.battery_drain)

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(message)
