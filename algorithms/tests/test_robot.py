import math

import pytest

from algorithms.entities.robot import Robot
from algorithms.utils.config import SimulationConfig
from algorithms.utils.consts import ACTIVE_PATH_WINDOW
from algorithms.utils.enums import MotionMode
from algorithms.utils.types import ForbiddenRegion, Waypoint


def make_robot(**overrides) -> Robot:
    params = {"seed": 7, "verbose": False}
    params.update(overrides)
    return Robot(100, 200, 0.0, config=SimulationConfig(**params))


def moving_robot(battery: float = 100.0) -> Robot:
    """Robot parked on its home station, plan loaded, already MOVING."""
    robot = make_robot(grid_width=10, grid_height=10)
    robot.generate_path()
    robot.state.x, robot.state.y = robot.home.x, robot.home.y
    robot.state.mode = MotionMode.MOVING
    robot.state.battery = battery
    return robot


# -----------------------------------------------------------------------------
# reset / home placement
# -----------------------------------------------------------------------------

def test_reset_round_trip():
    robot = make_robot()
    robot.generate_path()
    robot.state.battery = 42.0
    robot.state.mode = MotionMode.MOVING

    robot.reset(123.5, 45.25, 1.2)

    assert (robot.state.x, robot.state.y, robot.state.angle) == (123.5, 45.25, 1.2)
    assert robot.battery == 100
    assert robot.mode is MotionMode.IDLE
    assert robot.path == []
    assert robot.plan.index == 0


def test_home_stays_away_from_edges():
    for seed in range(50):
        robot = make_robot(seed=seed)
        home = robot.home_cell
        assert 2 <= home.col <= 47
        assert 2 <= home.row <= 47
        assert robot.grid.cell_to_waypoint(home) == robot.home


# -----------------------------------------------------------------------------
# start / stop and the deferred activation
# -----------------------------------------------------------------------------

def test_start_snaps_home_and_moves_after_delay():
    robot = make_robot(start_delay_ticks=5)
    robot.start()

    assert (robot.state.x, robot.state.y) == (robot.home.x, robot.home.y)
    assert robot.path, "start() plans when there is no plan yet"
    assert robot.mode is MotionMode.IDLE

    robot.run(4)
    assert robot.mode is MotionMode.IDLE
    assert (robot.state.x, robot.state.y) == (robot.home.x, robot.home.y)

    robot.advance()
    assert robot.mode is MotionMode.MOVING


def test_zero_delay_start_is_still_deferred():
    robot = make_robot(start_delay_ticks=0)
    robot.start()
    assert robot.mode is MotionMode.IDLE
    robot.advance()
    assert robot.mode is MotionMode.MOVING


def test_stop_during_delay_keeps_robot_idle():
    robot = make_robot(start_delay_ticks=3)
    robot.start()
    robot.stop()
    robot.run(10)
    assert robot.mode is MotionMode.IDLE


def test_reset_during_delay_keeps_robot_idle():
    robot = make_robot(start_delay_ticks=3)
    robot.start()
    robot.reset(50, 60, 0.5)
    robot.run(10)
    assert robot.mode is MotionMode.IDLE
    assert (robot.state.x, robot.state.y) == (50, 60)


def test_stale_start_does_not_fire_early():
    robot = make_robot(start_delay_ticks=5)
    robot.start()
    robot.run(3)
    robot.reset(50, 60)
    robot.start()           # due at tick 8; the first start was due at tick 5

    robot.run(4)
    assert robot.mode is MotionMode.IDLE
    robot.advance()
    assert robot.mode is MotionMode.MOVING


def test_start_from_inside_a_tick():
    robot = make_robot(start_delay_ticks=1)
    robot.scheduler.call_later(0, robot.start)

    robot.advance()             # start() runs here
    assert robot.mode is MotionMode.IDLE
    robot.advance()
    assert robot.mode is MotionMode.MOVING


def test_start_after_completed_plan_replans():
    robot = moving_robot()
    robot.plan.index = len(robot.path)
    robot.state.mode = MotionMode.IDLE

    robot.start()
    assert robot.plan.index == 0
    assert not robot.plan.is_exhausted

    robot.run(robot.config.start_delay_ticks + 3)
    assert robot.mode is MotionMode.MOVING
    assert (robot.state.x, robot.state.y) != (robot.home.x, robot.home.y)


def test_reset_drops_scheduled_callbacks():
    robot = make_robot()
    fired = []
    robot.scheduler.call_later(1, lambda: fired.append("late"))

    robot.reset(50, 60)
    robot.run(3)

    assert fired == []
    assert robot.scheduler.pending == 0


def test_stop_preserves_progress():
    robot = moving_robot()
    robot.run(40)
    index, battery = robot.plan.index, robot.battery

    robot.stop()
    robot.run(10)

    assert robot.mode is MotionMode.IDLE
    assert robot.plan.index == index
    assert robot.battery == battery


# -----------------------------------------------------------------------------
# motion
# -----------------------------------------------------------------------------

def test_partial_move_heads_for_target():
    robot = moving_robot()
    target = robot.plan.current_target
    x0, y0 = robot.state.x, robot.state.y

    robot.advance()

    heading = math.atan2(target.y - y0, target.x - x0)
    assert robot.state.angle == pytest.approx(heading)
    assert math.hypot(robot.state.x - x0, robot.state.y - y0) == pytest.approx(2)
    assert robot.battery == pytest.approx(99.95)
    assert robot.plan.index == 0


def test_snap_advances_index_and_costs_one_move():
    robot = moving_robot()
    target = robot.plan.current_target
    robot.state.x, robot.state.y = target.x - 1.5, target.y

    robot.advance()

    assert (robot.state.x, robot.state.y) == (target.x, target.y)
    assert robot.plan.index == 1
    assert robot.battery == pytest.approx(99.95)


def test_empty_path_while_moving_is_a_no_op():
    robot = make_robot()
    robot.state.mode = MotionMode.MOVING

    robot.run(5)

    assert (robot.state.x, robot.state.y) == (100, 200)
    assert robot.battery == 100
    assert robot.mode is MotionMode.MOVING


def test_rotation_only_touches_heading():
    robot = make_robot()
    robot.rotate_right()
    assert robot.state.angle == pytest.approx(math.pi / 90)
    robot.rotate_left()
    robot.rotate_left()
    assert robot.state.angle == pytest.approx(-math.pi / 90)
    assert (robot.state.x, robot.state.y, robot.battery) == (100, 200, 100)


# -----------------------------------------------------------------------------
# battery
# -----------------------------------------------------------------------------

def test_low_battery_diverts_on_next_evaluation():
    robot = moving_robot(battery=20.05)

    robot.advance()
    assert robot.battery == pytest.approx(20.0)
    assert robot.mode is MotionMode.MOVING

    index = robot.plan.index
    battery = robot.battery
    robot.advance()
    assert robot.mode is MotionMode.DIVERTING
    assert robot.plan.resume_index == index
    assert robot.battery == battery
    assert robot.active_path == [robot.home]


def test_battery_exactly_at_threshold_diverts():
    robot = moving_robot(battery=20.0)
    robot.advance()
    assert robot.mode is MotionMode.DIVERTING


def test_battery_just_above_threshold_keeps_moving():
    robot = moving_robot(battery=20.1)
    robot.advance()
    assert robot.mode is MotionMode.MOVING


def test_diverting_moves_towards_home_and_drains():
    robot = moving_robot()
    robot.state.mode = MotionMode.DIVERTING
    robot.state.x, robot.state.y = robot.home.x + 10, robot.home.y
    robot.state.battery = 15.0

    robot.advance()

    assert robot.state.x == pytest.approx(robot.home.x + 8)
    assert robot.state.angle == pytest.approx(math.pi)
    assert robot.battery == pytest.approx(14.95)
    assert robot.mode is MotionMode.DIVERTING


def test_arrival_at_home_starts_charging_without_drain():
    robot = moving_robot()
    robot.state.mode = MotionMode.DIVERTING
    robot.state.x, robot.state.y = robot.home.x + 1, robot.home.y
    robot.state.battery = 15.0

    robot.advance()

    assert (robot.state.x, robot.state.y) == (robot.home.x, robot.home.y)
    assert robot.mode is MotionMode.CHARGING
    assert robot.battery == 15.0


def test_charging_clamps_and_resumes():
    robot = moving_robot()
    robot.plan.index = 3
    robot.plan.resume_index = 11
    robot.state.mode = MotionMode.CHARGING
    robot.state.battery = 99.6

    robot.advance()

    assert robot.battery == 100
    assert robot.mode is MotionMode.MOVING
    assert robot.plan.index == 11


def test_charging_does_not_move():
    robot = moving_robot()
    robot.state.mode = MotionMode.CHARGING
    robot.state.battery = 50.0
    x, y = robot.state.x, robot.state.y

    robot.advance()

    assert robot.battery == pytest.approx(50.5)
    assert (robot.state.x, robot.state.y) == (x, y)


def test_stop_while_charging_restores_resume_index():
    robot = moving_robot()
    robot.plan.resume_index = 9
    robot.plan.index = 9
    robot.state.mode = MotionMode.CHARGING

    robot.stop()

    assert robot.mode is MotionMode.IDLE
    assert robot.plan.index == 9


def test_full_coverage_run_with_charging():
    robot = make_robot(start_delay_ticks=0)
    robot.start()
    assert robot.path

    charged = 0
    for _ in range(200000):
        before_mode, before_battery = robot.mode, robot.battery
        robot.advance()
        assert 0 <= robot.battery <= 100
        if before_mode is MotionMode.MOVING and robot.mode is MotionMode.MOVING:
            assert robot.battery <= before_battery
        if before_mode is MotionMode.CHARGING:
            assert robot.battery >= before_battery
            if robot.mode is MotionMode.MOVING:
                charged += 1
        if robot.mode is MotionMode.IDLE and robot.plan.is_exhausted:
            break

    assert robot.mode is MotionMode.IDLE
    assert robot.plan.index == len(robot.path)
    last = robot.path[-1]
    assert (robot.state.x, robot.state.y) == (last.x, last.y)
    assert charged >= 1


# -----------------------------------------------------------------------------
# forbidden area
# -----------------------------------------------------------------------------

def test_set_forbidden_area_replans_from_scratch():
    robot = moving_robot()
    robot.run(50)
    assert robot.plan.index > 0

    robot.set_forbidden_area(ForbiddenRegion(0, 0, 1, 1))

    assert robot.plan.index == 0
    assert robot.forbidden_area == ForbiddenRegion(0, 0, 1, 1)
    assert robot.path
    for wp in robot.path:
        cell = robot.grid.waypoint_to_cell(wp.x, wp.y)
        assert not robot.grid.is_footprint_forbidden(cell.col, cell.row)

    robot.set_forbidden_area(None)
    assert robot.forbidden_area is None
    assert robot.snapshot()["forbidden_area"] is None


def test_forbidden_band_across_home_row():
    robot = make_robot(grid_width=20, grid_height=20, start_delay_ticks=0)
    home = robot.home_cell
    band = ForbiddenRegion(0, home.row, robot.grid.width - 1, home.row + 1)

    robot.set_forbidden_area(band)

    targets = robot.last_plan.targets
    assert targets
    assert all(not (home.row - 1 <= t.row <= home.row + 1) for t in targets)
    # Home itself sits inside the band, so nothing can be reached from it
    assert robot.path == []
    assert robot.last_plan.skipped == targets
    assert robot.snapshot()["skipped_targets"] == len(targets)

    robot.start()
    robot.run(500)

    assert 0 <= robot.battery <= 100
    assert robot.mode in (MotionMode.IDLE, MotionMode.MOVING)
    for wp in robot.path:
        cell = robot.grid.waypoint_to_cell(wp.x, wp.y)
        assert not robot.grid.is_footprint_forbidden(cell.col, cell.row)


def test_snapshot_reports_plan_progress():
    robot = moving_robot()
    robot.plan.index = len(robot.path) // 2

    snap = robot.snapshot()

    assert snap["mode"] == "moving"
    assert snap["path_length"] == len(robot.path)
    assert snap["progress"] == pytest.approx(robot.plan.index / len(robot.path))
    assert snap["skipped_targets"] == 0
    assert snap["home"] == {"x": robot.home.x, "y": robot.home.y}
    upcoming = robot.path[robot.plan.index:robot.plan.index + ACTIVE_PATH_WINDOW]
    assert robot.active_path == upcoming
    assert snap["active_path"] == [w.get_dict() for w in upcoming]
    assert isinstance(robot.active_path[0], Waypoint)


def test_active_path_is_a_bounded_window():
    robot = make_robot()
    robot.generate_path()
    assert len(robot.path) > ACTIVE_PATH_WINDOW

    assert robot.active_path == robot.path[:ACTIVE_PATH_WINDOW]
    assert len(robot.snapshot()["active_path"]) == ACTIVE_PATH_WINDOW

    robot.plan.index = len(robot.path) - 3
    assert robot.active_path == robot.path[-3:]

    robot.plan.index = len(robot.path)
    assert robot.snapshot()["active_path"] == []
