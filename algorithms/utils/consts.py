# IN THIS FILE: ALL CONSTANTS (DEFAULTS FOR THE SIMULATION CONFIG)
import math

# -----------------------------------------------------------------------------
# 1. GRID & ARENA DIMENSIONS
# -----------------------------------------------------------------------------
CELL_SIZE = 16          # Each cell = 16 units (pixels in the renderer)
GRID_WIDTH = 50         # 50 cells across
GRID_HEIGHT = 50        # 50 cells down

# -----------------------------------------------------------------------------
# 2. ROBOT DIMENSIONS (FOOTPRINT)
# -----------------------------------------------------------------------------
# The robot occupies a FOOTPRINT x FOOTPRINT block of cells anchored at its
# top-left (origin) cell. Coverage rows are stepped by the same amount.
FOOTPRINT = 2

# -----------------------------------------------------------------------------
# 3. MOVEMENT PHYSICS (PER TICK)
# -----------------------------------------------------------------------------
SPEED = 2                       # units per tick
ANGULAR_STEP = math.pi / 90     # radians per manual rotation

# -----------------------------------------------------------------------------
# 4. BATTERY
# -----------------------------------------------------------------------------
BATTERY_FULL = 100.0
BATTERY_EMPTY = 0.0
BATTERY_DRAIN = 0.05    # per tick spent moving (snap or partial move)
CHARGE_RATE = 0.5       # per tick spent on the station
LOW_BATTERY = 20.0      # at or below this the robot heads home

# -----------------------------------------------------------------------------
# 5. HOME STATION & SCHEDULING
# -----------------------------------------------------------------------------
HOME_MARGIN = 2         # home never closer than this many cells to an edge
START_DELAY_TICKS = 60  # roughly one second at 60 Hz before motion begins
TICK_RATE = 60          # background ticker frequency (Hz)
ACTIVE_PATH_WINDOW = 50  # upcoming waypoints published per snapshot

# -----------------------------------------------------------------------------
# 6. SERVER
# -----------------------------------------------------------------------------
HOST = "0.0.0.0"
PORT = 5000

# Position the UI's reset button sends
RESET_X = 100
RESET_Y = 200
RESET_ANGLE = 0.0
