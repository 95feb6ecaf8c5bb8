# IN THIS FILE: MOTION MODES AND MANUAL ROTATION
from enum import Enum


class MotionMode(str, Enum):
    """
    What the robot is doing this tick. Exactly one mode is active.
    Values are the strings published in the state snapshot.
    """
    IDLE = "idle"
    MOVING = "moving"
    DIVERTING = "diverting"   # low battery, heading straight to the station
    CHARGING = "charging"


class Rotation(str, Enum):
    """Manual heading override. LEFT turns counter-clockwise on screen."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        return -1 if self is Rotation.LEFT else 1
