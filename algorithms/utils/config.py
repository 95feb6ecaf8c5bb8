# IN THIS FILE: SIMULATION CONFIG (PYDANTIC) AND JSON LOADER

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from algorithms.utils.consts import (
    ANGULAR_STEP,
    BATTERY_DRAIN,
    CELL_SIZE,
    CHARGE_RATE,
    FOOTPRINT,
    GRID_HEIGHT,
    GRID_WIDTH,
    HOME_MARGIN,
    HOST,
    LOW_BATTERY,
    PORT,
    SPEED,
    START_DELAY_TICKS,
    TICK_RATE,
)


class SimulationConfig(BaseModel):
    """
    Tunable parameters of the simulation. Every field defaults to the value
    in consts.py, so SimulationConfig() reproduces the reference behaviour.
    """
    cell_size: int = Field(CELL_SIZE, gt=0, description="Units per grid cell")
    grid_width: int = Field(GRID_WIDTH, gt=0, description="Grid width in cells")
    grid_height: int = Field(GRID_HEIGHT, gt=0, description="Grid height in cells")
    footprint: int = Field(FOOTPRINT, gt=0, description="Robot body is footprint x footprint cells")

    speed: float = Field(SPEED, gt=0, description="Units travelled per tick")
    angular_step: float = Field(ANGULAR_STEP, gt=0, description="Radians per manual rotation")
    battery_drain: float = Field(BATTERY_DRAIN, ge=0, description="Battery used per moving tick")
    charge_rate: float = Field(CHARGE_RATE, gt=0, description="Battery gained per charging tick")
    low_battery: float = Field(LOW_BATTERY, description="Divert home at or below this level")

    home_margin: int = Field(HOME_MARGIN, ge=0, description="Minimum cells between home and any edge")
    start_delay_ticks: int = Field(START_DELAY_TICKS, ge=0, description="Ticks between start() and motion")
    seed: Optional[int] = Field(None, description="Seed for home placement")

    tick_rate: float = Field(TICK_RATE, gt=0, description="Background ticker frequency (Hz)")
    auto_tick: bool = Field(False, description="Run a background ticker in the server")
    host: str = HOST
    port: int = Field(PORT, gt=0, lt=65536)
    verbose: bool = True

    @field_validator('low_battery')
    @classmethod
    def validate_low_battery(cls, v: float) -> float:
        if not 0.0 < v < 100.0:
            raise ValueError(f"low_battery must be between 0 and 100: {v}")
        return v

    @model_validator(mode='after')
    def validate_geometry(self) -> 'SimulationConfig':
        if self.footprint > min(self.grid_width, self.grid_height):
            raise ValueError(
                f"footprint {self.footprint} does not fit a {self.grid_width}x{self.grid_height} grid"
            )
        # Home origin range is [margin, min(size - 1 - margin, size - footprint)]
        for size in (self.grid_width, self.grid_height):
            if min(size - 1 - self.home_margin, size - self.footprint) < self.home_margin:
                raise ValueError(
                    f"home_margin {self.home_margin} leaves no interior cell for the home station"
                )
        return self


def load_config(config_path: Optional[Union[str, Path]] = None) -> SimulationConfig:
    """
    Load a SimulationConfig from a JSON file, or return the defaults.

    Raises:
        FileNotFoundError: config file does not exist
        ValidationError: config contents are invalid
    """
    if config_path is None:
        return SimulationConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config = SimulationConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
    print(f"⚙️ Loaded config from {config_path}")
    return config
