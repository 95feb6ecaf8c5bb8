# main.py
import argparse
import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from algorithms.entities.robot import Robot
from algorithms.utils.config import SimulationConfig, load_config
from algorithms.utils.consts import RESET_ANGLE, RESET_X, RESET_Y
from algorithms.utils.enums import Rotation
from algorithms.utils.types import ForbiddenRegion

# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class ResetInput(BaseModel):
    x: float = RESET_X
    y: float = RESET_Y
    angle: float = RESET_ANGLE

class ForbiddenAreaInput(BaseModel):
    # Cell coordinates, corners in any order
    x1: int = Field(..., ge=0)
    y1: int = Field(..., ge=0)
    x2: int = Field(..., ge=0)
    y2: int = Field(..., ge=0)

class AdvanceInput(BaseModel):
    ticks: int = Field(1, ge=1, le=100000)

class PathPoint(BaseModel):
    x: float
    y: float

class HomePoint(BaseModel):
    x: float
    y: float

class ForbiddenAreaOutput(BaseModel):
    x1: int
    y1: int
    x2: int
    y2: int

class RobotOutput(BaseModel):
    x: float
    y: float
    angle: float
    battery: float
    mode: str
    home: HomePoint
    forbidden_area: Optional[ForbiddenAreaOutput]
    path_index: int
    path_length: int
    resume_index: int
    progress: float
    skipped_targets: int
    tick: int
    active_path: List[PathPoint]

class PathOutput(BaseModel):
    path: List[PathPoint]
    index: int


# =============================================================================
# BACKGROUND TICKER
# =============================================================================

async def run_ticker(robot: Robot, tick_rate: float) -> None:
    """Advance the robot at tick_rate Hz on the event loop thread."""
    interval = 1.0 / tick_rate
    while True:
        robot.advance()
        await asyncio.sleep(interval)


# =============================================================================
# APP FACTORY
# =============================================================================

def create_app(config: Optional[SimulationConfig] = None) -> FastAPI:
    config = config if config is not None else SimulationConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if config.auto_tick:
            task = asyncio.create_task(run_ticker(app.state.robot, config.tick_rate))
        yield
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    app = FastAPI(title="Coverage Robot Server", lifespan=lifespan)
    app.state.config = config
    app.state.robot = Robot(RESET_X, RESET_Y, RESET_ANGLE, config=config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def command(fn, *args) -> dict:
        try:
            fn(*args)
            return app.state.robot.snapshot()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            import traceback; traceback.print_exc()
            raise HTTPException(status_code=500, detail=str(e))

    # Every endpoint is async so commands and ticks share the loop thread

    @app.get("/status")
    async def health_check():
        return {"status": "ok", "message": "Coverage robot server is running"}

    @app.get("/state", response_model=RobotOutput)
    async def get_state():
        return app.state.robot.snapshot()

    @app.get("/path", response_model=PathOutput)
    async def get_path():
        robot = app.state.robot
        return {"path": [w.get_dict() for w in robot.path], "index": robot.plan.index}

    @app.post("/start", response_model=RobotOutput)
    async def start():
        return command(app.state.robot.start)

    @app.post("/stop", response_model=RobotOutput)
    async def stop():
        return command(app.state.robot.stop)

    @app.post("/reset", response_model=RobotOutput)
    async def reset(input_data: Optional[ResetInput] = None):
        input_data = input_data if input_data is not None else ResetInput()
        return command(app.state.robot.reset, input_data.x, input_data.y, input_data.angle)

    @app.post("/forbidden-area", response_model=RobotOutput)
    async def set_forbidden_area(input_data: ForbiddenAreaInput):
        region = ForbiddenRegion(input_data.x1, input_data.y1, input_data.x2, input_data.y2)
        return command(app.state.robot.set_forbidden_area, region)

    @app.delete("/forbidden-area", response_model=RobotOutput)
    async def clear_forbidden_area():
        return command(app.state.robot.set_forbidden_area, None)

    @app.post("/rotate/{direction}", response_model=RobotOutput)
    async def rotate(direction: str):
        try:
            rotation = Rotation(direction)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return command(app.state.robot.rotate, rotation)

    @app.post("/advance", response_model=RobotOutput)
    async def advance(input_data: Optional[AdvanceInput] = None):
        input_data = input_data if input_data is not None else AdvanceInput()
        return command(app.state.robot.run, input_data.ticks)

    return app


app = create_app()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Coverage robot simulation server")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    args = parser.parse_args()

    config = load_config(args.config)
    host = args.host or config.host
    port = args.port or config.port
    uvicorn.run(create_app(config), host=host, port=port)
