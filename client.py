import argparse
import json
import sys
from typing import Optional

import requests

SERVER_URL = "http://localhost:5000"
TIMEOUT = 10  # HTTP request timeout in seconds


class RobotClient:
    """
    Thin wrapper over the coverage robot server. Every command returns the
    robot snapshot the server sends back.
    """

    def __init__(self, base_url: str = SERVER_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> dict:
        response = self.session.request(method, f"{self.base_url}{path}", json=payload, timeout=TIMEOUT)
        response.raise_for_status()
        return response.json()

    def state(self) -> dict:
        return self._request("GET", "/state")

    def path(self) -> dict:
        return self._request("GET", "/path")

    def start(self) -> dict:
        return self._request("POST", "/start")

    def stop(self) -> dict:
        return self._request("POST", "/stop")

    def reset(self, x: float, y: float, angle: float = 0.0) -> dict:
        return self._request("POST", "/reset", {"x": x, "y": y, "angle": angle})

    def set_forbidden_area(self, x1: int, y1: int, x2: int, y2: int) -> dict:
        return self._request("POST", "/forbidden-area", {"x1": x1, "y1": y1, "x2": x2, "y2": y2})

    def clear_forbidden_area(self) -> dict:
        return self._request("DELETE", "/forbidden-area")

    def rotate(self, direction: str) -> dict:
        return self._request("POST", f"/rotate/{direction}")

    def advance(self, ticks: int = 1) -> dict:
        return self._request("POST", "/advance", {"ticks": ticks})


def run_command(client: RobotClient, args: argparse.Namespace) -> dict:
    if args.command == "state":
        return client.state()
    if args.command == "path":
        return client.path()
    if args.command == "start":
        return client.start()
    if args.command == "stop":
        return client.stop()
    if args.command == "reset":
        return client.reset(args.x, args.y, args.angle)
    if args.command == "forbid":
        return client.set_forbidden_area(args.x1, args.y1, args.x2, args.y2)
    if args.command == "clear":
        return client.clear_forbidden_area()
    if args.command == "rotate":
        return client.rotate(args.direction)
    if args.command == "advance":
        return client.advance(args.ticks)
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drive the coverage robot server.")
    parser.add_argument("--url", default=SERVER_URL, help="Server base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("state", help="Print the robot snapshot")
    sub.add_parser("path", help="Print the coverage path")
    sub.add_parser("start", help="Go home and start covering")
    sub.add_parser("stop", help="Stop where it is")

    reset = sub.add_parser("reset", help="Hard reset to a position")
    reset.add_argument("x", type=float)
    reset.add_argument("y", type=float)
    reset.add_argument("angle", type=float, nargs="?", default=0.0)

    forbid = sub.add_parser("forbid", help="Set the forbidden area (cell coordinates)")
    for name in ("x1", "y1", "x2", "y2"):
        forbid.add_argument(name, type=int)

    sub.add_parser("clear", help="Clear the forbidden area")

    rotate = sub.add_parser("rotate", help="Nudge the heading")
    rotate.add_argument("direction", choices=["left", "right"])

    advance = sub.add_parser("advance", help="Run simulation ticks")
    advance.add_argument("ticks", type=int, nargs="?", default=1)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    client = RobotClient(args.url)

    try:
        result = run_command(client, args)
    except requests.HTTPError as e:
        print(f"❌ Server Error: {e.response.text}", file=sys.stderr)
        return 1
    except requests.ConnectionError as e:
        print(f"❌ Connection Failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
