import json

import pytest
import requests

import client as robot_client
from client import RobotClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, response=None):
        self.calls = []
        self.response = response if response is not None else FakeResponse({"mode": "idle"})

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        return self.response


def test_commands_hit_expected_endpoints():
    session = FakeSession()
    api = RobotClient("http://robot:5000/", session=session)

    api.start()
    api.reset(1, 2, 0.5)
    api.set_forbidden_area(1, 2, 3, 4)
    api.clear_forbidden_area()
    api.rotate("left")
    api.advance(10)

    assert session.calls == [
        ("POST", "http://robot:5000/start", None),
        ("POST", "http://robot:5000/reset", {"x": 1, "y": 2, "angle": 0.5}),
        ("POST", "http://robot:5000/forbidden-area", {"x1": 1, "y1": 2, "x2": 3, "y2": 4}),
        ("DELETE", "http://robot:5000/forbidden-area", None),
        ("POST", "http://robot:5000/rotate/left", None),
        ("POST", "http://robot:5000/advance", {"ticks": 10}),
    ]


def test_main_prints_snapshot(monkeypatch, capsys):
    session = FakeSession(FakeResponse({"mode": "moving", "battery": 99.5}))
    monkeypatch.setattr(robot_client.requests, "Session", lambda: session)

    assert robot_client.main(["advance", "5"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == {"mode": "moving", "battery": 99.5}
    assert session.calls[0][2] == {"ticks": 5}


def test_main_reports_server_errors(monkeypatch, capsys):
    session = FakeSession(FakeResponse({"detail": "bad"}, status_code=400))
    monkeypatch.setattr(robot_client.requests, "Session", lambda: session)

    assert robot_client.main(["rotate", "left"]) == 1
    assert "Server Error" in capsys.readouterr().err


def test_rotate_choices_are_validated():
    with pytest.raises(SystemExit):
        robot_client.build_parser().parse_args(["rotate", "up"])
