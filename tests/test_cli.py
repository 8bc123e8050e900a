from __future__ import annotations

from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.generator import GeneratorState, generate, next_sample


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.registered: List[tuple[str, str]] = []
        self.writes: List[tuple[str, str, int, float]] = []
        self.queries: List[tuple[str, str, int, int]] = []
        self.measurements: List[Dict[str, Any]] = [
            {"bucket_timestamp": "2023-11-14T22:00:00Z", "average": 20.0},
            {"bucket_timestamp": "2023-11-14T23:00:00Z", "average": 21.5},
        ]
        self.closed = False

    def register_location(self, name: str) -> Dict[str, Any]:
        self.registered.append(("location", name))
        return {"status": "ok", "id": 7}

    def register_sensor(self, name: str) -> Dict[str, Any]:
        self.registered.append(("sensor", name))
        return {"status": "ok", "id": 3}

    def list_locations(self) -> List[str]:
        return ["kitchen", "outside"]

    def list_sensors(self) -> List[str]:
        return ["temperature"]

    def write_reading(self, location: str, sensor: str, timestamp: int, value: float) -> Dict[str, Any]:
        self.writes.append((location, sensor, timestamp, value))
        return {"status": "ok"}

    def query(self, location: str, sensor: str, from_ts: int, to_ts: int) -> List[Dict[str, Any]]:
        self.queries.append((location, sensor, from_ts, to_ts))
        return self.measurements

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_register_location(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["register-location", "attic"])

    assert result.exit_code == 0
    assert "id=7" in result.stdout
    assert stub.registered == [("location", "attic")]
    assert stub.closed is True


def test_write_with_explicit_timestamp(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app, ["--base-url", "http://env:9000/", "write", "kitchen", "temperature", "21.5", "-t", "1700000000"]
    )

    assert result.exit_code == 0
    assert stub.writes == [("kitchen", "temperature", 1_700_000_000, 21.5)]
    assert stub.config.base_url == "http://env:9000"


def test_query_renders_buckets(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app, ["query", "kitchen", "temperature", "--from", "100", "--to", "400000"]
    )

    assert result.exit_code == 0
    assert "2023-11-14T23:00:00Z  21.50" in result.stdout
    assert "buckets: 2" in result.stdout
    assert stub.queries == [("kitchen", "temperature", 100, 400000)]


def test_names_lists_vocabulary(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["names"])

    assert result.exit_code == 0
    assert "  - outside" in result.stdout
    assert "  - temperature" in result.stdout


def test_generate_sends_series(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app, ["generate", "kitchen", "humidity", "--start", "0", "--count", "3", "--step", "60"]
    )

    assert result.exit_code == 0
    assert "Sent 3 readings" in result.stdout
    assert [write[2] for write in stub.writes] == [0, 60, 120]
    assert stub.writes[0][3] == 20.0


def test_generator_state_advances_explicitly() -> None:
    state = GeneratorState(timestamp=0, step=6 * 3600, baseline=10.0, amplitude=2.0)

    first = next_sample(state)
    second = next_sample(state)
    rest = list(generate(state, 2))

    assert first == (0, 10.0)
    assert second == (6 * 3600, 12.0)
    assert rest == [(12 * 3600, 10.0), (18 * 3600, 8.0)]
    assert state.timestamp == 24 * 3600
    assert state.emitted == 4
