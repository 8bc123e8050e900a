from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.generator import DEFAULT_STEP, GeneratorState, generate
from cli.render import render_measurements, render_names


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the environmental data server.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Server base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("register-location")
def register_location_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Location name, matched exactly."),
) -> None:
    """Register a location name."""
    state = _get_state(ctx)
    payload = state.client.register_location(name)
    typer.secho(f"Location {name!r} registered. id={payload.get('id')}", fg=typer.colors.GREEN)


@app.command("register-sensor")
def register_sensor_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Sensor name, matched exactly."),
) -> None:
    """Register a sensor name."""
    state = _get_state(ctx)
    payload = state.client.register_sensor(name)
    typer.secho(f"Sensor {name!r} registered. id={payload.get('id')}", fg=typer.colors.GREEN)


@app.command("names")
def names_command(ctx: typer.Context) -> None:
    """List registered locations and sensors."""
    state = _get_state(ctx)
    render_names(state.client.list_locations(), state.client.list_sensors())


@app.command("write")
def write_command(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Registered location name."),
    sensor: str = typer.Argument(..., help="Registered sensor name."),
    value: float = typer.Argument(..., help="Measured value."),
    timestamp: Optional[int] = typer.Option(
        None,
        "--timestamp",
        "-t",
        help="Unix timestamp of the reading (defaults to now).",
    ),
) -> None:
    """Store one reading."""
    state = _get_state(ctx)
    ts = timestamp if timestamp is not None else int(time.time())
    state.client.write_reading(location, sensor, ts, value)
    typer.secho(f"Stored {sensor}={value} for {location} at {ts}.", fg=typer.colors.GREEN)


@app.command("query")
def query_command(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Registered location name."),
    sensor: str = typer.Argument(..., help="Registered sensor name."),
    from_ts: int = typer.Option(..., "--from", help="Interval start, unix seconds."),
    to_ts: int = typer.Option(..., "--to", help="Interval end, unix seconds."),
) -> None:
    """Show averaged readings for an interval."""
    state = _get_state(ctx)
    measurements = state.client.query(location, sensor, from_ts, to_ts)
    render_measurements(location, sensor, measurements)


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Registered location name."),
    sensor: str = typer.Argument(..., help="Registered sensor name."),
    start: int = typer.Option(..., "--start", help="Timestamp of the first sample."),
    count: int = typer.Option(288, "--count", min=1, help="Number of samples to send."),
    step: int = typer.Option(DEFAULT_STEP, "--step", min=1, help="Seconds between samples."),
    baseline: float = typer.Option(20.0, "--baseline", help="Mean of the generated series."),
    amplitude: float = typer.Option(5.0, "--amplitude", help="Daily swing around the mean."),
) -> None:
    """Send a synthetic daily-cycle series to the server."""
    state = _get_state(ctx)
    series = GeneratorState(timestamp=start, step=step, baseline=baseline, amplitude=amplitude)
    for timestamp, value in generate(series, count):
        state.client.write_reading(location, sensor, timestamp, value)
    typer.secho(
        f"Sent {series.emitted} readings for {sensor} at {location}.",
        fg=typer.colors.GREEN,
    )
