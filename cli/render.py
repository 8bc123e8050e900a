from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_measurements(
    location: str, sensor: str, measurements: List[Dict[str, Any]]
) -> None:
    echo_heading(f"{sensor} at {location}")
    if not measurements:
        typer.echo("No readings in range.")
        return
    for row in measurements:
        typer.echo(f"  {row.get('bucket_timestamp')}  {row.get('average'):.2f}")
    typer.echo()
    echo_key_values([("buckets", len(measurements))])


def render_names(locations: List[str], sensors: List[str]) -> None:
    echo_heading("Locations")
    for name in locations:
        typer.echo(f"  - {name}")
    typer.echo()
    echo_heading("Sensors")
    for name in sensors:
        typer.echo(f"  - {name}")
