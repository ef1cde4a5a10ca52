from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_reading, render_series


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the weather station service.",
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
        help="Weather API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the most recent reading."""
    state = _get_state(ctx)
    payload = state.client.get_latest()
    if payload is None:
        typer.echo("No data.")
        return
    render_reading(payload)


@app.command("query")
def query_command(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(None, "--start", help="First day, YYYY-MM-DD."),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (inclusive), YYYY-MM-DD."),
    every: Optional[int] = typer.Option(
        None, "--every", help="Bucket width in seconds (10-86400)."
    ),
    mode: Optional[str] = typer.Option(None, "--mode", help="Legacy window: hourly or daily."),
    day: Optional[str] = typer.Option(None, "--day", help="Day for --mode hourly."),
) -> None:
    """List readings for a date range or legacy window."""
    state = _get_state(ctx)
    rows = state.client.query(
        {"start": start, "end": end, "everySec": every, "mode": mode, "day": day}
    )
    render_series(rows)


@app.command("push")
def push_command(
    ctx: typer.Context,
    temperature: float = typer.Option(..., "--temperature", "-t", help="Temperature in °C."),
    humidity: float = typer.Option(..., "--humidity", help="Relative humidity in percent."),
    wind_speed: float = typer.Option(..., "--wind-speed", help="Wind speed."),
    wind_direction: float = typer.Option(..., "--wind-direction", help="Wind direction in degrees."),
    precipitation: float = typer.Option(..., "--precipitation", help="Precipitation amount."),
    timestamp: Optional[str] = typer.Option(
        None, "--timestamp", help="ISO 8601 instant; defaults to the server's current time."
    ),
) -> None:
    """Send one reading to the service."""
    state = _get_state(ctx)
    reading = {
        "temperature": temperature,
        "humidity": humidity,
        "wind_speed": wind_speed,
        "wind_direction": wind_direction,
        "precipitation": precipitation,
    }
    if timestamp is not None:
        reading["timestamp"] = timestamp
    state.client.push_reading(reading)
    typer.secho(f"Reading stored at {state.config.base_url}.", fg=typer.colors.GREEN)
