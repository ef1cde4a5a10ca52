from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer

COLUMNS = (
    ("timestamp", 19),
    ("id", 8),
    ("temperature", 11),
    ("humidity", 8),
    ("wind_speed", 10),
    ("wind_direction", 14),
    ("precipitation", 13),
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Latest Reading")
    echo_key_values((name, payload.get(name)) for name, _ in COLUMNS)


def render_series(rows: Sequence[Dict[str, Any]]) -> None:
    if not rows:
        typer.echo("No readings in range.")
        return

    typer.secho("  ".join(name.ljust(width) for name, width in COLUMNS), bold=True)
    for row in rows:
        typer.echo("  ".join(str(row.get(name, "")).ljust(width) for name, width in COLUMNS))
    typer.echo()
    typer.echo(f"{len(rows)} row(s)")
