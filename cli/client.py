from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the weather service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_latest(self) -> Optional[Dict[str, Any]]:
        """Return the latest reading, or ``None`` when the service has no data."""
        try:
            response = self._client.get("/api/weather/latest")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if "id" not in payload:
            return None
        return payload

    def query(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        cleaned = {key: value for key, value in params.items() if value is not None}
        try:
            response = self._client.get("/api/weather", params=cleaned)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when querying readings.")
        return payload

    def push_reading(self, reading: Dict[str, Any]) -> None:
        try:
            response = self._client.post("/api/pushData", json=reading)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        if response.json().get("ok") is not True:
            raise typer.BadParameter("Unexpected response payload when pushing a reading.")

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        if isinstance(detail, dict):
            fields = detail.get("fields") or []
            detail = detail.get("message", "")
            if fields:
                detail = f"{detail} ({', '.join(fields)})"
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
