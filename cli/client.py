from __future__ import annotations

from typing import Any, Dict, List

import httpx
import typer

from cli.config import CLIConfig

_API_PREFIX = "/api/v0"


class ApiClient:
    """Minimal HTTP client for the environmental data server."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def register_location(self, name: str) -> Dict[str, Any]:
        return self._request("PUT", "/location", json={"name": name})

    def register_sensor(self, name: str) -> Dict[str, Any]:
        return self._request("PUT", "/sensor", json={"name": name})

    def list_locations(self) -> List[str]:
        return self._request("GET", "/location")

    def list_sensors(self) -> List[str]:
        return self._request("GET", "/sensor")

    def write_reading(self, location: str, sensor: str, timestamp: int, value: float) -> Dict[str, Any]:
        payload = {
            "timestamp": timestamp,
            "location": location,
            "sensor": sensor,
            "value": value,
        }
        return self._request("PUT", "/data", json=payload)

    def query(self, location: str, sensor: str, from_ts: int, to_ts: int) -> List[Dict[str, Any]]:
        payload = {
            "from": from_ts,
            "to": to_ts,
            "location": location,
            "sensor": sensor,
        }
        result = self._request("POST", "/query", json=payload)
        if not isinstance(result, list):
            raise typer.BadParameter("Unexpected response payload when querying readings.")
        return result

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, f"{_API_PREFIX}{path}", **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
