# src/nelproxy/worker/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..errors import TransportError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _make_timeout_obj(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=min(5.0, seconds))


def build_http_client(settings: Settings) -> httpx.Client:
    """
    Create the httpx client for the configured endpoint.

    - https when SSL is enabled, verified against ca_bundle if given
    - no automatic retries; a failed call is reported to the caller
    """
    verify: Any = True
    if settings.ssl_enabled and settings.ca_bundle is not None:
        verify = str(settings.ca_bundle)
    return httpx.Client(
        base_url=settings.base_url,
        timeout=_make_timeout_obj(settings.request_timeout),
        verify=verify,
    )


class DispatchClient:
    """
    Talks to the dispatch API over HTTP.

    Any httpx.Client works, including FastAPI's TestClient. The caller owns the
    client's lifetime.
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("HTTP %s %s failed: %s", method, path, exc)
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _fail(method: str, path: str, resp: httpx.Response) -> TransportError:
        logger.error("HTTP %s %s -> %s", method, path, resp.status_code)
        return TransportError(
            f"{method} {path} returned HTTP {resp.status_code}: {resp.text.strip()[:200]}",
            status_code=resp.status_code,
        )

    def fetch_tasks(self) -> list[Task]:
        """All pending tasks; an empty list when the server reports an empty queue."""
        resp = self._request("GET", "/task")
        if resp.status_code == httpx.codes.NOT_FOUND:
            logger.info("Server reports an empty task queue")
            return []
        if not resp.is_success:
            raise self._fail("GET", "/task", resp)

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(f"GET /task returned invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise TransportError("GET /task did not return a JSON array")

        try:
            tasks = [Task.from_dict(item) for item in data]
        except (AttributeError, TypeError, ValueError) as exc:
            raise TransportError(f"GET /task returned malformed tasks: {exc}") from exc
        logger.debug("Fetched %d tasks", len(tasks))
        return tasks

    def acknowledge(self, task_id: int) -> None:
        path = f"/task/{int(task_id)}"
        resp = self._request("DELETE", path)
        logger.info("DELETE %s -> %s", path, resp.status_code)
        if resp.status_code != httpx.codes.OK:
            raise self._fail("DELETE", path, resp)

    def submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Producer side: POST a task payload and return the server's confirmation."""
        resp = self._request("POST", "/task", json=payload)
        if resp.status_code != httpx.codes.OK:
            raise self._fail("POST", "/task", resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"POST /task returned invalid JSON: {exc}") from exc
