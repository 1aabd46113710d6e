# tests/test_dispatch_client.py

from __future__ import annotations

import httpx
import pytest

from nelproxy.errors import TransportError
from nelproxy.worker.client import DispatchClient


def _client(handler) -> DispatchClient:
    return DispatchClient(httpx.Client(transport=httpx.MockTransport(handler), base_url="http://queue.test"))


def test_fetch_404_means_empty_queue() -> None:
    client = _client(lambda request: httpx.Response(404, text="Not Found"))
    assert client.fetch_tasks() == []


def test_fetch_decodes_tasks() -> None:
    payload = [
        {
            "id": 3,
            "inventory": "EH2",
            "command": {"playbook": "deploy.yml", "user": "ops", "su": True, "tags": {"name": ["a", "b"]}},
        }
    ]
    client = _client(lambda request: httpx.Response(200, json=payload))

    (task,) = client.fetch_tasks()
    assert task.id == 3
    assert task.command.elevate is True
    assert task.command.tags == ("a", "b")


def test_fetch_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        _client(handler).fetch_tasks()


def test_fetch_server_error_raises_transport_error() -> None:
    client = _client(lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(TransportError) as exc_info:
        client.fetch_tasks()
    assert exc_info.value.status_code == 503


def test_fetch_invalid_json_raises_transport_error() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(TransportError):
        client.fetch_tasks()


def test_fetch_non_array_raises_transport_error() -> None:
    client = _client(lambda request: httpx.Response(200, json={"id": 1}))
    with pytest.raises(TransportError):
        client.fetch_tasks()


def test_acknowledge_issues_delete() -> None:
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={"detail": "Task has been deleted", "id": 1})

    _client(handler).acknowledge(1)
    assert seen == [("DELETE", "/task/1")]


def test_acknowledge_non_200_raises() -> None:
    client = _client(lambda request: httpx.Response(404, json={"detail": "No such task ID"}))
    with pytest.raises(TransportError) as exc_info:
        client.acknowledge(9)
    assert exc_info.value.status_code == 404


def test_submit_posts_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/task"
        return httpx.Response(200, json={"detail": "Task has been created", "task": {"id": 1}})

    reply = _client(handler).submit({"inventory": "EH2"})
    assert reply["task"]["id"] == 1


def test_submit_duplicate_raises() -> None:
    client = _client(lambda request: httpx.Response(500, json={"detail": "Duplicated task"}))
    with pytest.raises(TransportError) as exc_info:
        client.submit({"inventory": "EH2"})
    assert exc_info.value.status_code == 500


def test_fetch_rejects_wrongly_typed_fields() -> None:
    base = {"id": 1, "inventory": "EH2", "command": {"playbook": "deploy.yml", "user": "ops"}}
    bad_commands = (
        {"su": "false"},
        {"su": 0},
        {"tags": {"name": "web"}},
        {"tags": ["web"]},
        {"playbook": 7},
    )
    for extra in bad_commands:
        item = {**base, "command": {**base["command"], **extra}}
        client = _client(lambda request, item=item: httpx.Response(200, json=[item]))
        with pytest.raises(TransportError):
            client.fetch_tasks()

    for item in ({**base, "id": "1"}, {**base, "id": True}, "task"):
        client = _client(lambda request, item=item: httpx.Response(200, json=[item]))
        with pytest.raises(TransportError):
            client.fetch_tasks()
