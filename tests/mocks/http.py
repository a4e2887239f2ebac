"""Queue-driven stand-ins for ``httpx.AsyncClient``."""

from __future__ import annotations

from typing import Any

import httpx


class DummyResponse:
    def __init__(
        self,
        status_code: int,
        json_data: Any = None,
        text: str = "",
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON data")
        return self._json_data


class DummyAsyncClient:
    """Pops queued responses per HTTP method; exceptions in a queue are raised."""

    def __init__(self, queues: dict[str, list[Any]], requests: list[dict[str, Any]]) -> None:
        self._queues = queues
        self.requests = requests

    async def __aenter__(self) -> "DummyAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        return None

    async def _dispatch(self, method: str, url: str, **kwargs: Any) -> DummyResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        queue = self._queues.get(method) or []
        if not queue:
            raise RuntimeError(f"No {method} responses queued")
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def get(self, url: str, **kwargs: Any) -> DummyResponse:
        return await self._dispatch("GET", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> DummyResponse:
        return await self._dispatch("PUT", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> DummyResponse:
        return await self._dispatch("POST", url, **kwargs)


def configure_httpx(
    monkeypatch,
    *,
    get: list[Any] | None = None,
    put: list[Any] | None = None,
    post: list[Any] | None = None,
    clients: list[dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """Route ``httpx.AsyncClient`` to queued responses and return the request log.

    When ``clients`` is given, the keyword arguments of every client
    construction are appended to it.
    """

    queues = {"GET": list(get or []), "PUT": list(put or []), "POST": list(post or [])}
    requests: list[dict[str, Any]] = []

    def factory(*args, **kwargs):
        if clients is not None:
            clients.append(kwargs)
        return DummyAsyncClient(queues, requests)

    monkeypatch.setattr("httpx.AsyncClient", factory)
    return requests


def connect_error(message: str = "connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(message, request=httpx.Request("GET", "https://backend.test"))


def methods(requests: list[dict[str, Any]]) -> list[str]:
    return [request["method"] for request in requests]
