from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

API_ROOT = "http://api.example.com"


class FakeApi:
    """In-memory API served through `httpx.MockTransport`.

    Routes are keyed by path (with query) and optionally prefixed by a method,
    e.g. ``"/orders"`` or ``"POST /orders"``. Unknown routes answer 404 with a
    JSON error payload.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def add(self, route: str, body: Any, status: int = 200) -> None:
        self.routes[route] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode()
        route = self.routes.get(f"{request.method} {path}")
        if route is None and request.method == "GET":
            route = self.routes.get(path)
        if route is None:
            if request.method == "GET":
                route = (404, {"message": f"{path} not found"})
            else:
                route = (201, {"received": request.content.decode() or None})
        if not isinstance(route, tuple):
            route = (200, route)
        status, body = route
        if isinstance(body, str):
            response = httpx.Response(status, text=body)
        else:
            response = httpx.Response(status, content=json.dumps(body).encode())
        self.responses.append(response)
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.raw_path.decode()) for r in self.requests]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def orders_api() -> FakeApi:
    """HAL API: root -> orders -> next page, plus embedded orders."""

    return FakeApi(
        {
            "/": {
                "_links": {
                    "self": {"href": "/"},
                    "orders": {"href": "/orders"},
                    "order": {"href": "/orders/{id}", "templated": True},
                }
            },
            "/orders": {
                "_links": {
                    "self": {"href": "/orders"},
                    "next": {"href": "/orders?page=2"},
                },
                "_embedded": {
                    "ea:order": [
                        {"_links": {"self": {"href": "/orders/5"}}, "total": 30.0, "status": "shipped"},
                        {"_links": {"self": {"href": "/orders/6"}}, "total": 20.0, "status": "processing"},
                    ],
                    "summary": {"count": 2},
                },
            },
            "/orders?page=2": {
                "_links": {"self": {"href": "/orders?page=2"}},
                "page": 2,
            },
            "/orders/7": {"_links": {"self": {"href": "/orders/7"}}, "total": 99.0},
        }
    )
