import httpx
import pytest

from core.errors import HttpStatusError, LinkNotFoundError, MaterializationError, TraversalError
from core.services.traversal import Traversal, from_json, from_json_hal

from tests.conftest import API_ROOT, FakeApi

ACTIONS = {
    "get": lambda t: t.get(),
    "get_resource": lambda t: t.get_resource(),
    "get_uri": lambda t: t.get_uri(),
    "post": lambda t: t.post({"a": 1}),
    "put": lambda t: t.put({"a": 1}),
    "patch": lambda t: t.patch({"a": 1}),
    "delete": lambda t: t.delete(),
}


def _broken_chain(api: FakeApi) -> Traversal:
    return from_json_hal(API_ROOT).follow("orders", "nope", "next").with_request_options(transport=api.transport)


@pytest.mark.asyncio
@pytest.mark.parametrize("action", sorted(ACTIONS))
async def test_missing_link_reports_the_last_reached_node(orders_api: FakeApi, action: str) -> None:
    with pytest.raises(TraversalError) as excinfo:
        await ACTIONS[action](_broken_chain(orders_api))

    error = excinfo.value
    assert error.uri == f"{API_ROOT}/orders"
    assert error.response is orders_api.responses[-1]
    assert error.response.status_code == 200
    assert isinstance(error.__cause__, LinkNotFoundError)
    assert "nope" in str(error)
    # walking stopped at the failing hop
    assert orders_api.calls == [("GET", "/"), ("GET", "/orders")]


@pytest.mark.asyncio
async def test_intermediate_http_error_reports_the_previous_node(orders_api: FakeApi) -> None:
    orders_api.add("/orders", {"message": "maintenance"}, status=503)

    with pytest.raises(TraversalError) as excinfo:
        await from_json_hal(API_ROOT).follow("orders", "next").with_request_options(
            transport=orders_api.transport
        ).get()

    error = excinfo.value
    assert error.uri == API_ROOT
    assert error.response.status_code == 200
    cause = error.__cause__
    assert isinstance(cause, HttpStatusError)
    assert cause.status_code == 503
    assert cause.doc == {"message": "maintenance"}


@pytest.mark.asyncio
async def test_failure_on_the_start_uri_reports_the_start_address() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    traversal = from_json(API_ROOT).follow("anything").with_request_options(transport=httpx.MockTransport(refuse))

    with pytest.raises(TraversalError) as excinfo:
        await traversal.get()

    assert excinfo.value.uri == API_ROOT
    assert excinfo.value.response is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_terminal_fetch_failure_raises_materialization_error() -> None:
    api = FakeApi({"/": {"slow": "/slow"}})

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/slow":
            raise httpx.ReadTimeout("timed out", request=request)
        return api.handler(request)

    traversal = from_json(API_ROOT).follow("slow").with_request_options(transport=httpx.MockTransport(handler))

    with pytest.raises(MaterializationError) as excinfo:
        await traversal.get()

    assert excinfo.value.uri == f"{API_ROOT}/slow"
    assert excinfo.value.response is None
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "root",
    [
        {"_links": [{"href": "/orders"}]},
        {"_links": {"self": {"href": "/"}}, "_embedded": ["orders"]},
        {"_links": "orders"},
    ],
)
async def test_hal_sections_that_are_not_objects_fail_as_traversal_errors(root: dict) -> None:
    api = FakeApi({"/": root})

    with pytest.raises(TraversalError) as excinfo:
        await from_json_hal(API_ROOT).follow("orders").with_request_options(transport=api.transport).get()

    assert excinfo.value.uri == API_ROOT
    assert isinstance(excinfo.value.__cause__, LinkNotFoundError)


@pytest.mark.asyncio
async def test_unrequestable_href_on_intermediate_hop_is_a_traversal_error() -> None:
    api = FakeApi({"/": {"broken": "/bad\x01path"}})

    with pytest.raises(TraversalError) as excinfo:
        await from_json(API_ROOT).follow("broken", "next").with_request_options(transport=api.transport).get()

    assert excinfo.value.uri == API_ROOT
    assert isinstance(excinfo.value.__cause__, httpx.InvalidURL)
    assert api.calls == [("GET", "/")]


@pytest.mark.asyncio
async def test_unparseable_href_is_a_traversal_error() -> None:
    api = FakeApi({"/": {"broken": "http://[not-an-ip/x"}})

    with pytest.raises(TraversalError) as excinfo:
        await from_json(API_ROOT).follow("broken").with_request_options(transport=api.transport).get_uri()

    assert excinfo.value.uri == API_ROOT
    assert isinstance(excinfo.value.__cause__, ValueError)
