import json
import logging

import httpx
import pytest
import respx
from httpx import Response
from hal_client import (
    HalClient,
    HalHTTPError,
    HalParseError,
    HalTransportError,
    Representation,
    RetryConfig,
)

NO_WAIT = RetryConfig(backoff_base_seconds=0)


@respx.mock
def test_get_wraps_representation_bound_to_client():
    route = respx.get("https://mock-hal.test/api/orders/1").mock(
        return_value=Response(
            200,
            json={"total": 30, "_links": {"self": {"href": "https://mock-hal.test/api/orders/1"}}},
        )
    )

    with HalClient(base_url="https://mock-hal.test") as client:
        order = client.get("/api/orders/1")

    assert route.called
    assert isinstance(order, Representation)
    assert order.hal_client is client
    assert order.property("total") == 30
    assert order.href == "https://mock-hal.test/api/orders/1"
    assert "application/hal+json" in route.calls.last.request.headers["Accept"]


@respx.mock
def test_get_empty_body_is_anonymous_representation():
    respx.get("https://mock-hal.test/empty").mock(return_value=Response(204))

    with HalClient() as client:
        result = client.get("https://mock-hal.test/empty")

    assert result.href == "https://mock-hal.test/empty"
    assert result.properties == {}


@respx.mock
def test_404_raises_typed_error():
    respx.get("https://mock-hal.test/missing").mock(
        return_value=Response(404, json={"message": "Not found"})
    )

    with HalClient() as client:
        with pytest.raises(HalHTTPError) as exc:
            client.get("https://mock-hal.test/missing")

    assert exc.value.status_code == 404
    assert "Not found" in str(exc.value)


@respx.mock
def test_error_with_text_body_keeps_snippet():
    respx.get("https://mock-hal.test/boom").mock(
        return_value=Response(500, text="<html>oops</html>")
    )

    with HalClient(retry=NO_WAIT) as client:
        with pytest.raises(HalHTTPError) as exc:
            client.get("https://mock-hal.test/boom")

    assert exc.value.response_text == "<html>oops</html>"
    assert exc.value.response_json is None


@respx.mock
def test_non_json_response_raises_parse_error():
    respx.get("https://mock-hal.test/html").mock(
        return_value=Response(200, text="<html>Not JSON</html>")
    )

    with HalClient() as client:
        with pytest.raises(HalParseError) as exc:
            client.get("https://mock-hal.test/html")

    assert "Expected JSON" in str(exc.value)


@respx.mock
def test_top_level_array_raises_parse_error():
    respx.get("https://mock-hal.test/list").mock(return_value=Response(200, json=[1, 2]))

    with HalClient() as client:
        with pytest.raises(HalParseError):
            client.get("https://mock-hal.test/list")


@respx.mock
def test_retries_get_on_503():
    route = respx.get("https://mock-hal.test/flaky").mock(
        side_effect=[
            Response(503, json={"message": "Service Unavailable"}),
            Response(503, json={"message": "Service Unavailable"}),
            Response(200, json={"ok": True}),
        ]
    )

    with HalClient(retry=NO_WAIT) as client:
        result = client.get("https://mock-hal.test/flaky")

    assert result.property("ok") is True
    assert route.call_count == 3


@respx.mock
def test_post_is_not_retried():
    route = respx.post("https://mock-hal.test/orders").mock(
        return_value=Response(503, json={"message": "Service Unavailable"})
    )

    with HalClient(retry=NO_WAIT) as client:
        with pytest.raises(HalHTTPError) as exc:
            client.post("https://mock-hal.test/orders", "abc")

    assert exc.value.status_code == 503
    assert route.call_count == 1


@respx.mock
def test_connect_timeout_after_retries():
    route = respx.get("https://mock-hal.test/slow").mock(
        side_effect=httpx.ConnectTimeout("boom")
    )

    with HalClient(retry=NO_WAIT) as client:
        with pytest.raises(HalTransportError):
            client.get("https://mock-hal.test/slow")

    assert route.call_count == 3


@respx.mock
def test_post_encodes_body_and_sets_content_type():
    route = respx.post("https://mock-hal.test/orders").mock(
        return_value=Response(201, json={"_links": {"self": {"href": "https://mock-hal.test/orders/9"}}})
    )

    with HalClient() as client:
        created = client.post("https://mock-hal.test/orders", {"total": 30})
        client.post("https://mock-hal.test/orders", b"raw-bytes", headers={"X-Trace": "1"})

    assert created.href == "https://mock-hal.test/orders/9"
    first, second = route.calls
    assert json.loads(first.request.content) == {"total": 30}
    assert first.request.headers["Content-Type"] == "application/hal+json"
    assert second.request.content == b"raw-bytes"
    assert second.request.headers["X-Trace"] == "1"


@respx.mock
def test_related_links_resolve_relative_to_base_url():
    respx.get("https://mock-hal.test/").mock(
        return_value=Response(200, json={"_links": {"orders": {"href": "/orders"}}})
    )
    respx.get("https://mock-hal.test/orders").mock(
        return_value=Response(200, json={"_links": {"self": {"href": "/orders"}}, "count": 2})
    )

    with HalClient(base_url="https://mock-hal.test") as client:
        orders = client.get("/").related("orders").first

    assert orders.property("count") == 2


def test_injected_http_client_is_not_closed():
    http = httpx.Client()
    with HalClient(http=http):
        pass
    assert not http.is_closed
    http.close()


@respx.mock
def test_calls_are_logged(caplog):
    caplog.set_level(logging.INFO, logger="hal_client.observability")
    respx.get("https://mock-hal.test/ok").mock(return_value=Response(200, json={}))
    respx.get("https://mock-hal.test/down").mock(side_effect=httpx.ConnectError("nope"))

    with HalClient(retry=RetryConfig(max_retries=0)) as client:
        client.get("https://mock-hal.test/ok")
        with pytest.raises(HalTransportError):
            client.get("https://mock-hal.test/down")

    ok, failed = [r for r in caplog.records if r.getMessage() == "hal_call"]
    assert ok.method == "GET"
    assert ok.status == 200
    assert ok.url == "https://mock-hal.test/ok"
    assert ok.duration_ms >= 0
    assert failed.status == "exception"
    assert failed.error_type == "ConnectError"
