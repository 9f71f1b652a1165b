"""Tests for the HTTP request executor."""

import json

import httpx
import pytest

from nodeflow.core.exceptions import ExternalCallError, NodeValidationError
from nodeflow.nodes.http_request import HttpRequestNode, is_valid_endpoint


class Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self._response = response or httpx.Response(200, json={"ok": True})
        self._error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response


def http_node(recorder: Recorder) -> HttpRequestNode:
    return HttpRequestNode(transport=httpx.MockTransport(recorder))


def config(**overrides):
    data = {"variables": "api", "method": "GET", "endpoint": "https://api.example.com/items"}
    data.update(overrides)
    return data


async def test_missing_endpoint_fails_before_any_request(make_request, sink):
    recorder = Recorder()
    node = http_node(recorder)

    with pytest.raises(NodeValidationError, match="HTTP Endpoint is not configured") as exc_info:
        await node.execute(make_request(node, data=config(endpoint="")))

    assert recorder.requests == []
    assert sink.statuses("node_1") == ["loading", "error"]
    assert sink.channels("node_1") == {"httpRequest"}
    assert exc_info.value.node_id == "node_1"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"variables": ""}, "Variable name is required"),
        ({"variables": "1bad"}, "Variable name must start with"),
        ({"method": ""}, "HTTP Method is not configured"),
        ({"method": "TRACE"}, "HTTP Method must be one of"),
        ({"endpoint": "not a url"}, "not a valid URL"),
    ],
)
async def test_invalid_config(make_request, sink, overrides, message):
    recorder = Recorder()
    node = http_node(recorder)

    with pytest.raises(NodeValidationError, match=message):
        await node.execute(make_request(node, data=config(**overrides)))

    assert recorder.requests == []
    assert sink.statuses("node_1") == ["loading", "error"]


async def test_get_stores_response(make_request, sink):
    recorder = Recorder(httpx.Response(200, json={"id": 1, "title": "todo"}))
    node = http_node(recorder)

    result = await node.execute(make_request(node, data=config(), context={"seed": True}))

    response = result["api"]["httpResponse"]
    assert response["status"] == 200
    assert response["statusText"] == "OK"
    assert response["data"] == {"id": 1, "title": "todo"}
    assert response["headers"]["content-type"] == "application/json"
    assert result["seed"] is True
    assert sink.statuses("node_1") == ["loading", "success"]
    assert recorder.requests[0].method == "GET"


async def test_endpoint_is_templated(make_request):
    recorder = Recorder()
    node = http_node(recorder)

    await node.execute(
        make_request(
            node,
            data=config(endpoint="https://api.example.com/users/{{user.id}}"),
            context={"user": {"id": 42}},
        )
    )

    assert str(recorder.requests[0].url) == "https://api.example.com/users/42"


async def test_text_response(make_request):
    recorder = Recorder(httpx.Response(200, text="plain body"))
    node = http_node(recorder)

    result = await node.execute(make_request(node, data=config()))

    assert result["api"]["httpResponse"]["data"] == "plain body"


async def test_post_renders_json_body(make_request):
    recorder = Recorder()
    node = http_node(recorder)

    await node.execute(
        make_request(
            node,
            data=config(method="POST", body='{"email": "{{webhook.payload.email}}"}'),
            context={"webhook": {"payload": {"email": "a@example.com"}}},
        )
    )

    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"email": "a@example.com"}


async def test_json_helper_body_sends_referenced_value(make_request):
    recorder = Recorder()
    node = http_node(recorder)
    payload = {"items": [1, 2], "nested": {"a": "b"}}

    await node.execute(
        make_request(
            node,
            data=config(method="PUT", body="{{json webhook.payload}}"),
            context={"webhook": {"payload": payload}},
        )
    )

    assert json.loads(recorder.requests[0].content) == payload


async def test_json_helper_embedded_in_body(make_request):
    recorder = Recorder()
    node = http_node(recorder)

    await node.execute(
        make_request(
            node,
            data=config(method="POST", body='{"user": {{json webhook.payload}}, "source": "form"}'),
            context={"webhook": {"payload": {"a": 1}}},
        )
    )

    assert json.loads(recorder.requests[0].content) == {"user": {"a": 1}, "source": "form"}


async def test_endpoint_must_render_to_url(make_request, sink):
    recorder = Recorder()
    node = http_node(recorder)

    with pytest.raises(NodeValidationError, match="did not render to a valid URL"):
        await node.execute(
            make_request(node, data=config(endpoint="{{next}}"), context={"next": "not a url"})
        )

    assert recorder.requests == []
    assert sink.statuses("node_1") == ["loading", "error"]


async def test_non_json_body_sent_as_text(make_request):
    recorder = Recorder()
    node = http_node(recorder)

    await node.execute(
        make_request(node, data=config(method="PATCH", body="hello {{name}}"), context={"name": "Ada"})
    )

    assert recorder.requests[0].content == b"hello Ada"


async def test_get_sends_no_body(make_request):
    recorder = Recorder()
    node = http_node(recorder)

    await node.execute(make_request(node, data=config(body='{"ignored": true}')))

    assert recorder.requests[0].content == b""


async def test_error_status_fails_node(make_request, sink):
    recorder = Recorder(httpx.Response(404, json={"error": "missing"}))
    node = http_node(recorder)

    with pytest.raises(ExternalCallError) as exc_info:
        await node.execute(make_request(node, data=config()))

    assert exc_info.value.message == 'HTTP Request failed: 404 Not Found. {"error": "missing"}'
    assert sink.statuses("node_1") == ["loading", "error"]


async def test_network_error_fails_node(make_request, sink):
    recorder = Recorder(error=httpx.ConnectError("connection refused"))
    node = http_node(recorder)

    with pytest.raises(ExternalCallError, match="HTTP Request failed: connection refused"):
        await node.execute(make_request(node, data=config()))

    assert sink.statuses("node_1") == ["loading", "error"]


@pytest.mark.parametrize(
    "endpoint, valid",
    [
        ("https://api.example.com", True),
        ("http://localhost:8000/path", True),
        ("{{api.httpResponse.data.next}}", True),
        ("https://api.example.com/{{user.id}}", True),
        ("api.example.com/{{user.id}}", False),
        ("not a url", False),
        ("", False),
    ],
)
def test_is_valid_endpoint(endpoint, valid):
    assert is_valid_endpoint(endpoint) is valid
