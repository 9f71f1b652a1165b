"""HTTP Request node - makes HTTP requests to external APIs."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import httpx

from ..core.config import settings
from ..core.exceptions import ExternalCallError, NodeValidationError
from ..engine.expression_engine import expression_engine
from ..engine.status import HTTP_REQUEST_CHANNEL
from ..engine.types import NodeType
from .base import BaseNode, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.context import ExecutionContext
    from ..engine.types import NodeExecutionRequest

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
BODY_METHODS = ("POST", "PUT", "PATCH")

_VARIABLE_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_]*$")
_JSON_BODY = re.compile(r"\{\{\s*json\s+([^}]+?)\s*\}\}")


def is_valid_endpoint(endpoint: str) -> bool:
    """
    Check an endpoint before templating.

    A value starting with a placeholder is accepted here and checked again
    once rendered; otherwise the literal part before the first placeholder
    must look like an http(s) URL.
    """
    if "{{" in endpoint:
        if endpoint.startswith("{{"):
            return True
        base = endpoint.split("{{", 1)[0]
        return base.startswith(("http://", "https://")) or _is_absolute_url(base)
    return _is_absolute_url(endpoint)


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


class HttpRequestNode(BaseNode):
    """HTTP Request node - stores the response under the configured variable."""

    node_type = NodeType.HTTP_REQUEST
    channel = HTTP_REQUEST_CHANNEL
    label = "HTTP Request node"
    error_prefix = "HTTP Request"

    node_description = NodeTypeDescription(
        display_name="HTTP Request",
        description="Makes HTTP requests to external APIs",
        icon="fa:globe",
        group=["transform"],
        properties=[
            NodeProperty(
                display_name="Variable name",
                name="variables",
                type="string",
                default="",
                required=True,
                placeholder="myApiCall",
                description="Reference the response as {{myApiCall.httpResponse.data}}",
            ),
            NodeProperty(
                display_name="Method",
                name="method",
                type="options",
                default="GET",
                required=True,
                options=[NodePropertyOption(name=m, value=m) for m in HTTP_METHODS],
            ),
            NodeProperty(
                display_name="Endpoint URL",
                name="endpoint",
                type="string",
                default="",
                required=True,
                placeholder="https://api.example.com/users/{{httpResponse.data.id}}",
                description="The URL to make the request to. Supports expressions.",
            ),
            NodeProperty(
                display_name="Body",
                name="body",
                type="json",
                default="",
                description="Request body (for POST, PUT, PATCH)",
            ),
        ],
    )

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    def validate(self, data: dict[str, Any]) -> None:
        endpoint = data.get("endpoint")
        if not endpoint:
            raise NodeValidationError("HTTP Endpoint is not configured")
        if not isinstance(endpoint, str) or not is_valid_endpoint(endpoint.strip()):
            raise NodeValidationError(f"HTTP Endpoint is not a valid URL: {endpoint}")

        variables = data.get("variables")
        if not variables:
            raise NodeValidationError("Variable name is required")
        if not isinstance(variables, str) or not _VARIABLE_NAME.match(variables):
            raise NodeValidationError(
                "Variable name must start with a letter or underscore "
                "and contain only letters, numbers and underscores"
            )

        method = data.get("method")
        if not method:
            raise NodeValidationError("HTTP Method is not configured")
        if method not in HTTP_METHODS:
            raise NodeValidationError(f"HTTP Method must be one of {', '.join(HTTP_METHODS)}")

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        data = request.data
        context = request.context

        endpoint = expression_engine.render(data["endpoint"], context).strip()
        if not _is_absolute_url(endpoint):
            raise NodeValidationError(f"HTTP Endpoint did not render to a valid URL: {endpoint}")
        method = data["method"]

        kwargs: dict[str, Any] = {}
        if method in BODY_METHODS:
            kwargs["headers"] = {"Content-Type": "application/json"}
            body = data.get("body")
            if body:
                kwargs.update(self._build_body(body, context))

        async with httpx.AsyncClient(
            timeout=settings.http_timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(method, endpoint, **kwargs)
            response_data = self._extract_response_data(response)

        if response.is_error:
            raise ExternalCallError(
                f"HTTP Request failed: {response.status_code} {response.reason_phrase}. "
                f"{json.dumps(response_data, default=str)}"
            )

        return context.with_output(
            data["variables"],
            {
                "httpResponse": {
                    "status": response.status_code,
                    "statusText": response.reason_phrase,
                    "headers": dict(response.headers),
                    "data": response_data,
                }
            },
        )

    def _build_body(self, body: Any, context: ExecutionContext) -> dict[str, Any]:
        """Build httpx body kwargs from the configured body template."""
        if not isinstance(body, str):
            return {"json": expression_engine.resolve(body, context)}

        # A body that is only {{json path}} sends the referenced value itself
        match = _JSON_BODY.fullmatch(body.strip())
        if match:
            value = expression_engine.lookup(match.group(1).strip(), context)
            if value is not None:
                return {"json": value}

        rendered = expression_engine.render(body, context)
        try:
            return {"json": json.loads(rendered)}
        except json.JSONDecodeError:
            return {"content": rendered}

    def _extract_response_data(self, response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text
