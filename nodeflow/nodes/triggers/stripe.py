"""Stripe trigger node."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...engine.status import STRIPE_TRIGGER_CHANNEL
from ...engine.types import NodeType
from ..base import BaseNode, NodeProperty, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.context import ExecutionContext
    from ...engine.types import NodeExecutionRequest

STRIPE_VARIABLE = "stripe"


def normalize_stripe_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build the `stripe` context value from a webhook payload.

    Stripe delivers `{type, data}` at the top level; forwarders sometimes
    wrap it as `{event: {type, data}}`, so both shapes are accepted.
    """
    wrapped = payload.get("event")
    if not isinstance(wrapped, Mapping):
        wrapped = {}

    return {
        "payload": dict(payload),
        "event": payload.get("type") or wrapped.get("type"),
        "data": payload.get("data") or wrapped.get("data"),
    }


class StripeTriggerNode(BaseNode):
    """Stripe trigger - always publishes under the `stripe` variable."""

    node_type = NodeType.STRIPE_TRIGGER
    channel = STRIPE_TRIGGER_CHANNEL
    label = "Stripe node"

    node_description = NodeTypeDescription(
        display_name="Stripe",
        description="Start the workflow on a Stripe event",
        icon="fa:credit-card",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Signing secret",
                name="secret",
                type="string",
                default="",
                description="Webhook signing secret; when set, signatures are verified",
            ),
        ],
    )

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        context = request.context
        payload = context.get("stripePayload")
        if not isinstance(payload, Mapping):
            payload = {}
        return context.with_output(STRIPE_VARIABLE, normalize_stripe_payload(payload))
