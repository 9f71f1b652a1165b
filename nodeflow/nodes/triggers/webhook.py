"""Webhook trigger node - exposes an inbound HTTP request to later nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...engine.status import WEBHOOK_CHANNEL
from ...engine.types import NodeType
from ..base import BaseNode, NodeProperty, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.context import ExecutionContext
    from ...engine.types import NodeExecutionRequest


class WebhookTriggerNode(BaseNode):
    """
    Webhook trigger node.

    The webhook route seeds `webhookPayload` and `webhookHeaders` into the
    run context; this node republishes them as `{payload, headers}` under
    the configured variable name.
    """

    node_type = NodeType.WEBHOOK
    channel = WEBHOOK_CHANNEL
    label = "Webhook node"

    node_description = NodeTypeDescription(
        display_name="Webhook",
        description="Start the workflow when an HTTP request is received",
        icon="fa:bolt",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Variable name",
                name="variables",
                type="string",
                default="webhook",
                description="Name later nodes use to reference the request",
            ),
            NodeProperty(
                display_name="Secret",
                name="secret",
                type="string",
                default="",
            ),
        ],
    )

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        context = request.context
        variable_name = self.get_parameter(request.data, "variables", "webhook")

        return context.with_output(
            variable_name,
            {
                "payload": context.get("webhookPayload") or {},
                "headers": context.get("webhookHeaders") or {},
            },
        )
