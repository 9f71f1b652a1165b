"""Google Form trigger node."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...engine.status import GOOGLE_FORM_TRIGGER_CHANNEL
from ...engine.types import NodeType
from ..base import BaseNode, NodeProperty, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.context import ExecutionContext
    from ...engine.types import NodeExecutionRequest


class GoogleFormTriggerNode(BaseNode):
    """Republishes `googleFormPayload` as `{payload}` under the variable name."""

    node_type = NodeType.GOOGLE_FORM_TRIGGER
    channel = GOOGLE_FORM_TRIGGER_CHANNEL
    label = "Google Form node"

    node_description = NodeTypeDescription(
        display_name="Google Form",
        description="Start the workflow when a Google Form is submitted",
        icon="fa:file-lines",
        group=["trigger"],
        properties=[
            NodeProperty(
                display_name="Variable name",
                name="variables",
                type="string",
                default="googleForm",
            ),
        ],
    )

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        context = request.context
        variable_name = self.get_parameter(request.data, "variables", "googleForm")
        return context.with_output(
            variable_name,
            {"payload": context.get("googleFormPayload") or {}},
        )
