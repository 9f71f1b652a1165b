"""Initial node - placeholder every new workflow starts with."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.status import INITIAL_CHANNEL
from ..engine.types import NodeType
from .base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.context import ExecutionContext
    from ..engine.types import NodeExecutionRequest


class InitialNode(BaseNode):
    """Pass-through node; replaced by a real trigger in the editor."""

    node_type = NodeType.INITIAL
    channel = INITIAL_CHANNEL
    label = "Initial node"

    node_description = NodeTypeDescription(
        display_name="Initial",
        description="Placeholder node of a newly created workflow",
        icon="fa:plus",
        group=["trigger"],
    )

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        return request.context
