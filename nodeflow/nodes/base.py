"""Base node class for all workflow node executors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from ..core.exceptions import ExternalCallError, NodeValidationError, NonRetriableError
from ..engine.types import NodeStatus, NodeType

if TYPE_CHECKING:
    from ..engine.context import ExecutionContext
    from ..engine.status import StatusChannel
    from ..engine.types import NodeExecutionRequest

logger = logging.getLogger(__name__)


@dataclass
class NodePropertyOption:
    """Option for a node property."""

    name: str
    value: str
    description: str | None = None


@dataclass
class NodeProperty:
    """Property definition for node schema."""

    display_name: str
    name: str
    type: str  # string, options, json
    default: Any = None
    required: bool = False
    description: str | None = None
    placeholder: str | None = None
    options: list[NodePropertyOption] | None = None


@dataclass
class NodeTypeDescription:
    """Description of a node type for the node catalogue."""

    display_name: str
    description: str
    icon: str | None = None
    group: list[str] = field(default_factory=lambda: ["action"])
    properties: list[NodeProperty] = field(default_factory=list)


class BaseNode(ABC):
    """
    Abstract base class for all node executors.

    `execute` implements the executor contract: publish `loading`, validate
    the node config, perform the work, then publish exactly one terminal
    status. Subclasses only implement `validate` and `run`.
    """

    node_type: ClassVar[NodeType]
    channel: ClassVar[StatusChannel]
    node_description: ClassVar[NodeTypeDescription]

    # Prefix for validation messages, e.g. "OpenAI node"
    label: ClassVar[str] = "Node"
    # Prefix for wrapped call failures, e.g. "OpenAI request"
    error_prefix: ClassVar[str] = "Node execution"

    @property
    def type(self) -> str:
        """Node type identifier."""
        return self.node_type.value

    @property
    def channel_key(self) -> str:
        return self.channel.key

    @property
    def description(self) -> str:
        return self.node_description.description

    async def execute(self, request: NodeExecutionRequest) -> ExecutionContext:
        """Run the node and return the updated execution context."""
        node_id = request.node_id
        await request.publish(node_id, NodeStatus.LOADING)

        try:
            self.validate(request.data)
            result = await self.run(request)
        except NonRetriableError as e:
            if e.node_id is None:
                e.node_id = node_id
                e.details["node_id"] = node_id
            await request.publish(node_id, NodeStatus.ERROR)
            raise
        except Exception as e:
            await request.publish(node_id, NodeStatus.ERROR)
            raise ExternalCallError(f"{self.error_prefix} failed: {e}", node_id=node_id) from e

        await request.publish(node_id, NodeStatus.SUCCESS)
        return result

    def validate(self, data: dict[str, Any]) -> None:
        """Check required config fields. Raises NodeValidationError."""
        for prop in self.node_description.properties:
            if prop.required and not data.get(prop.name):
                raise NodeValidationError(f"{self.label}: {prop.display_name} is required")

    @abstractmethod
    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        """Perform the node's work and return the context with its output."""
        ...

    def get_parameter(self, data: dict[str, Any], key: str, default: Any = None) -> Any:
        """Get a config value, treating empty strings as absent."""
        value = data.get(key)
        if value is None or value == "":
            return default
        return value
