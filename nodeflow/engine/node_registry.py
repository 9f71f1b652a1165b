"""Node registry mapping node types to their executors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..core.exceptions import UnknownNodeTypeError
from .types import NodeType

if TYPE_CHECKING:
    from ..nodes.base import BaseNode
    from .status import StatusChannel


@dataclass
class NodeTypeInfo:
    """Node type information for API responses."""

    type: str
    display_name: str
    description: str
    channel: str
    icon: str | None = None
    group: list[str] | None = None
    properties: list[dict[str, Any]] = field(default_factory=list)


class NodeRegistryClass:
    """Registry of node executors, keyed by NodeType."""

    def __init__(self) -> None:
        self._instances: dict[NodeType, BaseNode] = {}

    def get(self, node_type: str | NodeType) -> BaseNode:
        """
        Get the executor for a node type.

        Executors are stateless, so a single cached instance is shared.

        Raises:
            UnknownNodeTypeError: If node type is not registered
        """
        try:
            key = NodeType(node_type)
        except ValueError:
            raise UnknownNodeTypeError(str(node_type)) from None
        if key not in self._instances:
            raise UnknownNodeTypeError(key.value)
        return self._instances[key]

    def has(self, node_type: str | NodeType) -> bool:
        try:
            return NodeType(node_type) in self._instances
        except ValueError:
            return False

    def channel_for(self, node_type: str | NodeType) -> StatusChannel:
        return self.get(node_type).channel

    def list(self) -> list[str]:
        """List all registered node types."""
        return [t.value for t in self._instances]

    def get_node_info_full(self) -> list[NodeTypeInfo]:
        return [self._build_node_type_info(instance) for instance in self._instances.values()]

    def _build_node_type_info(self, instance: BaseNode) -> NodeTypeInfo:
        desc = instance.node_description
        properties = []
        for prop in desc.properties:
            prop_dict: dict[str, Any] = {
                "displayName": prop.display_name,
                "name": prop.name,
                "type": prop.type,
                "default": prop.default,
            }
            if prop.required:
                prop_dict["required"] = True
            if prop.description:
                prop_dict["description"] = prop.description
            if prop.placeholder:
                prop_dict["placeholder"] = prop.placeholder
            if prop.options:
                prop_dict["options"] = [
                    {"name": o.name, "value": o.value, "description": o.description}
                    for o in prop.options
                ]
            properties.append(prop_dict)

        return NodeTypeInfo(
            type=instance.type,
            display_name=desc.display_name,
            description=desc.description,
            channel=instance.channel.name,
            icon=desc.icon,
            group=desc.group,
            properties=properties,
        )

    def register(self, node_class: type[BaseNode]) -> None:
        """Register a node class if not already registered."""
        if node_class.node_type not in self._instances:
            self._instances[node_class.node_type] = node_class()


# Singleton instance
node_registry = NodeRegistryClass()


def register_all_nodes(registry: NodeRegistryClass | None = None) -> NodeRegistryClass:
    """Register all built-in nodes."""
    from ..nodes import (
        AnthropicNode,
        GeminiNode,
        GoogleFormTriggerNode,
        HttpRequestNode,
        InitialNode,
        ManualTriggerNode,
        OpenAINode,
        StripeTriggerNode,
        WebhookTriggerNode,
    )

    registry = registry or node_registry

    all_node_classes: list[type[BaseNode]] = [
        # Triggers
        InitialNode,
        ManualTriggerNode,
        WebhookTriggerNode,
        GoogleFormTriggerNode,
        StripeTriggerNode,
        # Actions
        HttpRequestNode,
        # AI
        OpenAINode,
        AnthropicNode,
        GeminiNode,
    ]

    for node_class in all_node_classes:
        registry.register(node_class)
    return registry
