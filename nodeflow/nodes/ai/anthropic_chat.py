"""Anthropic chat node."""

from ...engine.status import ANTHROPIC_CHANNEL
from ...engine.types import NodeType
from ..base import NodeTypeDescription
from .base import AIChatNode, prompt_properties


class AnthropicNode(AIChatNode):
    """Generates text with a Claude model; output `{text}`."""

    node_type = NodeType.ANTHROPIC
    channel = ANTHROPIC_CHANNEL
    label = "Anthropic node"
    error_prefix = "Anthropic request"

    provider = "anthropic"
    credential_env = "ANTHROPIC_API_KEY"
    default_model = "claude-3-5-sonnet-20241022"

    node_description = NodeTypeDescription(
        display_name="Anthropic",
        description="Generate text with an Anthropic Claude model",
        icon="fa:robot",
        group=["ai"],
        properties=prompt_properties("claude-3-5-sonnet-20241022", variable_required=True),
    )
