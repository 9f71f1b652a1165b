"""OpenAI chat node."""

from ...engine.status import OPENAI_CHANNEL
from ...engine.types import NodeType
from ..base import NodeTypeDescription
from .base import AIChatNode, prompt_properties


class OpenAINode(AIChatNode):
    """Generates text with an OpenAI chat model; output `{text}`."""

    node_type = NodeType.OPENAI
    channel = OPENAI_CHANNEL
    label = "OpenAI node"
    error_prefix = "OpenAI request"

    provider = "openai"
    credential_env = "OPENAI_API_KEY"
    default_model = "gpt-3.5-turbo"

    node_description = NodeTypeDescription(
        display_name="OpenAI",
        description="Generate text with an OpenAI model",
        icon="fa:robot",
        group=["ai"],
        properties=prompt_properties("gpt-3.5-turbo", variable_required=True),
    )
