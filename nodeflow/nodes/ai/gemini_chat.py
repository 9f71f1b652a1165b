"""Gemini chat node."""

from ...engine.status import GEMINI_CHANNEL
from ...engine.types import NodeType
from ..base import NodeTypeDescription
from .base import AIChatNode, prompt_properties


class GeminiNode(AIChatNode):
    """Generates text with a Gemini model; output `{aiResponse}`, default variable `gemini`."""

    node_type = NodeType.GEMINI
    channel = GEMINI_CHANNEL
    label = "Gemini node"
    error_prefix = "Gemini request"

    provider = "gemini"
    credential_env = "GOOGLE_GENERATIVE_AI_API_KEY"
    default_model = "gemini-pro-latest"
    output_key = "aiResponse"
    default_variable = "gemini"

    node_description = NodeTypeDescription(
        display_name="Gemini",
        description="Generate text with a Google Gemini model",
        icon="fa:robot",
        group=["ai"],
        properties=prompt_properties("gemini-pro-latest", variable_required=False),
    )
