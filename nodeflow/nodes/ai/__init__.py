"""AI provider nodes."""

from .anthropic_chat import AnthropicNode
from .base import AIChatNode
from .gemini_chat import GeminiNode
from .openai_chat import OpenAINode

__all__ = ["AIChatNode", "AnthropicNode", "GeminiNode", "OpenAINode"]
