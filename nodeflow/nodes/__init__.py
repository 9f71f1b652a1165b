"""Workflow node implementations."""

from .ai import AnthropicNode, GeminiNode, OpenAINode
from .base import BaseNode
from .http_request import HttpRequestNode
from .initial import InitialNode
from .triggers import (
    GoogleFormTriggerNode,
    ManualTriggerNode,
    StripeTriggerNode,
    WebhookTriggerNode,
)

__all__ = [
    "BaseNode",
    "InitialNode",
    "ManualTriggerNode",
    "WebhookTriggerNode",
    "GoogleFormTriggerNode",
    "StripeTriggerNode",
    "HttpRequestNode",
    "OpenAINode",
    "AnthropicNode",
    "GeminiNode",
]
