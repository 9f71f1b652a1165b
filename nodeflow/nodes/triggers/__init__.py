"""Trigger nodes."""

from .google_form import GoogleFormTriggerNode
from .manual import ManualTriggerNode
from .stripe import StripeTriggerNode
from .webhook import WebhookTriggerNode

__all__ = [
    "GoogleFormTriggerNode",
    "ManualTriggerNode",
    "StripeTriggerNode",
    "WebhookTriggerNode",
]
