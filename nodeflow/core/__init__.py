"""Core module for workflow engine - config, exceptions, and dependencies."""

from .config import Settings, get_settings, settings
from .exceptions import (
    CredentialMissingError,
    ExternalCallError,
    GraphCycleError,
    InvalidTokenError,
    NodeValidationError,
    NonRetriableError,
    RunNotFoundError,
    TriggerNodeNotFoundError,
    UnknownNodeTypeError,
    ValidationError,
    WebhookSignatureError,
    WorkflowEngineError,
    WorkflowNotFoundError,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    "get_settings",
    # Exceptions
    "WorkflowEngineError",
    "WorkflowNotFoundError",
    "TriggerNodeNotFoundError",
    "RunNotFoundError",
    "UnknownNodeTypeError",
    "ValidationError",
    "GraphCycleError",
    "NonRetriableError",
    "NodeValidationError",
    "CredentialMissingError",
    "ExternalCallError",
    "InvalidTokenError",
    "WebhookSignatureError",
]
