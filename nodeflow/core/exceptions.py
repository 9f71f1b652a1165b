"""Custom exceptions for the workflow engine."""

from typing import Any


class WorkflowEngineError(Exception):
    """Base exception for all workflow engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class WorkflowNotFoundError(WorkflowEngineError):
    """Raised when a workflow is not found."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__(
            message=f"Workflow not found: {workflow_id}",
            details={"workflow_id": workflow_id},
        )
        self.workflow_id = workflow_id


class TriggerNodeNotFoundError(WorkflowEngineError):
    """Raised when a workflow has no trigger node of the requested type."""

    def __init__(self, workflow_id: str, node_type: str) -> None:
        super().__init__(
            message=f"{node_type} trigger node not found in workflow {workflow_id}",
            details={"workflow_id": workflow_id, "node_type": node_type},
        )
        self.workflow_id = workflow_id
        self.node_type = node_type


class RunNotFoundError(WorkflowEngineError):
    """Raised when a run record is not found."""

    def __init__(self, run_id: str) -> None:
        super().__init__(
            message=f"Run not found: {run_id}",
            details={"run_id": run_id},
        )
        self.run_id = run_id


class UnknownNodeTypeError(WorkflowEngineError):
    """Raised when no executor is registered for a node type."""

    def __init__(self, node_type: str) -> None:
        super().__init__(
            message=f"No executor found for node type: {node_type}",
            details={"node_type": node_type},
        )
        self.node_type = node_type


class ValidationError(WorkflowEngineError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )
        self.field = field


class GraphCycleError(ValidationError):
    """Raised when the connected part of a workflow graph is not a DAG."""

    def __init__(self, node_ids: list[str]) -> None:
        super().__init__("Workflow contains a cycle", field="connections")
        self.details["node_ids"] = node_ids
        self.node_ids = node_ids


class NonRetriableError(WorkflowEngineError):
    """Terminal failure of a single node; the run must not retry it."""

    def __init__(self, message: str, node_id: str | None = None) -> None:
        super().__init__(message=message, details={"node_id": node_id})
        self.node_id = node_id


class NodeValidationError(NonRetriableError):
    """Raised when a node's configuration is missing or malformed."""


class CredentialMissingError(NodeValidationError):
    """Raised when a provider credential is not configured for the process."""


class ExternalCallError(NonRetriableError):
    """Raised when an HTTP or AI provider call fails."""


class InvalidTokenError(WorkflowEngineError):
    """Raised when a realtime subscription token is invalid or expired."""


class WebhookSignatureError(WorkflowEngineError):
    """Raised when an inbound webhook signature cannot be verified."""
