"""Trigger service - locates trigger nodes for inbound webhooks."""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import TYPE_CHECKING

from ..core.exceptions import TriggerNodeNotFoundError, WebhookSignatureError, WorkflowNotFoundError
from ..engine.types import Node, NodeType, Workflow

if TYPE_CHECKING:
    from ..repositories import WorkflowRepository

STRIPE_SIGNATURE_TOLERANCE = 300


def compute_stripe_signature(payload: str, timestamp: str, secret: str) -> str:
    """HMAC-SHA256 over "{timestamp}.{payload}", hex encoded."""
    signed = f"{timestamp}.{payload}".encode()
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def verify_stripe_signature(
    payload: str,
    header: str | None,
    secret: str,
    tolerance: int = STRIPE_SIGNATURE_TOLERANCE,
    now: float | None = None,
) -> None:
    """
    Verify a `Stripe-Signature: t=...,v1=...` header.

    Raises:
        WebhookSignatureError: If the header is missing, malformed, stale
            or carries no matching v1 signature
    """
    if not header:
        raise WebhookSignatureError("Stripe signature header is required when secret is configured")

    timestamp = None
    signatures: list[str] = []
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)

    if not timestamp or not signatures:
        raise WebhookSignatureError("Malformed Stripe signature header")

    try:
        signed_at = int(timestamp)
    except ValueError:
        raise WebhookSignatureError("Malformed Stripe signature header") from None

    current = time.time() if now is None else now
    if tolerance and abs(current - signed_at) > tolerance:
        raise WebhookSignatureError("Stripe signature timestamp is outside the tolerance window")

    expected = compute_stripe_signature(payload, timestamp, secret)
    if not any(hmac.compare_digest(expected, sig) for sig in signatures):
        raise WebhookSignatureError("Invalid Stripe webhook signature")


class TriggerService:
    """Resolves the workflow and trigger node an inbound request targets. Not owner-scoped."""

    def __init__(self, workflow_repo: WorkflowRepository) -> None:
        self._workflow_repo = workflow_repo

    async def validate_webhook_trigger(self, workflow_id: str, node_id: str) -> tuple[Workflow, Node]:
        workflow = await self._load(workflow_id)
        node = next(
            (n for n in workflow.nodes if n.id == node_id and n.type == NodeType.WEBHOOK.value),
            None,
        )
        if node is None:
            raise TriggerNodeNotFoundError(workflow_id, NodeType.WEBHOOK.value)
        return workflow, node

    async def validate_form_trigger(self, workflow_id: str) -> tuple[Workflow, Node]:
        return await self._find_trigger(workflow_id, NodeType.GOOGLE_FORM_TRIGGER)

    async def validate_stripe_trigger(self, workflow_id: str) -> tuple[Workflow, Node]:
        return await self._find_trigger(workflow_id, NodeType.STRIPE_TRIGGER)

    def verify_webhook_secret(self, node: Node, provided: str | None) -> None:
        """Check the shared secret of a webhook node, when it has one."""
        secret = node.data.get("secret")
        if not secret:
            return
        if not provided or not hmac.compare_digest(str(secret), provided):
            raise WebhookSignatureError("Invalid webhook secret")

    def verify_stripe_request(self, node: Node, payload: str, signature: str | None) -> None:
        secret = node.data.get("secret")
        if secret:
            verify_stripe_signature(payload, signature, str(secret))

    async def _find_trigger(self, workflow_id: str, node_type: NodeType) -> tuple[Workflow, Node]:
        workflow = await self._load(workflow_id)
        node = next((n for n in workflow.nodes if n.type == node_type.value), None)
        if node is None:
            raise TriggerNodeNotFoundError(workflow_id, node_type.value)
        return workflow, node

    async def _load(self, workflow_id: str) -> Workflow:
        workflow = await self._workflow_repo.get(workflow_id)
        if not workflow:
            raise WorkflowNotFoundError(workflow_id)
        return workflow
