"""Inbound webhook routes that start workflow runs."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from ..core.dependencies import get_event_bus, get_trigger_service
from ..core.exceptions import TriggerNodeNotFoundError, WebhookSignatureError, WorkflowNotFoundError
from ..engine.events import WORKFLOW_TRIGGER_EVENT, EventBus, TriggerEvent
from ..schemas.workflow import TriggerResponse
from ..services.trigger_service import TriggerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks")

_PRIVATE_HEADERS = frozenset({"x-webhook-secret"})

TriggerServiceDep = Annotated[TriggerService, Depends(get_trigger_service)]
EventBusDep = Annotated[EventBus, Depends(get_event_bus)]


async def _read_json(request: Request) -> Any:
    """Parse a JSON body; non-JSON bodies become an empty payload."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Ignoring non-JSON webhook body")
        return {}


def _forwardable_headers(request: Request) -> dict[str, str]:
    """Inbound headers minus the webhook secret, which must not reach the run context."""
    return {k: v for k, v in request.headers.items() if k.lower() not in _PRIVATE_HEADERS}


def _require_workflow_id(workflow_id: str | None) -> str:
    if not workflow_id:
        raise HTTPException(status_code=400, detail="workflowId query parameter is required")
    return workflow_id


async def _dispatch(bus: EventBus, workflow_id: str, user_id: str, seed: dict[str, Any]) -> str:
    return await bus.send(
        TriggerEvent(
            name=WORKFLOW_TRIGGER_EVENT,
            data={"workflowId": workflow_id, "userId": user_id, "data": seed},
        )
    )


@router.post("/webhook/{workflow_id}/{node_id}", response_model=TriggerResponse)
async def handle_webhook(
    workflow_id: str,
    node_id: str,
    request: Request,
    service: TriggerServiceDep,
    bus: EventBusDep,
    x_webhook_secret: Annotated[str | None, Header(alias="X-Webhook-Secret")] = None,
) -> TriggerResponse:
    """Trigger a workflow through one of its webhook nodes."""
    try:
        workflow, node = await service.validate_webhook_trigger(workflow_id, node_id)
        service.verify_webhook_secret(node, x_webhook_secret)
    except (WorkflowNotFoundError, TriggerNodeNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.message)
    except WebhookSignatureError as e:
        raise HTTPException(status_code=401, detail=e.message)

    seed = {
        "webhookPayload": await _read_json(request),
        "webhookHeaders": _forwardable_headers(request),
        "webhookNodeId": node.id,
    }
    event_id = await _dispatch(bus, workflow.id, workflow.user_id, seed)

    return TriggerResponse(
        message="Webhook received and workflow triggered",
        workflow_id=workflow.id,
        workflow_name=workflow.name,
        event_id=event_id,
    )


@router.post("/google-form", response_model=TriggerResponse)
async def handle_google_form(
    request: Request,
    service: TriggerServiceDep,
    bus: EventBusDep,
    workflow_id: Annotated[str | None, Query(alias="workflowId")] = None,
) -> TriggerResponse:
    """Trigger a workflow from a Google Form submission."""
    workflow_id = _require_workflow_id(workflow_id)
    try:
        workflow, node = await service.validate_form_trigger(workflow_id)
    except (WorkflowNotFoundError, TriggerNodeNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.message)

    seed = {
        "googleFormPayload": await _read_json(request),
        "googleFormNodeId": node.id,
    }
    event_id = await _dispatch(bus, workflow.id, workflow.user_id, seed)

    return TriggerResponse(
        message="Google Form submission received and workflow triggered",
        workflow_id=workflow.id,
        workflow_name=workflow.name,
        event_id=event_id,
    )


@router.post("/stripe", response_model=TriggerResponse)
async def handle_stripe(
    request: Request,
    service: TriggerServiceDep,
    bus: EventBusDep,
    workflow_id: Annotated[str | None, Query(alias="workflowId")] = None,
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
) -> TriggerResponse:
    """Trigger a workflow from a Stripe event, verifying the signature when a secret is set."""
    workflow_id = _require_workflow_id(workflow_id)
    try:
        workflow, node = await service.validate_stripe_trigger(workflow_id)
    except (WorkflowNotFoundError, TriggerNodeNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.message)

    try:
        raw = (await request.body()).decode()
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Request body must be UTF-8 encoded") from None

    try:
        service.verify_stripe_request(node, raw, stripe_signature)
    except WebhookSignatureError as e:
        raise HTTPException(status_code=401, detail=e.message)

    seed = {
        "stripePayload": await _read_json(request),
        "stripeNodeId": node.id,
    }
    event_id = await _dispatch(bus, workflow.id, workflow.user_id, seed)

    return TriggerResponse(
        message="Stripe webhook received and workflow triggered",
        workflow_id=workflow.id,
        workflow_name=workflow.name,
        event_id=event_id,
    )
