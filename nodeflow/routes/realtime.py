"""Server-Sent Events (SSE) route streaming node status to subscribers."""

from __future__ import annotations

import json
from typing import Annotated, AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Query
from sse_starlette.sse import EventSourceResponse

from ..core.dependencies import get_realtime_broker, get_token_service
from ..core.exceptions import InvalidTokenError
from ..engine.realtime import RealtimeBroker
from ..services.realtime_service import SubscriptionTokenService

router = APIRouter(prefix="/realtime")


async def _status_events(
    broker: RealtimeBroker,
    channel_key: str,
    run_id: str | None,
) -> AsyncGenerator[dict[str, str], None]:
    async with broker.subscribe([channel_key], run_id=run_id) as subscription:
        async for message in subscription:
            yield {
                "event": message.topic,
                "data": json.dumps(message.to_dict()),
            }


@router.get("/{channel_key}")
async def subscribe_channel(
    channel_key: str,
    tokens: Annotated[SubscriptionTokenService, Depends(get_token_service)],
    broker: Annotated[RealtimeBroker, Depends(get_realtime_broker)],
    token: str = Query(..., description="Subscription token for this channel"),
    run_id: Annotated[str | None, Query(alias="runId")] = None,
) -> EventSourceResponse:
    """
    Stream `{nodeId, status, runId}` events published on a status channel.

    Pass `runId` to receive only the events of one run.
    """
    try:
        tokens.verify(token, channel_key)
    except InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=e.message)

    return EventSourceResponse(_status_events(broker, channel_key, run_id))
