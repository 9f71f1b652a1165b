"""FastAPI routes for the workflow engine."""

from .nodes import router as nodes_router
from .realtime import router as realtime_router
from .runs import router as runs_router
from .webhooks import router as webhook_router
from .workflows import router as workflows_router

__all__ = [
    "nodes_router",
    "realtime_router",
    "runs_router",
    "webhook_router",
    "workflows_router",
]
