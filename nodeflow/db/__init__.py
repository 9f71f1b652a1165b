"""Database configuration and models."""

from .models import RunModel, WorkflowModel
from .session import async_session_factory, engine, get_session, init_db

__all__ = [
    "engine",
    "async_session_factory",
    "init_db",
    "get_session",
    "WorkflowModel",
    "RunModel",
]
