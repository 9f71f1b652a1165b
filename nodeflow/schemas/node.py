"""Node catalogue schemas."""

from typing import Any

from .common import CamelModel


class NodeTypeInfoResponse(CamelModel):
    """Node type information for the editor's node picker."""

    type: str
    display_name: str
    description: str
    channel: str
    icon: str | None = None
    group: list[str] | None = None
    properties: list[dict[str, Any]]
