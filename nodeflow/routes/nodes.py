"""Node catalogue routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends

from ..core.dependencies import get_node_registry
from ..engine.node_registry import NodeRegistryClass
from ..schemas.node import NodeTypeInfoResponse

router = APIRouter(prefix="/nodes")


@router.get("", response_model=list[NodeTypeInfoResponse])
async def list_node_types(
    registry: Annotated[NodeRegistryClass, Depends(get_node_registry)],
) -> list[NodeTypeInfoResponse]:
    """List registered node types with their config properties and status channel."""
    return [NodeTypeInfoResponse(**asdict(info)) for info in registry.get_node_info_full()]
