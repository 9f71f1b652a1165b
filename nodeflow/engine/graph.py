"""
Graph sorter - orders workflow nodes so dependencies run first.

Uses Kahn's algorithm restricted to nodes that take part in at least one
connection. Ready nodes are taken in input order, so identical input always
yields identical output. Unconnected nodes are appended afterwards in their
original order.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Sequence
from typing import TypeVar

from ..core.exceptions import GraphCycleError, ValidationError
from .types import Connection, Node

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=Node)


def topological_sort(nodes: Sequence[N], connections: Sequence[Connection]) -> list[N]:
    """
    Sort nodes in dependency order.

    Raises:
        GraphCycleError: If the connected subgraph contains a cycle
    """
    if not connections:
        return list(nodes)

    # Input order drives tie-breaking; ids only seen in connections go last
    order: dict[str, int] = {}
    for node in nodes:
        order.setdefault(node.id, len(order))

    connected: set[str] = set()
    for conn in connections:
        for node_id in (conn.source, conn.target):
            connected.add(node_id)
            order.setdefault(node_id, len(order))

    in_degree: dict[str, int] = {node_id: 0 for node_id in connected}
    successors: dict[str, list[str]] = {node_id: [] for node_id in connected}
    for conn in connections:
        successors[conn.source].append(conn.target)
        in_degree[conn.target] += 1

    ready = [(order[node_id], node_id) for node_id, deg in in_degree.items() if deg == 0]
    heapq.heapify(ready)

    sorted_ids: list[str] = []
    while ready:
        _, node_id = heapq.heappop(ready)
        sorted_ids.append(node_id)
        for target in successors[node_id]:
            in_degree[target] -= 1
            if in_degree[target] == 0:
                heapq.heappush(ready, (order[target], target))

    if len(sorted_ids) != len(connected):
        remaining = sorted(
            (node_id for node_id, deg in in_degree.items() if deg > 0),
            key=order.__getitem__,
        )
        logger.warning("Rejecting workflow graph with cycle through %s", remaining)
        raise GraphCycleError(remaining)

    node_map = {node.id: node for node in nodes}
    result = [node_map[node_id] for node_id in sorted_ids if node_id in node_map]
    result.extend(node for node in nodes if node.id not in connected)
    return result


def validate_graph(nodes: Sequence[Node], connections: Sequence[Connection]) -> None:
    """
    Check that node ids are unique and every connection references them.

    Raises:
        ValidationError: On duplicate ids or dangling connections
        GraphCycleError: If the graph contains a cycle
    """
    node_ids = [n.id for n in nodes]
    if len(node_ids) != len(set(node_ids)):
        raise ValidationError("Node ids must be unique", field="nodes")

    known = set(node_ids)
    for conn in connections:
        if conn.source not in known:
            raise ValidationError(
                f"Connection references unknown source node: {conn.source}",
                field="connections",
            )
        if conn.target not in known:
            raise ValidationError(
                f"Connection references unknown target node: {conn.target}",
                field="connections",
            )

    topological_sort(nodes, connections)
