"""
Workflow runner - executes a workflow graph for one run.

Nodes run one at a time in topological order. Each executor receives the
context accumulated so far and its output is merged back in before the
next node starts. The first node failure halts the run.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..core.exceptions import NonRetriableError, WorkflowEngineError
from .context import ExecutionContext
from .graph import topological_sort
from .status import StatusPublisher
from .types import NodeExecutionRequest, RunRecord, RunState

if TYPE_CHECKING:
    from ..nodes.base import BaseNode
    from .node_registry import NodeRegistryClass
    from .status import StatusSink
    from .types import Node, Workflow

logger = logging.getLogger(__name__)


class WorkflowRunner:
    """Runs workflows node by node, publishing per-node status to a sink."""

    def __init__(self, registry: NodeRegistryClass | None = None) -> None:
        if registry is None:
            from .node_registry import node_registry

            registry = node_registry
        self._registry = registry

    async def run(
        self,
        workflow: Workflow,
        seed: Mapping[str, Any] | None = None,
        sink: StatusSink | None = None,
        run_id: str | None = None,
    ) -> RunRecord:
        """
        Run a workflow to completion or first failure.

        Args:
            workflow: The workflow definition to execute
            seed: Initial context, usually the trigger payload
            sink: Destination for node status events
            run_id: Id to tag status events with; generated when omitted

        Returns:
            RunRecord in COMPLETED or FAILED state
        """
        record = RunRecord(
            id=run_id or str(uuid.uuid4()),
            workflow_id=workflow.id,
            user_id=workflow.user_id,
        )
        context = ExecutionContext(seed)
        record.context = context.to_dict()

        self._transition(record, RunState.SORTING)
        try:
            ordered = topological_sort(workflow.nodes, workflow.connections)
            executors = [(node, self._registry.get(node.type)) for node in ordered]
        except WorkflowEngineError as e:
            return self._fail(record, e.message)

        self._transition(record, RunState.EXECUTING)
        for node, executor in executors:
            record.current_node_id = node.id
            try:
                context = await self._execute_node(node, executor, context, sink, record.id)
            except NonRetriableError as e:
                record.context = context.to_dict()
                return self._fail(record, e.message, node.id)
            except Exception as e:
                logger.exception("Unexpected error in node %s of run %s", node.id, record.id)
                record.context = context.to_dict()
                return self._fail(record, str(e), node.id)
            record.executed_node_ids.append(node.id)

        record.current_node_id = None
        record.context = context.to_dict()
        self._transition(record, RunState.COMPLETED)
        return record

    async def _execute_node(
        self,
        node: Node,
        executor: BaseNode,
        context: ExecutionContext,
        sink: StatusSink | None,
        run_id: str,
    ) -> ExecutionContext:
        logger.debug("Run %s: executing node %s (%s)", run_id, node.id, node.type)
        request = NodeExecutionRequest(
            node_id=node.id,
            data=dict(node.data),
            context=context,
            publish=StatusPublisher(sink, executor.channel, run_id),
            run_id=run_id,
        )
        result = await executor.execute(request)
        logger.debug("Run %s: node %s finished", run_id, node.id)
        # Merge rather than replace so no executor can drop earlier keys
        return context.merge(result)

    def _transition(self, record: RunRecord, state: RunState) -> None:
        logger.info("Run %s (workflow %s): %s -> %s", record.id, record.workflow_id, record.state.value, state.value)
        record.state = state
        if record.finished:
            record.end_time = datetime.now()

    def _fail(self, record: RunRecord, error: str, node_id: str | None = None) -> RunRecord:
        if node_id is not None:
            logger.warning("Run %s halted: node %s failed: %s", record.id, node_id, error)
        else:
            logger.warning("Run %s rejected before execution: %s", record.id, error)
        record.error = error
        record.failed_node_id = node_id
        record.current_node_id = None
        self._transition(record, RunState.FAILED)
        return record
