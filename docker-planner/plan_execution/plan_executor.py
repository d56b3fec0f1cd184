"""Plan Executor - Runs action plans against the tool registry.

The main entry point of the plan execution layer. Actions run strictly
in submitted order under one shared deadline; the first failure halts
the plan and is reported in the returned envelope. Actions that already
completed are not undone.
"""

import asyncio
import logging
import time
from typing import Optional, Dict, List, Any, Union

from .types import Envelope, ExecutionContext, RegisteredTool
from .errors import (
    PlanExecutionError,
    InvalidParametersError,
    UnknownToolError,
    ToolExecutionError,
)
from .plan_parser import PlanParser
from .result_normalizer import ResultNormalizer
from .tool_registry import ToolRegistry
from runtime import ContainerRuntime, ContainerRuntimeError

logger = logging.getLogger(__name__)

DEFAULT_PLAN_TIMEOUT_SECONDS = 30.0


class PlanExecutor:
    """
    Executes plans and single tool calls.

    Responsibilities:
    - Parse and shape-check plans
    - Resolve action names in the registry
    - Invoke handlers under the plan deadline
    - Wrap every failure in an error envelope

    This layer does NOT:
    - Retry failed actions
    - Roll back completed actions
    - Run actions of one plan concurrently
    """

    def __init__(
        self,
        registry: ToolRegistry,
        runtime: ContainerRuntime,
        timeout_seconds: float = DEFAULT_PLAN_TIMEOUT_SECONDS,
        normalizer: Optional[ResultNormalizer] = None,
    ):
        self._registry = registry
        self._runtime = runtime
        self._timeout = timeout_seconds
        self._normalizer = normalizer or ResultNormalizer()

    async def execute_plan(self, plan: Union[str, List[Any], None]) -> Envelope:
        """
        Execute every action of a plan in order.

        Execution flow:
        1. Parse the plan (malformed / empty plans fail before any action)
        2. For each action: check its shape, resolve the tool, invoke it
        3. Stop at the first failure
        4. Return a success envelope when all actions completed

        Args:
            plan: JSON array text of ``{"action", "parameters"}`` objects

        Returns:
            Envelope with either the confirmation payload or the error
        """
        try:
            entries = PlanParser.parse(plan)
        except PlanExecutionError as e:
            logger.warning(f"Rejected plan: {e.message}")
            return self._normalizer.from_exception(e)

        total = len(entries)
        logger.info(f"Executing plan with {total} actions")
        context = ExecutionContext.with_timeout(self._timeout)

        for index, entry in enumerate(entries, start=1):
            try:
                action = PlanParser.to_action(entry)
                logger.info(f"Processing action {index}/{total}: {action.name}")
                tool = self._resolve(action.name, "unknown action")
                await self._invoke(tool, action.parameters, context)
            except PlanExecutionError as e:
                logger.warning(f"Stopping plan at action {index}/{total}: {e.message}")
                return self._normalizer.from_exception(e)

        logger.info(f"Plan executed successfully ({total} actions)")
        return self._normalizer.success("Plan executed successfully")

    async def call_tool(self, tool_name: str, parameters: Optional[Dict[str, Any]] = None) -> Envelope:
        """
        Invoke one registered tool outside of a plan.

        Uses the same deadline and error conventions as ``execute_plan``.
        """
        if parameters is None:
            parameters = {}

        try:
            tool = self._resolve(tool_name, "unknown tool")
            if not isinstance(parameters, dict):
                raise InvalidParametersError(f"invalid parameters for tool {tool_name}: expected an object")
            logger.info(f"Calling tool {tool_name}")
            context = ExecutionContext.with_timeout(self._timeout)
            await self._invoke(tool, parameters, context)
        except PlanExecutionError as e:
            logger.warning(f"Tool call {tool_name} failed: {e.message}")
            return self._normalizer.from_exception(e)

        return self._normalizer.success(f"Tool {tool_name} executed successfully")

    def _resolve(self, name: str, label: str) -> RegisteredTool:
        tool = self._registry.get_tool(name)
        if tool is None:
            raise UnknownToolError(f"{label}: {name}")
        return tool

    async def _invoke(
        self,
        tool: RegisteredTool,
        parameters: Dict[str, Any],
        context: ExecutionContext,
    ) -> None:
        """Run a handler under the applicable deadline, normalizing its failures."""
        name = tool.name
        override = tool.timeout_seconds

        # No action starts once the plan deadline has passed, overrides included
        if context.expired():
            raise ToolExecutionError(f"failed to execute tool {name}: deadline exceeded")
        timeout = override or context.remaining()

        started = time.monotonic()
        try:
            await asyncio.wait_for(
                tool.handler.execute(context, self._runtime, parameters),
                timeout=timeout,
            )
        except InvalidParametersError as e:
            raise InvalidParametersError(f"invalid parameters for tool {name}: {e.message}") from e
        except asyncio.TimeoutError as e:
            raise ToolExecutionError(
                f"failed to execute tool {name}: deadline exceeded after {timeout:.1f}s"
            ) from e
        except (PlanExecutionError, ContainerRuntimeError) as e:
            raise ToolExecutionError(f"failed to execute tool {name}: {e}") from e
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}: {e}")
            raise ToolExecutionError(f"failed to execute tool {name}: {e}") from e
        finally:
            if override:
                # Time under an override is not charged to the plan deadline
                context.extend(time.monotonic() - started)

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def runtime(self) -> ContainerRuntime:
        return self._runtime
