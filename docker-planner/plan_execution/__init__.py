"""Plan Execution Layer - Executes LLM-generated Docker plans.

This package provides:
- Tool Registry: name -> handler catalog, frozen after startup
- Action Handlers: Docker operations with their own parameter checks
- Plan Parser: plan JSON decoding and shape checks
- Plan Executor: sequential, fail-fast execution under a shared deadline
- Result Normalizer: JSON-RPC result envelopes
"""

from .types import (
    # Constants & enums
    JSONRPC_VERSION,
    ErrorCode,
    ExecutionStatus,
    # Models
    Action,
    RegisteredTool,
    ToolCallArgs,
    ExecutionContext,
    Envelope,
    EnvelopeError,
)

from .errors import (
    PlanExecutionError,
    MalformedPlanError,
    EmptyPlanError,
    InvalidActionError,
    UnknownToolError,
    InvalidParametersError,
    ToolExecutionError,
)

from .tool_registry import ToolRegistry, build_default_registry
from .result_normalizer import ResultNormalizer
from .plan_executor import PlanExecutor

# Handlers
from .handlers import (
    BaseToolHandler,
    CreateNetworkHandler,
    CreateContainerHandler,
    CreateVolumeHandler,
    RunContainerHandler,
    PullImageHandler,
    default_handlers,
)

from .schema_generator import ToolSchemaGenerator
from .plan_parser import PlanParser

__all__ = [
    # Constants & enums
    "JSONRPC_VERSION",
    "ErrorCode",
    "ExecutionStatus",
    # Models
    "Action",
    "RegisteredTool",
    "ToolCallArgs",
    "ExecutionContext",
    "Envelope",
    "EnvelopeError",
    # Errors
    "PlanExecutionError",
    "MalformedPlanError",
    "EmptyPlanError",
    "InvalidActionError",
    "UnknownToolError",
    "InvalidParametersError",
    "ToolExecutionError",
    # Core Components
    "ToolRegistry",
    "build_default_registry",
    "ResultNormalizer",
    "PlanExecutor",
    # Handlers
    "BaseToolHandler",
    "CreateNetworkHandler",
    "CreateContainerHandler",
    "CreateVolumeHandler",
    "RunContainerHandler",
    "PullImageHandler",
    "default_handlers",
    # Utilities
    "ToolSchemaGenerator",
    "PlanParser",
]
