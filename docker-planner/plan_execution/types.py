"""Plan Execution types and data models.

This module defines all Pydantic models for the plan execution layer:
- Actions parsed from a plan
- Registered tool metadata
- The shared execution context (deadline)
- The JSON-RPC result envelope
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Dict, Any, Union
from enum import Enum, IntEnum
import time


JSONRPC_VERSION = "2.0"


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(IntEnum):
    """JSON-RPC error codes returned in envelopes."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    EXECUTION_FAILED = -32000


class ExecutionStatus(str, Enum):
    """Outcome of a plan execution or tool call."""
    SUCCESS = "success"
    ERROR = "error"


# =============================================================================
# Action & Tool Models
# =============================================================================

class Action(BaseModel):
    """One step of a plan: a tool name plus its parameter bag."""
    model_config = ConfigDict(frozen=True)

    name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class RegisteredTool(BaseModel):
    """Registry entry binding a tool name to its handler.

    ``input_schema`` documents accepted parameters for callers and for LLM
    tool-calling; the executor does not enforce it.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(default_factory=dict)
    handler: Any
    timeout_seconds: Optional[float] = None  # Own deadline, not charged to the plan


class ToolCallArgs(BaseModel):
    """Arguments for directly calling a single tool."""
    tool_name: str = ""
    parameters: Optional[Dict[str, Any]] = None


# =============================================================================
# Execution Context
# =============================================================================

class ExecutionContext(BaseModel):
    """Deadline shared by every action of one plan execution."""
    deadline: float  # time.monotonic() value

    @classmethod
    def with_timeout(cls, timeout_seconds: float) -> "ExecutionContext":
        return cls(deadline=time.monotonic() + timeout_seconds)

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def extend(self, seconds: float) -> None:
        """Push the deadline out, used for time spent under a tool override."""
        self.deadline += seconds


# =============================================================================
# Result Envelope
# =============================================================================

class EnvelopeError(BaseModel):
    """Error object carried in a failed envelope."""
    code: int
    message: str

    def __str__(self) -> str:
        return f"RPC Error [Code: {self.code}]: {self.message}"


class Envelope(BaseModel):
    """Uniform JSON-RPC response: exactly one of result/error is set."""
    jsonrpc: str = JSONRPC_VERSION
    result: Optional[Any] = None
    error: Optional[EnvelopeError] = None
    id: Optional[Union[int, str]] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "Envelope":
        if (self.result is None) == (self.error is None):
            raise ValueError("envelope must carry exactly one of result or error")
        return self

    @property
    def status(self) -> ExecutionStatus:
        return ExecutionStatus.ERROR if self.error is not None else ExecutionStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return self.error is None
