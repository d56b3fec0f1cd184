"""Error taxonomy for plan execution.

Every failure carries a stable JSON-RPC error code so callers can branch
on ``code`` instead of parsing messages.
"""

from .types import ErrorCode


class PlanExecutionError(Exception):
    """Base class for failures surfaced as error envelopes."""

    code: ErrorCode = ErrorCode.EXECUTION_FAILED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedPlanError(PlanExecutionError):
    """Plan or payload is not syntactically valid structured data."""

    code = ErrorCode.PARSE_ERROR


class EmptyPlanError(PlanExecutionError):
    """Plan decoded fine but holds no actions."""

    code = ErrorCode.INVALID_PARAMS


class InvalidActionError(PlanExecutionError):
    """Plan entry without a usable action name."""

    code = ErrorCode.INVALID_PARAMS


class UnknownToolError(PlanExecutionError):
    """Action or tool name not present in the registry."""

    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParametersError(PlanExecutionError):
    """A handler rejected its parameters before touching the runtime."""

    code = ErrorCode.INVALID_PARAMS


class ToolExecutionError(PlanExecutionError):
    """The runtime failed, timed out, or the handler crashed."""

    code = ErrorCode.EXECUTION_FAILED
