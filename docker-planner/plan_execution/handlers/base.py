"""Base Tool Handler - Abstract interface for action handlers.

Each handler extracts and validates its own parameters, then delegates
one side-effecting operation to the container runtime.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from ..errors import InvalidParametersError
from ..types import ExecutionContext
from runtime import ContainerRuntime

logger = logging.getLogger(__name__)


class BaseToolHandler(ABC):
    """
    Abstract base class for action handlers.

    Constraints:
    - Validate parameters before any runtime call
    - Never coerce wrong-typed values
    - No retries (handled nowhere; one attempt per action)
    """

    name: str = "base"
    description: str = ""
    input_schema: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
    timeout_seconds: Optional[float] = None

    @abstractmethod
    async def execute(
        self,
        context: ExecutionContext,
        runtime: ContainerRuntime,
        parameters: Dict[str, Any],
    ) -> None:
        """
        Execute the action.

        Args:
            context: Execution context carrying the plan deadline
            runtime: Container runtime to delegate to
            parameters: Untyped parameter bag from the plan

        Raises:
            InvalidParametersError: If a parameter is missing or malformed
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


# =============================================================================
# Parameter extraction helpers
# =============================================================================

def require_string(parameters: Dict[str, Any], key: str, message: Optional[str] = None) -> str:
    """Return a non-empty string parameter or raise."""
    value = parameters.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidParametersError(message or f"invalid or missing {key}")
    return value


def optional_string(parameters: Dict[str, Any], key: str) -> Optional[str]:
    """Return a string parameter, None when absent or empty."""
    value = parameters.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidParametersError(f"invalid {key}: expected string, got {value!r}")
    return value


def optional_string_list(parameters: Dict[str, Any], key: str, label: str) -> List[str]:
    """Return a list of strings; any non-string element is an error."""
    value = parameters.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidParametersError(f"invalid {key}: expected a list, got {value!r}")
    for item in value:
        if not isinstance(item, str):
            raise InvalidParametersError(f"invalid {label} format: {item!r}")
    return list(value)


def optional_string_map(parameters: Dict[str, Any], key: str) -> Dict[str, str]:
    """Return a string-to-string mapping; any non-string value is an error."""
    value = parameters.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidParametersError(f"invalid {key}: expected an object, got {value!r}")
    for k, v in value.items():
        if not isinstance(v, str):
            raise InvalidParametersError(f"invalid {key} value for {k}: {v!r}")
    return dict(value)
