"""Tool Registry - Central catalog of executable tools.

The Tool Registry is the source of truth for all dispatchable actions.
It is populated once at startup, frozen, and then only read, so
concurrent requests share it without locking.
"""

import logging
from typing import Any, Dict, List, Optional

from .types import RegisteredTool
from .handlers import BaseToolHandler, default_handlers

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Mapping from action name to handler plus schema and description.

    Design Notes:
    - Registering an existing name replaces the previous entry
    - No registration after ``freeze()``
    - Listing preserves registration order
    """

    def __init__(self):
        self._tools: Dict[str, RegisteredTool] = {}
        self._frozen: bool = False

    def register(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: BaseToolHandler,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Register a tool in the registry.

        Args:
            name: Unique tool name used as the plan's ``action``
            description: Human-readable description
            input_schema: JSON-schema-like parameter description
            handler: Object whose ``execute`` performs the action
            timeout_seconds: Optional deadline override for this tool

        Raises:
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register tool '{name}': registry is frozen")

        if name in self._tools:
            logger.warning(f"Tool '{name}' is already registered, replacing it")
            # Re-insert so listing order follows the latest registration
            del self._tools[name]

        self._tools[name] = RegisteredTool(
            name=name,
            description=description,
            input_schema=input_schema,
            handler=handler,
            timeout_seconds=timeout_seconds,
        )
        logger.info(f"Registered tool: {name}")

    def register_handler(self, handler: BaseToolHandler) -> None:
        """Register a handler under its own name, description and schema."""
        self.register(
            handler.name,
            handler.description,
            handler.input_schema,
            handler,
            timeout_seconds=handler.timeout_seconds,
        )

    def freeze(self) -> None:
        """End the population phase."""
        self._frozen = True
        logger.info(f"Tool Registry frozen with {len(self._tools)} tools")

    def get_tool(self, tool_name: str) -> Optional[RegisteredTool]:
        """
        Get a tool by name.

        Returns:
            Registered tool or None if not found
        """
        return self._tools.get(tool_name)

    def list_tools(self) -> List[RegisteredTool]:
        """List registered tools in registration order."""
        return list(self._tools.values())

    def validate_tool_exists(self, tool_name: str) -> bool:
        return tool_name in self._tools

    @property
    def tool_count(self) -> int:
        """Get total number of registered tools."""
        return len(self._tools)

    @property
    def is_frozen(self) -> bool:
        return self._frozen


def build_default_registry(pull_timeout_seconds: Optional[float] = 120.0) -> ToolRegistry:
    """Create a frozen registry holding the built-in Docker tools."""
    registry = ToolRegistry()
    for handler in default_handlers(pull_timeout_seconds=pull_timeout_seconds):
        registry.register_handler(handler)
    registry.freeze()
    return registry
