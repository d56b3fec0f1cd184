"""Tests for Tool Registry."""

import pytest

from plan_execution import ToolRegistry, build_default_registry
from conftest import RecordingHandler


class TestToolRegistry:
    """Test cases for ToolRegistry."""

    def test_register_and_get(self):
        registry = ToolRegistry()
        handler = RecordingHandler("step_a", [])
        registry.register("step_a", "First step", {"type": "object"}, handler)

        tool = registry.get_tool("step_a")
        assert tool is not None
        assert tool.handler is handler
        assert tool.description == "First step"
        assert tool.timeout_seconds is None

    def test_get_unknown_tool(self):
        registry = ToolRegistry()
        assert registry.get_tool("missing") is None
        assert not registry.validate_tool_exists("missing")

    def test_duplicate_registration_last_wins(self):
        """Re-registering a name replaces the earlier handler."""
        registry = ToolRegistry()
        first = RecordingHandler("step_a", [])
        second = RecordingHandler("step_a", [])
        registry.register_handler(first)
        registry.register_handler(RecordingHandler("step_b", []))
        registry.register_handler(second)

        assert registry.tool_count == 2
        assert registry.get_tool("step_a").handler is second
        # Latest registration moves to the end of the listing
        assert [t.name for t in registry.list_tools()] == ["step_b", "step_a"]

    def test_list_preserves_registration_order(self):
        registry = ToolRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register_handler(RecordingHandler(name, []))

        assert [t.name for t in registry.list_tools()] == ["zeta", "alpha", "mid"]

    def test_register_after_freeze_fails(self):
        registry = ToolRegistry()
        registry.freeze()

        assert registry.is_frozen
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register_handler(RecordingHandler("late", []))


class TestDefaultRegistry:
    """The built-in Docker tool set."""

    def test_default_tools(self):
        registry = build_default_registry()

        assert registry.is_frozen
        assert [t.name for t in registry.list_tools()] == [
            "create_network",
            "create_container",
            "create_volume",
            "run_container",
            "pull_image",
        ]

    def test_pull_image_has_own_timeout(self):
        registry = build_default_registry(pull_timeout_seconds=45.0)

        assert registry.get_tool("pull_image").timeout_seconds == 45.0
        assert registry.get_tool("create_container").timeout_seconds is None

    def test_schemas_describe_required_parameters(self):
        registry = build_default_registry()

        schema = registry.get_tool("create_container").input_schema
        assert schema["required"] == ["name", "image"]
        assert schema["properties"]["volumes"]["items"] == {"type": "string"}

    def test_create_tools_accept_labels(self):
        registry = build_default_registry()

        for name in ("create_network", "create_volume", "create_container"):
            labels = registry.get_tool(name).input_schema["properties"]["labels"]
            assert labels["additionalProperties"] == {"type": "string"}
