import json
from typing import List, Dict, Any
from .types import RegisteredTool


class ToolSchemaGenerator:
    """Generates JSON schemas for tools to be used in LLM prompts."""

    @staticmethod
    def generate_schema(tool: RegisteredTool) -> Dict[str, Any]:
        """
        Describe a registered tool as ``{name, description, parameters}``.
        """
        return {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.input_schema,
        }

    @staticmethod
    def generate_schemas(tools: List[RegisteredTool]) -> List[Dict[str, Any]]:
        """Generate schemas for a list of tools."""
        return [ToolSchemaGenerator.generate_schema(tool) for tool in tools]

    @staticmethod
    def generate_function_tools(tools: List[RegisteredTool]) -> List[Dict[str, Any]]:
        """Wrap schemas in the OpenAI chat-completions ``tools`` format."""
        return [
            {"type": "function", "function": schema}
            for schema in ToolSchemaGenerator.generate_schemas(tools)
        ]

    @staticmethod
    def generate_prompt_text(tools: List[RegisteredTool]) -> str:
        """
        Text representation for system prompts of models without native function calling.
        """
        return json.dumps(ToolSchemaGenerator.generate_schemas(tools), indent=2)
