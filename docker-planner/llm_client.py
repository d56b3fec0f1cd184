from openai import AsyncOpenAI, OpenAIError
from typing import Any, Dict, List, Optional
import json
import logging

from config import get_settings
from plan_execution import (
    ErrorCode,
    MalformedPlanError,
    PlanExecutionError,
    PlanParser,
    RegisteredTool,
    ToolSchemaGenerator,
)

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """
You are an AI that generates structured JSON plans for Docker automation.
Always return a valid JSON array of actions.
Follow these guidelines:
1. Use only the tools available to you to manage Docker resources.
2. Provide a step-by-step plan as a JSON array of actions, each shaped as
   {"action": "<tool name>", "parameters": {...}}.
3. Always pull the image tagged as latest if no specific tag is specified.
4. Order actions by dependency: images, networks and volumes before the containers using them.
5. Volumes are strings in "source:target" form; environment values are strings.

---
Example Response for creating a mysql container:
[
    {"action": "pull_image", "parameters": {"name": "mysql", "tag": "latest"}},
    {"action": "create_network", "parameters": {"name": "mysql_network"}},
    {"action": "create_volume", "parameters": {"name": "mysql_data"}},
    {
        "action": "create_container",
        "parameters": {
            "name": "mysql_container",
            "image": "mysql:latest",
            "environment": {
                "MYSQL_ROOT_PASSWORD": "rootpassword",
                "MYSQL_DATABASE": "exampledb"
            },
            "volumes": ["mysql_data:/var/lib/mysql"],
            "networks": ["mysql_network"]
        }
    },
    {"action": "run_container", "parameters": {"name": "mysql_container"}}
]
---
Do not include explanations. Do not return Markdown. Just return JSON.
"""


class PlanGenerationError(PlanExecutionError):
    """The language model could not produce a plan."""

    code = ErrorCode.EXECUTION_FAILED


class LLMClient:
    """Client turning natural-language instructions into Docker plans."""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        settings = get_settings()
        if client is None:
            if not settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable not set")
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        self.client = client
        self.model = settings.openai_model
        self.temperature = settings.openai_temperature

    async def generate_plan(self, instruction: str, tools: List[RegisteredTool]) -> str:
        """
        Ask the LLM for a plan using the live tool list.

        Returns:
            Plan as compact JSON array text

        Raises:
            PlanGenerationError: API failure or empty reply
            MalformedPlanError: Reply is not a JSON array
        """
        logger.info(f"Generating plan for instruction: {instruction}")

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": self._build_messages(instruction),
            "temperature": self.temperature,
        }
        function_tools = ToolSchemaGenerator.generate_function_tools(tools)
        if function_tools:
            request["tools"] = function_tools

        try:
            response = await self.client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.error(f"LLM generation error: {e}")
            raise PlanGenerationError(f"CallLLM OpenAI API error: {e}") from e

        if not response.choices:
            logger.error("Empty response from OpenAI")
            raise PlanGenerationError("CallLLM received an empty response from OpenAI")

        message = response.choices[0].message
        if message.tool_calls:
            plan = self._plan_from_tool_calls(message.tool_calls)
        else:
            plan = self._plan_from_content(message.content or "")

        plan_json = json.dumps(plan)
        logger.info(f"Returning JSON plan: {plan_json}")
        return plan_json

    def _build_messages(self, instruction: str) -> List[Dict[str, str]]:
        """Build the messages array for the LLM."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": instruction},
        ]

    def _plan_from_content(self, content: str) -> List[Any]:
        json_str = PlanParser.extract_json_block(content)
        if not json_str:
            raise PlanGenerationError("CallLLM received an empty response from OpenAI")

        try:
            plan = json.loads(json_str)
        except json.JSONDecodeError as e:
            logger.warning(f"LLM response is not valid JSON: {e}")
            raise MalformedPlanError(f"CallLLM returned invalid JSON: {e}") from e

        if not isinstance(plan, list):
            raise MalformedPlanError("CallLLM returned invalid JSON: expected an array of actions")
        return plan

    def _plan_from_tool_calls(self, tool_calls: List[Any]) -> List[Dict[str, Any]]:
        """Convert native function calls into plan entries, keeping their order."""
        plan = []
        for call in tool_calls:
            try:
                parameters = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise MalformedPlanError(
                    f"CallLLM returned invalid JSON arguments for {call.function.name}: {e}"
                ) from e
            plan.append({"action": call.function.name, "parameters": parameters})
        return plan


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get the LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
