"""Tests for the LLM plan generator."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import OpenAIError

from llm_client import LLMClient, PlanGenerationError, SYSTEM_PROMPT
from plan_execution import ErrorCode, MalformedPlanError, build_default_registry


def completion(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def tool_call(name, arguments):
    return SimpleNamespace(function=SimpleNamespace(name=name, arguments=arguments))


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def llm(openai_client):
    return LLMClient(client=openai_client)


@pytest.fixture
def tools():
    return build_default_registry().list_tools()


class TestLLMClient:
    """Test cases for LLMClient.generate_plan."""

    @pytest.mark.asyncio
    async def test_plain_json_reply(self, llm, openai_client, tools):
        reply = '[{"action": "pull_image", "parameters": {"name": "nginx", "tag": "latest"}}]'
        openai_client.chat.completions.create.return_value = completion(reply)

        plan_json = await llm.generate_plan("run nginx", tools)

        assert json.loads(plan_json) == [
            {"action": "pull_image", "parameters": {"name": "nginx", "tag": "latest"}},
        ]

    @pytest.mark.asyncio
    async def test_request_carries_prompt_and_tools(self, llm, openai_client, tools):
        openai_client.chat.completions.create.return_value = completion("[]")

        await llm.generate_plan("run nginx", tools)

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert kwargs["messages"][1] == {"role": "user", "content": "run nginx"}
        assert kwargs["temperature"] == 0.0
        assert [t["function"]["name"] for t in kwargs["tools"]] == [t.name for t in tools]

    @pytest.mark.asyncio
    async def test_no_tools_omits_tools_field(self, llm, openai_client):
        openai_client.chat.completions.create.return_value = completion("[]")

        await llm.generate_plan("nothing", [])

        assert "tools" not in openai_client.chat.completions.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_fenced_reply(self, llm, openai_client, tools):
        reply = 'Sure!\n```json\n[{"action": "create_network", "parameters": {"name": "web"}}]\n```'
        openai_client.chat.completions.create.return_value = completion(reply)

        plan_json = await llm.generate_plan("make a network", tools)

        assert json.loads(plan_json)[0]["action"] == "create_network"

    @pytest.mark.asyncio
    async def test_tool_call_reply(self, llm, openai_client, tools):
        openai_client.chat.completions.create.return_value = completion(tool_calls=[
            tool_call("pull_image", '{"name": "redis"}'),
            tool_call("run_container", '{"name": "cache"}'),
        ])

        plan_json = await llm.generate_plan("run redis", tools)

        assert json.loads(plan_json) == [
            {"action": "pull_image", "parameters": {"name": "redis"}},
            {"action": "run_container", "parameters": {"name": "cache"}},
        ]

    @pytest.mark.asyncio
    async def test_invalid_json_reply(self, llm, openai_client, tools):
        openai_client.chat.completions.create.return_value = completion("I cannot do that.")

        with pytest.raises(MalformedPlanError) as exc_info:
            await llm.generate_plan("do something", tools)
        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_object_reply_rejected(self, llm, openai_client, tools):
        openai_client.chat.completions.create.return_value = completion('{"action": "pull_image"}')

        with pytest.raises(MalformedPlanError, match="expected an array"):
            await llm.generate_plan("pull", tools)

    @pytest.mark.asyncio
    async def test_api_error(self, llm, openai_client, tools):
        openai_client.chat.completions.create.side_effect = OpenAIError("rate limited")

        with pytest.raises(PlanGenerationError, match="CallLLM OpenAI API error") as exc_info:
            await llm.generate_plan("run nginx", tools)
        assert exc_info.value.code == ErrorCode.EXECUTION_FAILED

    @pytest.mark.asyncio
    async def test_empty_reply(self, llm, openai_client, tools):
        openai_client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        with pytest.raises(PlanGenerationError, match="empty response"):
            await llm.generate_plan("run nginx", tools)

    def test_missing_api_key(self):
        settings = MagicMock(openai_api_key=None)
        with patch("llm_client.get_settings", return_value=settings):
            with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
                LLMClient()
