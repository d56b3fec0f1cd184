"""Tests for Prompt Registry."""

import pytest

from plan_execution import InvalidParametersError
from prompts import PromptRegistry
from runtime import ContainerRuntimeError, ProjectResources
from conftest import FakeRuntime


@pytest.fixture
async def prompts():
    registry = PromptRegistry()
    await registry.load()
    return registry


class TestPromptRegistry:
    """Test cases for PromptRegistry."""

    @pytest.mark.asyncio
    async def test_load_default_catalog(self, prompts):
        assert prompts.prompt_count == 1
        assert prompts.get_prompt_definition("docker_compose") is not None

    @pytest.mark.asyncio
    async def test_list_prompts(self, prompts):
        listed = prompts.list_prompts()

        assert listed[0]["name"] == "docker_compose"
        assert [a["name"] for a in listed[0]["arguments"]] == ["name", "containers"]
        assert all(a["required"] for a in listed[0]["arguments"])
        assert "template" not in listed[0]

    @pytest.mark.asyncio
    async def test_missing_catalog(self, tmp_path):
        registry = PromptRegistry(str(tmp_path / "missing.yaml"))
        await registry.load()

        assert registry.list_prompts() == []

    @pytest.mark.asyncio
    async def test_custom_catalog(self, tmp_path):
        catalog = tmp_path / "prompts.yaml"
        catalog.write_text(
            "prompts:\n"
            "  - name: greet\n"
            "    description: Say hello\n"
            "    label_key: team\n"
            "    arguments:\n"
            "      - name: name\n"
            "        required: true\n"
            "    template: 'Hello {project} ({label})'\n"
        )
        registry = PromptRegistry(str(catalog))
        await registry.load()

        result = await registry.get_prompt("greet", {"name": "ops"}, FakeRuntime())
        assert result.messages[0].content.text == "Hello ops (team=ops)"

    @pytest.mark.asyncio
    async def test_get_docker_compose_prompt(self, prompts):
        runtime = FakeRuntime()
        runtime.resources = ProjectResources(
            containers=[{"name": "/shop-web", "status": "Up 2 minutes"}],
            volumes=[{"name": "shop-data", "id": "shop-data"}],
        )

        result = await prompts.get_prompt(
            "docker_compose",
            {"name": "shop", "containers": "an nginx web server"},
            runtime,
        )

        assert runtime.calls == [("list_project_resources", "mcp-server-docker.project=shop")]
        message = result.messages[0]
        assert message.role == "user"
        assert message.content.type == "text"
        text = message.content.text
        assert "mcp-server-docker.project=shop" in text
        assert "shop-{ResourceName}" in text
        assert "`labels` parameter" in text
        assert "/shop-web" in text
        assert "shop-data" in text
        assert "an nginx web server" in text

    @pytest.mark.asyncio
    async def test_unknown_prompt(self, prompts):
        with pytest.raises(InvalidParametersError, match="unknown prompt name: nope"):
            await prompts.get_prompt("nope", {}, FakeRuntime())

    @pytest.mark.asyncio
    async def test_missing_required_argument(self, prompts):
        runtime = FakeRuntime()
        with pytest.raises(InvalidParametersError, match="missing required argument 'containers'"):
            await prompts.get_prompt("docker_compose", {"name": "shop"}, runtime)
        assert runtime.calls == []

    @pytest.mark.asyncio
    async def test_runtime_failure_propagates(self, prompts):
        runtime = FakeRuntime(fail_on={"list_project_resources": "daemon unavailable"})
        with pytest.raises(ContainerRuntimeError):
            await prompts.get_prompt("docker_compose", {"name": "shop", "containers": "x"}, runtime)
