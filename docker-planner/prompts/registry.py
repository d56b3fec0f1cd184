"""Prompt Registry - Loads prompt definitions from YAML and renders them."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from plan_execution import InvalidParametersError
from runtime import ContainerRuntime

logger = logging.getLogger(__name__)


class PromptArgument(BaseModel):
    """An argument accepted by a prompt."""
    name: str
    description: str = ""
    required: bool = False


class PromptDefinition(BaseModel):
    """A prompt the server can render."""
    name: str
    description: str
    arguments: List[PromptArgument] = Field(default_factory=list)
    label_key: Optional[str] = None
    template: str = ""

    def summary(self) -> Dict[str, Any]:
        """Public view without the template."""
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [a.model_dump() for a in self.arguments],
        }


class TextContent(BaseModel):
    type: str = "text"
    text: str


class PromptMessage(BaseModel):
    role: str
    content: TextContent


class PromptResult(BaseModel):
    """Result of rendering a prompt: one or more messages."""
    messages: List[PromptMessage] = Field(default_factory=list)


class PromptRegistry:
    """Catalog of prompts loaded from ``catalog.yaml``."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._default_config_path()
        self._prompts: Dict[str, PromptDefinition] = {}
        self._loaded = False

    def _default_config_path(self) -> str:
        """Get default catalog path next to this file."""
        return str(Path(__file__).parent / "catalog.yaml")

    async def load(self) -> None:
        """Load prompt definitions from the YAML catalog."""
        if self._loaded:
            return

        try:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Prompt catalog not found at {self.config_path}, no prompts available")
            self._loaded = True
            return

        for prompt_data in config.get("prompts", []):
            prompt = PromptDefinition(**prompt_data)
            self._prompts[prompt.name] = prompt
            logger.debug(f"Loaded prompt: {prompt.name}")

        self._loaded = True
        logger.info(f"Prompt registry loaded: {len(self._prompts)} prompts")

    def get_prompt_definition(self, name: str) -> Optional[PromptDefinition]:
        return self._prompts.get(name)

    def list_prompts(self) -> List[Dict[str, Any]]:
        """List prompts with their arguments."""
        return [p.summary() for p in self._prompts.values()]

    async def get_prompt(
        self,
        name: str,
        arguments: Dict[str, str],
        runtime: ContainerRuntime,
    ) -> PromptResult:
        """
        Render a prompt, listing the project's current Docker resources.

        Raises:
            InvalidParametersError: Unknown prompt or missing required argument
            ContainerRuntimeError: Resource listing failed
        """
        prompt = self._prompts.get(name)
        if prompt is None:
            raise InvalidParametersError(f"unknown prompt name: {name}")

        for argument in prompt.arguments:
            if argument.required and not arguments.get(argument.name):
                raise InvalidParametersError(f"missing required argument '{argument.name}'")

        project = arguments["name"]
        label = f"{prompt.label_key}={project}"
        resources = await runtime.list_project_resources(label)

        text = prompt.template.format(
            label=label,
            project=project,
            containers=json.dumps(resources.containers, indent=2),
            volumes=json.dumps(resources.volumes, indent=2),
            networks=json.dumps(resources.networks, indent=2),
            resources=arguments.get("containers", ""),
        )

        return PromptResult(messages=[
            PromptMessage(role="user", content=TextContent(text=text)),
        ])

    @property
    def prompt_count(self) -> int:
        return len(self._prompts)
