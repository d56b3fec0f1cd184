"""Container action handlers.

Thin adapters from plan parameters to container runtime calls.
"""

import logging
from typing import Any, Dict, List, Optional

from .base import (
    BaseToolHandler,
    require_string,
    optional_string,
    optional_string_list,
    optional_string_map,
)
from ..errors import InvalidParametersError
from ..types import ExecutionContext
from runtime import ContainerRuntime

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TAG = "latest"

LABELS_SCHEMA = {
    "type": "object",
    "description": "Labels as a string-to-string map",
    "additionalProperties": {"type": "string"},
}


class CreateNetworkHandler(BaseToolHandler):
    name = "create_network"
    description = "Create a Docker network"
    input_schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of the network"},
            "driver": {"type": "string", "description": "Network driver, e.g. bridge"},
            "labels": LABELS_SCHEMA,
        },
        "required": ["name"],
    }

    async def execute(self, context: ExecutionContext, runtime: ContainerRuntime, parameters: Dict[str, Any]) -> None:
        name = require_string(parameters, "name", "missing network name")
        driver = optional_string(parameters, "driver")
        labels = optional_string_map(parameters, "labels")
        await runtime.create_network(name, driver=driver, labels=labels)


class CreateVolumeHandler(BaseToolHandler):
    name = "create_volume"
    description = "Create a Docker volume"
    input_schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of the volume"},
            "driver": {"type": "string", "description": "Volume driver, e.g. local"},
            "labels": LABELS_SCHEMA,
        },
        "required": ["name"],
    }

    async def execute(self, context: ExecutionContext, runtime: ContainerRuntime, parameters: Dict[str, Any]) -> None:
        name = require_string(parameters, "name", "invalid or missing name for create_volume action")
        driver = optional_string(parameters, "driver")
        labels = optional_string_map(parameters, "labels")
        await runtime.create_volume(name, driver=driver, labels=labels)


class CreateContainerHandler(BaseToolHandler):
    name = "create_container"
    description = "Create a Docker container"
    input_schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of the container"},
            "image": {"type": "string", "description": "Docker image to use"},
            "environment": {
                "type": "object",
                "description": "Environment variables as a string-to-string map",
                "additionalProperties": {"type": "string"},
            },
            "volumes": {
                "type": "array",
                "description": "Volume binds in source:target[:mode] form",
                "items": {"type": "string"},
            },
            "networks": {
                "type": "array",
                "description": "Names of networks to attach the container to",
                "items": {"type": "string"},
            },
            "labels": LABELS_SCHEMA,
        },
        "required": ["name", "image"],
    }

    async def execute(self, context: ExecutionContext, runtime: ContainerRuntime, parameters: Dict[str, Any]) -> None:
        name = optional_string(parameters, "name")
        image = optional_string(parameters, "image")
        if not name or not image:
            raise InvalidParametersError("missing container name or image")

        environment = optional_string_map(parameters, "environment")
        volumes = optional_string_list(parameters, "volumes", "volume")
        networks = optional_string_list(parameters, "networks", "network")
        labels = optional_string_map(parameters, "labels")

        await runtime.create_container(
            name,
            image,
            environment=environment,
            volumes=volumes,
            networks=networks,
            labels=labels,
        )


class RunContainerHandler(BaseToolHandler):
    name = "run_container"
    description = "Run (start) a Docker container"
    input_schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of the container"},
        },
        "required": ["name"],
    }

    async def execute(self, context: ExecutionContext, runtime: ContainerRuntime, parameters: Dict[str, Any]) -> None:
        name = require_string(parameters, "name", "invalid name for run_container")
        state = await runtime.inspect_container(name)
        if state.running:
            logger.info(f"Container {name} already running, skipping start")
            return
        await runtime.start_container(state.id)


class PullImageHandler(BaseToolHandler):
    name = "pull_image"
    description = "Pull a Docker image"
    input_schema = {
        "type": "object",
        "properties": {
            "image": {"type": "string", "description": "Full image reference, e.g. nginx:latest"},
            "name": {"type": "string", "description": "Image name when image is not given"},
            "tag": {"type": "string", "description": "Image tag, defaults to latest"},
        },
        "required": [],
    }

    def __init__(self, timeout_seconds: Optional[float] = 120.0):
        # Pulls stream for a long time; they get their own deadline
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def resolve_reference(parameters: Dict[str, Any]) -> str:
        """Resolve ``image`` or ``name``/``tag`` to an image reference."""
        image = optional_string(parameters, "image")
        if image:
            return image

        name = optional_string(parameters, "name")
        if not name:
            raise InvalidParametersError("missing image name for pull_image")
        tag = optional_string(parameters, "tag") or DEFAULT_IMAGE_TAG
        return f"{name}:{tag}"

    async def execute(self, context: ExecutionContext, runtime: ContainerRuntime, parameters: Dict[str, Any]) -> None:
        reference = self.resolve_reference(parameters)
        logger.info(f"Pulling image {reference}")
        await runtime.pull_image(reference)


def default_handlers(pull_timeout_seconds: Optional[float] = 120.0) -> List[BaseToolHandler]:
    """Built-in handlers in registration order."""
    return [
        CreateNetworkHandler(),
        CreateContainerHandler(),
        CreateVolumeHandler(),
        RunContainerHandler(),
        PullImageHandler(timeout_seconds=pull_timeout_seconds),
    ]
