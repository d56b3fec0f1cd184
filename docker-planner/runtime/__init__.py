"""Container Runtimes - Platform clients used by action handlers."""

from typing import Optional

from .base import ContainerRuntime, ContainerRuntimeError, ContainerState, ProjectResources
from .docker_runtime import DockerRuntime


def create_runtime(base_url: Optional[str] = None) -> ContainerRuntime:
    """Create the default (Docker) runtime; call ``initialize()`` before use."""
    return DockerRuntime(base_url=base_url)


__all__ = [
    "ContainerRuntime",
    "ContainerRuntimeError",
    "ContainerState",
    "ProjectResources",
    "DockerRuntime",
    "create_runtime",
]
