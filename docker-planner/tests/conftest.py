"""Pytest configuration and fixtures for plan execution tests."""

import asyncio
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from plan_execution import (  # noqa: E402
    BaseToolHandler,
    InvalidParametersError,
    PlanExecutor,
    ToolRegistry,
    build_default_registry,
)
from runtime import (  # noqa: E402
    ContainerRuntime,
    ContainerRuntimeError,
    ContainerState,
    ProjectResources,
)


class FakeRuntime(ContainerRuntime):
    """In-memory runtime that records every call."""

    def __init__(
        self,
        running: Iterable[str] = (),
        fail_on: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        super().__init__()
        self.name = "fake"
        self.calls: List[tuple] = []
        self.running = set(running)
        self.fail_on = dict(fail_on or {})
        self.delays = dict(delays or {})
        self.resources = ProjectResources()
        self.labels: Dict[str, Dict[str, str]] = {}
        self._available = True

    async def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.delays:
            await asyncio.sleep(self.delays[operation])
        if operation in self.fail_on:
            raise ContainerRuntimeError(self.fail_on[operation])

    async def create_network(self, name, driver=None, labels=None):
        await self._record("create_network", name)
        self.labels[name] = labels
        return f"net-{name}"

    async def create_volume(self, name, driver=None, labels=None):
        await self._record("create_volume", name)
        self.labels[name] = labels
        return name

    async def create_container(self, name, image, environment=None, volumes=None, networks=None, labels=None):
        await self._record("create_container", name, image, environment, volumes, networks)
        self.labels[name] = labels
        return f"id-{name}"

    async def inspect_container(self, name):
        await self._record("inspect_container", name)
        return ContainerState(id=f"id-{name}", name=name, running=name in self.running)

    async def start_container(self, container_id):
        await self._record("start_container", container_id)

    async def pull_image(self, reference):
        await self._record("pull_image", reference)

    async def list_project_resources(self, label):
        await self._record("list_project_resources", label)
        return self.resources

    async def health_check(self):
        return True

    @property
    def operations(self) -> List[str]:
        return [call[0] for call in self.calls]


class RecordingHandler(BaseToolHandler):
    """Handler appending its name to a shared log, optionally failing."""

    def __init__(self, name: str, log: List[str], error: Optional[Exception] = None):
        self.name = name
        self.description = f"Recording handler {name}"
        self.log = log
        self.error = error

    async def execute(self, context, runtime, parameters):
        self.log.append(self.name)
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_runtime():
    return FakeRuntime()


@pytest.fixture
def registry():
    """Frozen registry with the built-in Docker tools."""
    return build_default_registry()


@pytest.fixture
def executor(registry, fake_runtime):
    return PlanExecutor(registry, fake_runtime, timeout_seconds=5.0)


@pytest.fixture
def invocation_log():
    return []


@pytest.fixture
def recording_registry(invocation_log):
    """Registry of recording handlers; ``step_fail`` raises a validation error."""
    registry = ToolRegistry()
    for name in ("step_a", "step_b", "step_c", "step_d"):
        registry.register_handler(RecordingHandler(name, invocation_log))
    registry.register_handler(
        RecordingHandler("step_fail", invocation_log, InvalidParametersError("missing name"))
    )
    registry.register_handler(
        RecordingHandler("step_crash", invocation_log, ContainerRuntimeError("network unreachable"))
    )
    registry.freeze()
    return registry
