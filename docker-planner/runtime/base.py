"""Base Container Runtime - Abstract interface for container platforms.

Action handlers talk to the container platform exclusively through this
interface, so the executor never depends on a specific SDK.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class ContainerRuntimeError(Exception):
    """Raised when the container platform rejects or fails an operation."""


@dataclass
class ContainerState:
    """Subset of container inspection data used by handlers."""
    id: str
    name: str
    running: bool


@dataclass
class ProjectResources:
    """Containers, volumes and networks carrying a project label."""
    containers: List[Dict[str, Any]] = field(default_factory=list)
    volumes: List[Dict[str, Any]] = field(default_factory=list)
    networks: List[Dict[str, Any]] = field(default_factory=list)


class ContainerRuntime(ABC):
    """
    Abstract base class for container runtimes.

    Constraints:
    - No parameter validation (handled by action handlers)
    - No retries (a single attempt per action)
    - Safe for concurrent callers
    """

    def __init__(self):
        self.name: str = "base"
        self._initialized: bool = False
        self._available: bool = False

    async def initialize(self) -> None:
        """
        Initialize the runtime.

        Override this to create SDK clients or verify connectivity.
        """
        self._initialized = True
        logger.info(f"Runtime {self.name} initialized")

    @abstractmethod
    async def create_network(
        self, name: str, driver: Optional[str] = None, labels: Optional[Dict[str, str]] = None
    ) -> str:
        """Create a network and return its ID."""
        pass

    @abstractmethod
    async def create_volume(
        self, name: str, driver: Optional[str] = None, labels: Optional[Dict[str, str]] = None
    ) -> str:
        """Create a volume and return its name."""
        pass

    @abstractmethod
    async def create_container(
        self,
        name: str,
        image: str,
        environment: Optional[Dict[str, str]] = None,
        volumes: Optional[List[str]] = None,
        networks: Optional[List[str]] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Create (but do not start) a container.

        Args:
            name: Container name
            image: Image reference
            environment: Environment variables
            volumes: Bind specifications, ``source:target[:mode]``
            networks: Networks to attach the container to
            labels: Labels set on the container

        Returns:
            The new container ID
        """
        pass

    @abstractmethod
    async def inspect_container(self, name: str) -> ContainerState:
        """Look up a container by name or ID."""
        pass

    @abstractmethod
    async def start_container(self, container_id: str) -> None:
        """Start a created container."""
        pass

    @abstractmethod
    async def pull_image(self, reference: str) -> None:
        """Pull an image, blocking until the pull completes."""
        pass

    @abstractmethod
    async def list_project_resources(self, label: str) -> ProjectResources:
        """List containers, volumes and networks filtered by ``label``."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the runtime backend is reachable.

        Returns:
            True if the runtime can accept requests
        """
        pass

    def is_available(self) -> bool:
        """Check if runtime is available."""
        return self._available

    def is_initialized(self) -> bool:
        """Check if runtime is initialized."""
        return self._initialized

    async def shutdown(self) -> None:
        """Release SDK clients."""
        self._initialized = False
        self._available = False
        logger.info(f"Runtime {self.name} shut down")
