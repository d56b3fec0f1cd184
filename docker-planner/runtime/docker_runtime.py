"""Docker Runtime - Container runtime backed by the Docker Engine SDK.

The Docker SDK is blocking, so every call runs in a worker thread to keep
the event loop free for concurrent requests.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Any, Callable

import docker
from docker.errors import DockerException
from docker.utils import parse_repository_tag

from .base import ContainerRuntime, ContainerRuntimeError, ContainerState, ProjectResources

logger = logging.getLogger(__name__)


class DockerRuntime(ContainerRuntime):
    """Runtime for a local or remote Docker Engine."""

    def __init__(self, base_url: Optional[str] = None, client: Optional[docker.DockerClient] = None):
        super().__init__()
        self.name = "docker"
        self._base_url = base_url
        self._client = client

    async def initialize(self) -> None:
        """Create the Docker client with API version negotiation."""
        if self._client is None:
            try:
                if self._base_url:
                    self._client = docker.DockerClient(base_url=self._base_url, version="auto")
                else:
                    self._client = docker.from_env(version="auto")
            except DockerException as e:
                logger.error(f"Failed to create Docker client: {e}")
                raise ContainerRuntimeError(f"failed to create Docker client: {e}") from e

        self._available = True
        self._initialized = True
        logger.info("Docker runtime initialized")

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            raise ContainerRuntimeError("Docker client not initialized")
        return self._client

    async def _run(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a blocking SDK call in a thread, normalizing SDK errors."""
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except DockerException as e:
            raise ContainerRuntimeError(str(e)) from e

    async def create_network(
        self, name: str, driver: Optional[str] = None, labels: Optional[Dict[str, str]] = None
    ) -> str:
        network = await self._run(self.client.networks.create, name, driver=driver, labels=labels or None)
        logger.info(f"Created network {name} ({network.id[:12]})")
        return network.id

    async def create_volume(
        self, name: str, driver: Optional[str] = None, labels: Optional[Dict[str, str]] = None
    ) -> str:
        kwargs = {"name": name}
        if driver:
            kwargs["driver"] = driver
        if labels:
            kwargs["labels"] = labels
        volume = await self._run(self.client.volumes.create, **kwargs)
        logger.info(f"Created volume {volume.name}")
        return volume.name

    async def create_container(
        self,
        name: str,
        image: str,
        environment: Optional[Dict[str, str]] = None,
        volumes: Optional[List[str]] = None,
        networks: Optional[List[str]] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> str:
        api = self.client.api
        networks = networks or []

        def _create() -> str:
            host_config = api.create_host_config(binds=volumes or None)
            networking_config = None
            if networks:
                # Older engines accept a single endpoint at create time
                networking_config = api.create_networking_config(
                    {networks[0]: api.create_endpoint_config()}
                )
            response = api.create_container(
                image=image,
                name=name,
                environment=environment or None,
                labels=labels or None,
                host_config=host_config,
                networking_config=networking_config,
            )
            container_id = response["Id"]
            for network_name in networks[1:]:
                api.connect_container_to_network(container_id, network_name)
            return container_id

        container_id = await self._run(_create)
        logger.info(f"Created container {name} ({container_id[:12]}) from {image}")
        return container_id

    async def inspect_container(self, name: str) -> ContainerState:
        data = await self._run(self.client.api.inspect_container, name)
        return ContainerState(
            id=data["Id"],
            name=data.get("Name", name).lstrip("/"),
            running=bool(data.get("State", {}).get("Running", False)),
        )

    async def start_container(self, container_id: str) -> None:
        await self._run(self.client.api.start, container_id)
        logger.info(f"Started container {container_id[:12]}")

    async def pull_image(self, reference: str) -> None:
        repository, tag = parse_repository_tag(reference)
        # An empty tag would pull every tag of the repository
        tag = tag or "latest"

        def _pull() -> None:
            stream = self.client.api.pull(repository, tag=tag, stream=True, decode=True)
            for event in stream:
                if "error" in event:
                    raise ContainerRuntimeError(event["error"])

        await self._run(_pull)
        logger.info(f"Pulled image {repository}:{tag}")

    async def list_project_resources(self, label: str) -> ProjectResources:
        api = self.client.api
        filters = {"label": label}

        def _list() -> ProjectResources:
            containers = []
            for c in api.containers(all=True, filters=filters):
                names = c.get("Names") or []
                containers.append({
                    "name": names[0] if names else "",
                    "image": {"id": c.get("ImageID"), "tags": [c.get("Image")]},
                    "status": c.get("Status"),
                    "id": c.get("Id"),
                    "ports": c.get("Ports") or [],
                })

            volumes = [
                {"name": v["Name"], "id": v["Name"]}
                for v in (api.volumes(filters=filters).get("Volumes") or [])
            ]

            networks = []
            for n in api.networks(filters=filters):
                networks.append({
                    "name": n.get("Name"),
                    "id": n.get("Id"),
                    "containers": [{"id": cid} for cid in (n.get("Containers") or {})],
                })

            return ProjectResources(containers=containers, volumes=volumes, networks=networks)

        return await self._run(_list)

    async def health_check(self) -> bool:
        """Check if the Docker daemon answers a ping."""
        if not self._client or not self._available:
            return False
        try:
            return bool(await self._run(self.client.ping))
        except ContainerRuntimeError as e:
            logger.warning(f"Docker health check failed: {e}")
            return False

    async def shutdown(self) -> None:
        if self._client is not None:
            await asyncio.to_thread(self._client.close)
            self._client = None
        await super().shutdown()
