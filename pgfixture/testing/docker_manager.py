"""
Docker Runtime

Creates, starts, inspects, stops and removes the ephemeral server containers.
"""

import logging
from typing import Any, Dict, List, Optional

import docker
from docker.models.containers import Container

from pgfixture.errors import ProvisionFailed, TeardownFailed
from pgfixture.testing.name_generator import random_string

logger = logging.getLogger(__name__)

# Every container we create carries this label so leaked ones can be swept.
MANAGED_LABEL = 'pgfixture.managed'


class DockerRuntime:
    """Launches PostgreSQL server containers with host-assigned ports."""

    def __init__(self, client: Optional[docker.DockerClient] = None):
        """
        Initialize Docker runtime.

        Args:
            client: Docker client; connects with ``docker.from_env()`` if omitted

        Raises:
            ProvisionFailed: If the Docker engine is unavailable
        """
        if client is None:
            try:
                client = docker.from_env()
            except docker.errors.DockerException as e:
                raise ProvisionFailed(f"Docker engine unavailable: {e}") from e
        self.client = client

    def create_server(
        self,
        image: str,
        environment: Optional[Dict[str, str]] = None,
        container_port: int = 5432,
        name_prefix: str = 'pgfixture'
    ) -> Container:
        """
        Create (but do not start) a server container.

        The container port is published on a port chosen by the host so
        concurrent test runs never collide. The image is pulled when it is
        not available locally.

        Raises:
            ProvisionFailed: If the image cannot be found or the container
                cannot be created
        """
        container_kwargs = {
            'image': image,
            'name': f"{name_prefix}_{random_string(12)}",
            'detach': True,
            'ports': {f'{container_port}/tcp': None},
            'environment': environment or {},
            'labels': {MANAGED_LABEL: 'true'}
        }

        try:
            container = self._create(container_kwargs)
        except docker.errors.DockerException as e:
            raise ProvisionFailed(f"Could not create container from {image}: {e}") from e
        logger.debug(f"Created container {container.name} from {image}")
        return container

    def _create(self, container_kwargs: Dict[str, Any]) -> Container:
        try:
            return self.client.containers.create(**container_kwargs)
        except docker.errors.ImageNotFound:
            logger.info(f"Pulling image {container_kwargs['image']}")
            self.client.images.pull(container_kwargs['image'])
            return self.client.containers.create(**container_kwargs)

    def start(self, container: Container):
        """
        Start a created container.

        Raises:
            ProvisionFailed: If the engine refuses to start it
        """
        try:
            container.start()
        except docker.errors.DockerException as e:
            raise ProvisionFailed(f"Could not start container {container.name}: {e}") from e
        logger.info(f"Started container {container.name} ({container.short_id})")

    def resolve_host_port(self, container: Container, container_port: int = 5432) -> int:
        """
        Look up the host port published for ``container_port``.

        Raises:
            ProvisionFailed: If the port is not published
        """
        try:
            container.reload()
            bindings = container.ports.get(f'{container_port}/tcp') or []
        except docker.errors.DockerException as e:
            raise ProvisionFailed(f"Could not inspect container {container.name}: {e}") from e

        for binding in bindings:
            host_port = binding.get('HostPort')
            if host_port:
                return int(host_port)
        raise ProvisionFailed(f"Failed to find published port {container_port} on {container.name}")

    def stop_and_remove(self, container: Container, timeout: int = 5):
        """
        Stop the container and remove it with its anonymous volumes.

        Removal is attempted even when stopping fails; a forced removal also
        kills a running container.

        Raises:
            TeardownFailed: If the container could not be removed
        """
        try:
            container.stop(timeout=timeout)
        except docker.errors.NotFound:
            logger.warning(f"Container {container.name} already gone before stop")
            return
        except docker.errors.DockerException as e:
            logger.warning(f"Failed to stop container {container.name}, forcing removal: {e}")

        try:
            container.remove(force=True, v=True)
        except docker.errors.NotFound:
            logger.warning(f"Container {container.name} already removed")
            return
        except docker.errors.DockerException as e:
            raise TeardownFailed(f"Failed to remove container {container.name}: {e}") from e
        logger.info(f"Removed container {container.name}")

    def exists(self, container_id: str) -> bool:
        """Check whether a container still exists."""
        try:
            self.client.containers.get(container_id)
        except docker.errors.NotFound:
            return False
        return True

    def list_managed(self) -> List[Container]:
        """List every container created by pgfixture, running or not."""
        return self.client.containers.list(all=True, filters={'label': f'{MANAGED_LABEL}=true'})
