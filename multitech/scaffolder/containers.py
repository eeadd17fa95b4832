"""Docker-backed technologies: shared network, image, compose and health wait.

The compose templates join an external network whose name comes from the
``MULTITECH_NETWORK`` variable (falling back to ``multitech-common-network``);
:meth:`ContainerController.bring_up` passes the configured name through the
environment so templates never need rewriting.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from multitech.config import DockerConfig
from multitech.errors import CommandError, ContainerHealthTimeout, GeneratorError
from multitech.utils import (
    console,
    print_info,
    print_success,
    print_warning,
    run_checked,
    run_command,
)

from .base import Builder
from .templates import copy_templates


class ContainerController:
    """Drives the ``docker`` CLI for one project directory."""

    def __init__(
        self,
        project_dir: str | Path,
        docker: DockerConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.docker = docker
        self._clock = clock
        self._sleep = sleep

    @property
    def compose_env(self) -> dict[str, str]:
        return {"MULTITECH_NETWORK": self.docker.network_name}

    async def ensure_shared_network(self) -> bool:
        """Create the shared bridge network unless it already exists.

        Failures are reported as warnings; the compose step surfaces any
        real problem.

        Returns:
            ``True`` if the network was created by this call.
        """
        name = self.docker.network_name
        rc, out, err = await run_command(
            ["docker", "network", "ls", "--filter", "driver=bridge", "--format", "{{.Name}}"]
        )
        if rc != 0:
            print_warning(f"Could not list docker networks: {err}")
            return False
        if name in {line.strip() for line in out.splitlines()}:
            print_info(f"Network '{name}' already exists. Skipping creation.")
            return False

        rc, _, err = await run_command(
            [
                "docker", "network", "create",
                "--driver", "bridge",
                "--subnet", self.docker.network_subnet,
                name,
            ]
        )
        if rc != 0:
            print_warning(f"Could not create network '{name}': {err}")
            return False
        print_success(f"Network '{name}' created.")
        return True

    async def ensure_image(self, image: str) -> bool:
        """Build *image* from the project's Dockerfile if it is not present locally.

        Returns:
            ``True`` if the image was built.
        """
        cmd = ["docker", "images", "-q", image]
        rc, out, err = await run_command(cmd)
        if rc != 0:
            raise CommandError(cmd, rc, err)
        if out.strip():
            print_info(f"Image '{image}' already exists. Skipping build.")
            return False

        console.print(f"Building image '{image}'...")
        await run_checked(
            ["docker", "build", "--no-cache", "-t", image, "."], cwd=self.project_dir
        )
        return True

    async def bring_up(self) -> None:
        await run_checked(
            ["docker", "compose", "up", "--build", "-d"],
            cwd=self.project_dir,
            env=self.compose_env,
        )

    async def container_health(self, name: str) -> str | None:
        """Return the health status of the running container *name*.

        ``None`` means the container is not running yet or could not be
        inspected.
        """
        rc, out, _ = await run_command(["docker", "ps", "-q", "--filter", f"name={name}"])
        ids = out.split()
        if rc != 0 or not ids:
            return None
        rc, out, _ = await run_command(
            ["docker", "inspect", "--format", "{{.State.Health.Status}}", ids[0]]
        )
        if rc != 0:
            return None
        return out.strip() or None

    async def wait_healthy(self, name: str, timeout: float) -> float:
        """Poll until *name* reports ``healthy``.

        Returns:
            Seconds waited.

        Raises:
            ContainerHealthTimeout: If more than *timeout* seconds elapse.
        """
        start = self._clock()
        while True:
            status = await self.container_health(name)
            elapsed = self._clock() - start
            if status == "healthy":
                return elapsed
            if elapsed > timeout:
                raise ContainerHealthTimeout(name, timeout)
            print_info(f"Waiting for container to start... ({status or 'not running'})")
            await self._sleep(self.docker.poll_interval)


def open_permissions(root: Path) -> None:
    """``chmod 0o777`` every directory and file below *root* (best effort)."""
    if os.name == "nt":
        print_info("Skipping permission change on Windows.")
        return
    try:
        paths = [root, *root.rglob("*")]
        for path in paths:
            path.chmod(0o777)
    except OSError as exc:
        print_warning(f"Could not open permissions on {root}: {exc}")


class ContainerBuilder(Builder):
    """Copies the compose templates and starts the container."""

    def controller(self) -> ContainerController:
        return ContainerController(self.project_dir, self.context.config.docker)

    async def build(self) -> Path:
        tech = self.technology
        spec = tech.container
        if spec is None:
            raise GeneratorError(f"{tech.name} has no container definition")

        self.step(f"Initialising {tech.name} project: {self.context.request.name}")
        self.project_dir.mkdir()
        for data_dir in spec.data_dirs:
            (self.project_dir / data_dir).mkdir(parents=True, exist_ok=True)

        for copied in copy_templates(self.context.paths.templates_dir, self.project_dir, tech.templates):
            console.print(f"  Copied {copied.name}")
        if spec.open_permissions:
            open_permissions(self.project_dir)

        self.step(f"Starting {tech.name} container")
        controller = self.controller()
        await controller.ensure_shared_network()
        if spec.image:
            await controller.ensure_image(spec.image)
        await controller.bring_up()

        console.print("Waiting for the container to become healthy...")
        waited = await controller.wait_healthy(spec.name, spec.health_timeout)
        print_success(f"Container '{spec.name}' is healthy after {waited:.0f}s.")
        return self.project_dir
