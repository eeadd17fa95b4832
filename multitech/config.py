"""Multi-techs utility configuration.

Centralised, typed configuration for every generator.  All settings use
Pydantic v2 models so they are validated at construction time and can be
read from a JSON file or from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class DockerConfig(BaseModel):
    """Settings shared by every containerised technology."""

    network_name: str = Field(default="multitech-common-network")
    network_subnet: str = Field(default="172.40.0.0/16")
    poll_interval: float = Field(
        default=3.0, gt=0, description="Seconds between two container health probes"
    )
    health_timeout: int = Field(
        default=60, ge=1, description="Default seconds to wait for a healthy container"
    )


class SpringConfig(BaseModel):
    """Spring Initializr request parameters."""

    base_url: str = Field(default="https://start.spring.io/starter.tgz")
    group_id: str = Field(default="net.maquestiaux")
    java_version: str = Field(default="21")
    boot_version: str = Field(default="3.4.3")
    project_type: str = Field(default="maven-project")
    language: str = Field(default="java")
    packaging: str = Field(default="jar")
    dependencies: list[str] = Field(default=["web", "devtools"])
    timeout: int = Field(default=120, ge=5, description="Download timeout in seconds")


class Config(BaseModel):
    """Global configuration.

    Created once by the CLI entry point and passed explicitly to the
    generators; nothing reads configuration from ambient state.
    """

    root_dir: Path = Field(default_factory=Path.cwd)
    generated_dir: str = Field(default="__GEN_PROJECTS")
    command_timeout: int | None = Field(
        default=None, ge=1, description="Per-command timeout in seconds (None = unbounded)"
    )
    start_dev_server: bool = Field(default=False)
    docker: DockerConfig = Field(default_factory=DockerConfig)
    spring: SpringConfig = Field(default_factory=SpringConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def generated_path(self) -> Path:
        """Root of every generated project (``<root>/__GEN_PROJECTS``)."""
        return self.root_dir / self.generated_dir

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration from a JSON file.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``Config`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            MULTITECH_ROOT_DIR, MULTITECH_GENERATED_DIR, MULTITECH_COMMAND_TIMEOUT,
            MULTITECH_NETWORK, MULTITECH_NETWORK_SUBNET, MULTITECH_POLL_INTERVAL,
            MULTITECH_HEALTH_TIMEOUT, MULTITECH_SPRING_URL, MULTITECH_GROUP_ID,
            MULTITECH_JAVA_VERSION, MULTITECH_BOOT_VERSION.
        """
        docker_kwargs: dict[str, Any] = {}
        if os.environ.get("MULTITECH_NETWORK"):
            docker_kwargs["network_name"] = os.environ["MULTITECH_NETWORK"]
        if os.environ.get("MULTITECH_NETWORK_SUBNET"):
            docker_kwargs["network_subnet"] = os.environ["MULTITECH_NETWORK_SUBNET"]
        if os.environ.get("MULTITECH_POLL_INTERVAL"):
            docker_kwargs["poll_interval"] = os.environ["MULTITECH_POLL_INTERVAL"]
        if os.environ.get("MULTITECH_HEALTH_TIMEOUT"):
            docker_kwargs["health_timeout"] = os.environ["MULTITECH_HEALTH_TIMEOUT"]

        spring_kwargs: dict[str, Any] = {}
        if os.environ.get("MULTITECH_SPRING_URL"):
            spring_kwargs["base_url"] = os.environ["MULTITECH_SPRING_URL"]
        if os.environ.get("MULTITECH_GROUP_ID"):
            spring_kwargs["group_id"] = os.environ["MULTITECH_GROUP_ID"]
        if os.environ.get("MULTITECH_JAVA_VERSION"):
            spring_kwargs["java_version"] = os.environ["MULTITECH_JAVA_VERSION"]
        if os.environ.get("MULTITECH_BOOT_VERSION"):
            spring_kwargs["boot_version"] = os.environ["MULTITECH_BOOT_VERSION"]

        kwargs: dict[str, Any] = {}
        if os.environ.get("MULTITECH_ROOT_DIR"):
            kwargs["root_dir"] = Path(os.environ["MULTITECH_ROOT_DIR"])
        if os.environ.get("MULTITECH_GENERATED_DIR"):
            kwargs["generated_dir"] = os.environ["MULTITECH_GENERATED_DIR"]
        if os.environ.get("MULTITECH_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = os.environ["MULTITECH_COMMAND_TIMEOUT"]

        return cls(
            docker=DockerConfig(**docker_kwargs),
            spring=SpringConfig(**spring_kwargs),
            **kwargs,
        )
