"""Spring Boot projects generated from a Spring Initializr archive."""

from __future__ import annotations

import asyncio
import io
import os
import re
import shutil
import tarfile
from pathlib import Path
from typing import Any

import httpx

from multitech.errors import GeneratorError
from multitech.utils import console, print_info, print_success

from .base import Builder, BuildContext

CONTROLLER_SNIPPET = "_snippets/springboot/HelloController.java.j2"


def java_package(group_id: str, project_name: str) -> str:
    """Java package for a project (``net.example`` + ``My-App`` -> ``net.example.myapp``)."""
    return f"{group_id}.{re.sub(r'[^a-z0-9_]', '', project_name.lower())}"


def find_java_home() -> str:
    """Locate a JDK: ``JAVA_HOME`` when set, else two levels above ``java``.

    Raises:
        GeneratorError: If no JDK can be found.
    """
    if os.environ.get("JAVA_HOME"):
        return os.environ["JAVA_HOME"]
    java = shutil.which("java")
    if java is None:
        raise GeneratorError("No Java runtime found. Install a JDK or set JAVA_HOME.")
    return str(Path(java).resolve().parent.parent)


class SpringInitializrBuilder(Builder):
    """Downloads and unpacks a Spring Initializr project, then adds a controller."""

    def __init__(self, context: BuildContext) -> None:
        super().__init__(context)
        self.spring = context.config.spring
        self.package_name = java_package(self.spring.group_id, context.request.name)

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def query_params(self) -> dict[str, str]:
        name = self.context.request.name
        return {
            "type": self.spring.project_type,
            "language": self.spring.language,
            "javaVersion": self.spring.java_version,
            "bootVersion": self.spring.boot_version,
            "packaging": self.spring.packaging,
            "groupId": self.spring.group_id,
            "artifactId": name,
            "name": name,
            "packageName": self.package_name,
            "dependencies": ",".join(self.spring.dependencies),
        }

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` with the configured download timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.spring.timeout, connect=10.0),
            follow_redirects=True,
        )

    async def download(self) -> io.BytesIO:
        """Fetch the project archive.

        Raises:
            GeneratorError: On a non-success status or a transport error.
        """
        buffer = io.BytesIO()
        try:
            async with self._client() as client:
                async with client.stream(
                    "GET", self.spring.base_url, params=self.query_params()
                ) as response:
                    if response.status_code != 200:
                        raise GeneratorError(
                            "Failed to download Spring Boot project: "
                            f"HTTP {response.status_code} {response.reason_phrase}"
                        )
                    async for chunk in response.aiter_bytes():
                        buffer.write(chunk)
        except httpx.TimeoutException:
            raise GeneratorError(
                f"Spring Initializr download timed out after {self.spring.timeout}s."
            ) from None
        except httpx.HTTPError as exc:
            raise GeneratorError(f"Download error: {exc}") from exc
        buffer.seek(0)
        return buffer

    def extract(self, archive: io.BytesIO) -> None:
        try:
            with tarfile.open(fileobj=archive, mode="r:gz") as tar:
                tar.extractall(self.project_dir, filter="data")
        except (tarfile.TarError, OSError) as exc:
            raise GeneratorError(f"Extraction error: {exc}") from exc

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    @property
    def java_source_dir(self) -> Path:
        return self.project_dir.joinpath("src", "main", "java", *self.package_name.split("."))

    def wrapper_command(self) -> list[str]:
        if os.name == "nt":
            return [str(self.project_dir / "mvnw.cmd"), "wrapper:wrapper"]
        return ["./mvnw", "wrapper:wrapper"]

    async def build(self) -> Path:
        name = self.context.request.name

        self.step(f"Initialising SpringBoot project: {name}")
        console.print("Downloading Spring Boot project...")
        print_info(f"Spring Initializr: {self.spring.base_url} (package {self.package_name})")
        archive = await self.download()

        self.project_dir.mkdir()
        await asyncio.to_thread(self.extract, archive)
        print_success("Spring Boot project created successfully.")

        mvnw = self.project_dir / "mvnw"
        if mvnw.is_file():
            mvnw.chmod(mvnw.stat().st_mode | 0o111)

        console.print("Generating missing Maven wrapper files...")
        await self.run(self.wrapper_command(), self.project_dir, env=self.java_env())

        self.step("Creating suggested folder structure")
        self.create_suggested_folders(self.java_source_dir)

        self.step("Preparing the base project")
        await self.context.renderer.render_to_file(
            CONTROLLER_SNIPPET,
            self.java_source_dir / "controller" / "HelloController.java",
            self.template_context(),
        )
        return self.project_dir

    def template_context(self) -> dict[str, Any]:
        return self.context.template_context(package_name=self.package_name)

    def java_env(self) -> dict[str, str]:
        return {"JAVA_HOME": find_java_home()}

    async def start_dev_server(self, env: dict[str, str] | None = None) -> None:
        if self.context.config.start_dev_server:
            env = {**self.java_env(), **(env or {})}
        await super().start_dev_server(env)
