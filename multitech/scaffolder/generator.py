"""Project generator: dispatches a request to the builder for its technology."""

from __future__ import annotations

import time
from pathlib import Path

from rich.panel import Panel

from multitech.config import Config
from multitech.errors import GeneratorError, ProjectExistsError
from multitech.project import ProjectRequest, assemble_paths
from multitech.registry import Category, Registry, load_registry
from multitech.utils import (
    console,
    format_duration,
    print_info,
    print_success,
    print_summary_table,
)

from .base import BuildContext, Builder
from .containers import ContainerBuilder
from .framework import FrameworkCliBuilder
from .springboot import SpringInitializrBuilder
from .templates import TemplateRenderer

BUILDERS: dict[str, type[Builder]] = {
    "framework-cli": FrameworkCliBuilder,
    "container": ContainerBuilder,
    "spring-initializr": SpringInitializrBuilder,
}


class ProjectGenerator:
    """Creates one project per :meth:`generate` call.

    Args:
        config: Global configuration (root directory, docker and Spring settings).
        registry: Technology catalogue; defaults to the packaged one.
        renderer: Snippet renderer; defaults to the packaged templates.
    """

    def __init__(
        self,
        config: Config,
        registry: Registry | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.registry = registry if registry is not None else load_registry()
        self.renderer = renderer or TemplateRenderer()
        self.serving = False

    def request(
        self, name: str | None, tech: str, category: Category | str | None = None
    ) -> ProjectRequest:
        """Validate *name* and resolve *tech* (optionally within *category*)."""
        return ProjectRequest.from_input(name, self.registry.get(tech, category))

    async def create(
        self, name: str | None, tech: str, category: Category | str | None = None
    ) -> Path:
        """Validate the input, then :meth:`generate` the project."""
        return await self.generate(self.request(name, tech, category))

    def builder_for(self, request: ProjectRequest) -> type[Builder]:
        tech = request.technology
        builder_cls = BUILDERS.get(tech.generator)
        if builder_cls is None:
            raise GeneratorError(f"{tech.name} projects are not available yet.")
        return builder_cls

    async def generate(self, request: ProjectRequest) -> Path:
        """Scaffold the project described by *request*.

        Returns:
            The project directory.

        Raises:
            ProjectExistsError: If the project directory is already present.
            MultitechError: Any failure of the technology builder.
        """
        tech = request.technology
        builder_cls = self.builder_for(request)
        paths = assemble_paths(self.config, request)
        if paths.project_dir.exists():
            raise ProjectExistsError(paths.project_dir)

        console.print(
            Panel(
                f"[bold bright_cyan]Creating {tech.name} project[/bold bright_cyan]\n"
                f"Project  : {request.name}\n"
                f"Category : {tech.category.label}\n"
                f"Location : {paths.project_dir}",
                title="[bold]multitech[/bold]",
                border_style="bright_cyan",
            )
        )

        start = time.monotonic()
        builder = builder_cls(BuildContext(self.config, request, paths, renderer=self.renderer))
        project_dir = await builder.build()
        elapsed = time.monotonic() - start

        console.print()
        print_success(f"Project setup completed and ready at {project_dir}")
        print_summary_table(
            {
                "Project": request.title,
                "Technology": tech.name,
                "Location": paths.relative_project_dir,
                "Duration": format_duration(elapsed),
            },
            title="Project Summary",
        )
        for note in tech.notes:
            print_info(note)
        if tech.dev_command and not self.config.start_dev_server:
            print_info("Start the development server with:")
            console.print(f"  cd ./{paths.relative_project_dir}")
            console.print(f"  {' '.join(tech.dev_command)}")
        print_success("Happy coding!")

        self.serving = bool(self.config.start_dev_server and tech.dev_command)
        await builder.start_dev_server()
        return project_dir
