"""Building blocks shared by every technology builder.

A builder receives a :class:`BuildContext` and materialises one project.  The
steps it runs are strictly sequential: each external command is awaited to
completion before the next one starts, and each command gets an explicit
working directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from multitech.config import Config
from multitech.errors import CommandError
from multitech.project import ProjectRequest, ResolvedPaths, formatted_timestamp
from multitech.registry import FolderSpec, TechnologyDescriptor
from multitech.utils import console, print_step, run_checked

from .patcher import TextPatcher
from .templates import TemplateRenderer


@dataclass
class BuildContext:
    """Everything a builder needs for one project."""

    config: Config
    request: ProjectRequest
    paths: ResolvedPaths
    renderer: TemplateRenderer = field(default_factory=TemplateRenderer)
    timestamp: str = field(default_factory=formatted_timestamp)

    @property
    def technology(self) -> TechnologyDescriptor:
        return self.request.technology

    @property
    def title(self) -> str:
        return self.request.title

    def template_context(self, **extra: Any) -> dict[str, Any]:
        """Base Jinja2 context for snippets rendered for this project."""
        return {
            "project_name": self.request.name,
            "title": self.title,
            "timestamp": self.timestamp,
            "technology": self.technology.name,
            **extra,
        }


def create_folder_structure(
    base_path: str | Path,
    folders: tuple[FolderSpec, ...] | list[FolderSpec],
    with_readmes: bool = True,
) -> list[Path]:
    """Create the suggested folders, each with a ``README.md`` header.

    Returns:
        The folders in declaration order.
    """
    base = Path(base_path)
    created: list[Path] = []
    for folder in folders:
        folder_path = base / folder.name
        folder_path.mkdir(parents=True, exist_ok=True)
        if with_readmes:
            (folder_path / "README.md").write_text(f"{folder.readme_header}\n", encoding="utf-8")
        created.append(folder_path)
    return created


class Builder:
    """Base class for technology builders.

    Subclasses implement :meth:`build`; this class provides command
    execution, step headers and the folder structure step.
    """

    def __init__(self, context: BuildContext) -> None:
        self.context = context
        self.patcher = TextPatcher(context.paths.project_dir)
        self._step = 0

    @property
    def technology(self) -> TechnologyDescriptor:
        return self.context.technology

    @property
    def project_dir(self) -> Path:
        return self.context.paths.project_dir

    async def build(self) -> Path:
        """Generate the project and return its directory."""
        raise NotImplementedError

    # -- Helpers -------------------------------------------------------------

    def step(self, title: str) -> None:
        self._step += 1
        print_step(self._step, title)

    def expand(self, cmd: tuple[str, ...] | list[str]) -> list[str]:
        """Substitute ``{name}`` in catalogue command arguments."""
        return [part.replace("{name}", self.context.request.name) for part in cmd]

    async def run(
        self,
        cmd: tuple[str, ...] | list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> None:
        """Run an external generator command with inherited streams.

        Raises:
            CommandError: If the command fails; later steps do not run.
        """
        argv = self.expand(cmd)
        console.print(f"  [cyan]$[/cyan] {' '.join(argv)}  [dim]({cwd})[/dim]")
        await run_checked(argv, cwd=cwd, timeout=self.context.config.command_timeout, env=env)

    def create_suggested_folders(self, base: Path | None = None) -> list[Path]:
        """Create the descriptor's suggested folders under its folder root."""
        target = base or self.project_dir / self.technology.folders_root
        names = ", ".join(f.name for f in self.technology.folders)
        console.print(f"  {names}")
        return create_folder_structure(target, self.technology.folders, with_readmes=True)

    async def start_dev_server(self, env: dict[str, str] | None = None) -> None:
        """Run the development server in the foreground when requested."""
        if not (self.context.config.start_dev_server and self.technology.dev_command):
            return
        self.step("Starting the development server")
        try:
            await run_checked(list(self.technology.dev_command), cwd=self.project_dir, env=env)
        except CommandError as exc:
            # Ctrl+C on the dev server ends it with a non-zero status
            if exc.returncode in (130, -2):
                return
            raise
