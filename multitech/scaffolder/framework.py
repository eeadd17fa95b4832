"""Builder for technologies scaffolded by their own command-line generator."""

from __future__ import annotations

from pathlib import Path

from multitech.errors import GeneratorError
from multitech.utils import print_info

from .base import Builder
from .boilerplate import get_customiser


class FrameworkCliBuilder(Builder):
    """Runs a framework's generator, then layers the boilerplate edits on top.

    Steps: create commands, setup commands, ``configure`` hook, suggested
    folders, ``customise`` hook.
    """

    async def build(self) -> Path:
        tech = self.technology
        name = self.context.request.name
        customiser = get_customiser(tech.id)

        self.step(f"Initialising {tech.name} project: {name}")
        if tech.create_in == "project":
            self.project_dir.mkdir()
            cwd = self.project_dir
        else:
            cwd = self.context.paths.tech_dir
        for cmd in tech.create_commands:
            await self.run(cmd, cwd)

        if not self.project_dir.is_dir():
            raise GeneratorError(
                f"{tech.name} generator finished without creating {self.project_dir}"
            )

        self.step(f"Setting up {tech.name} project")
        for cmd in tech.setup_commands:
            await self.run(cmd, self.project_dir)
        if customiser.configure is not None:
            customiser.configure(self.patcher, self.context)

        self.step("Creating suggested folder structure")
        self.create_suggested_folders()

        self.step("Preparing the base project")
        if customiser.customise is not None:
            customiser.customise(self.patcher, self.context)
        edited = dict.fromkeys(
            path.relative_to(self.project_dir).as_posix() for path in self.patcher.touched
        )
        if edited:
            print_info(f"Edited {len(edited)} generated files: {', '.join(edited)}")

        return self.project_dir
