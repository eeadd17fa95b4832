"""Exceptions raised while scaffolding a project.

Every error derives from :class:`MultitechError` so the CLI can report it and
exit with status 1 without catching unrelated exceptions.
"""

from __future__ import annotations


class MultitechError(Exception):
    """Base class for all scaffolding failures."""


class InvalidProjectNameError(MultitechError):
    """Raised when a project name fails validation."""


class UnknownTechnologyError(MultitechError):
    """Raised when a technology or category is not in the registry."""


class ProjectExistsError(MultitechError):
    """Raised when the target project directory already exists."""

    def __init__(self, project_dir: object) -> None:
        self.project_dir = project_dir
        super().__init__(f"Project directory already exists: {project_dir}")


class CommandError(MultitechError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed (exit {returncode}): {' '.join(command)}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class GeneratorError(MultitechError):
    """Raised when a project generator cannot complete."""


class ContainerHealthTimeout(MultitechError):
    """Raised when a container does not report ``healthy`` in time."""

    def __init__(self, container: str, timeout: float) -> None:
        self.container = container
        self.timeout = timeout
        super().__init__(
            f"Container '{container}' did not become healthy within {timeout:g}s"
        )
