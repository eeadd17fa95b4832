"""Project requests, name validation and on-disk path assembly."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from multitech.config import Config
from multitech.errors import InvalidProjectNameError
from multitech.registry import TechnologyDescriptor
from multitech.utils import ensure_dir

PROJECT_NAME_PATTERN = r"^[A-Za-z][A-Za-z0-9_-]*$"
MIN_NAME_LENGTH = 4
TIMESTAMP_FORMAT = "%d %b %Y %H:%M"

_TEMPLATES_ROOT = Path(__file__).parent / "scaffolder" / "templates"


def validate_project_name(name: str | None, min_length: int = MIN_NAME_LENGTH) -> str:
    """Return *name* unchanged if it is a valid project name.

    A valid name starts with a letter, contains only letters, digits, dashes
    and underscores, and is at least *min_length* characters long.

    Raises:
        InvalidProjectNameError: With a message telling the user what to fix.
    """
    if not name:
        raise InvalidProjectNameError("Invalid project name! A project name is required.")
    if not re.fullmatch(PROJECT_NAME_PATTERN, name):
        raise InvalidProjectNameError(
            f"Invalid project name '{name}'! It must start with a letter and contain "
            "only letters, numbers, dashes, and underscores."
        )
    if len(name) < min_length:
        raise InvalidProjectNameError(
            f"Project name is too short! It must be at least {min_length} characters."
        )
    return name


def format_project_title(text: str, capitalize: bool = True) -> str:
    """Turn a project name into display text.

    Examples::

        format_project_title("my-app")         -> "My App"
        format_project_title("big_shop", False) -> "big shop"
    """
    spaced = re.sub(r"[_-]", " ", text)
    if capitalize:
        return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)
    return spaced


def formatted_timestamp(moment: datetime | None = None) -> str:
    """Local creation time shown on generated landing pages (``19 Oct 2026 14:05``)."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


class ProjectRequest(BaseModel):
    """A validated project name paired with the technology to scaffold."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=MIN_NAME_LENGTH, pattern=PROJECT_NAME_PATTERN)
    technology: TechnologyDescriptor

    @classmethod
    def from_input(cls, name: str | None, technology: TechnologyDescriptor) -> "ProjectRequest":
        """Validate raw user input and build the request."""
        return cls(name=validate_project_name(name), technology=technology)

    @property
    def title(self) -> str:
        return format_project_title(self.name)


class ResolvedPaths(BaseModel):
    """Every location a generator needs for one project."""

    model_config = ConfigDict(frozen=True)

    root_dir: Path
    base_dir: Path
    tech_dir: Path
    project_dir: Path
    relative_project_dir: str
    templates_dir: Path


def assemble_paths(
    config: Config,
    request: ProjectRequest,
    templates_root: Path | None = None,
) -> ResolvedPaths:
    """Compute the project layout and create the folders above the project.

    The layout is ``<root>/<generated-dir>/<category-root>/<tech>/<name>``.
    The base and technology folders are created; the project folder itself is
    left to the generator.
    """
    tech = request.technology
    root_dir = Path(config.root_dir)
    base_dir = ensure_dir(config.generated_path)
    tech_dir = ensure_dir(base_dir / tech.category.root / tech.id)
    relative = "/".join([config.generated_dir, tech.category.root, tech.id, request.name])

    return ResolvedPaths(
        root_dir=root_dir,
        base_dir=base_dir,
        tech_dir=tech_dir,
        project_dir=tech_dir / request.name,
        relative_project_dir=relative,
        templates_dir=(templates_root or _TEMPLATES_ROOT) / tech.category.root / tech.id,
    )
