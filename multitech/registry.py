"""Technology descriptors and the read-only registry that holds them.

The catalogue of scaffoldable technologies lives in ``catalog.yaml`` next to
this module.  It is loaded once by :func:`load_registry` and the resulting
:class:`Registry` is handed to whoever needs a lookup; there is no global
mutable table.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from multitech.errors import UnknownTechnologyError

_DEFAULT_CATALOG = Path(__file__).parent / "catalog.yaml"


class Category(str, Enum):
    """Technology families, each with its own folder under ``__GEN_PROJECTS``."""

    WEB = "web"
    MOBILE = "mobile"
    BACKEND = "backend"
    DATABASE = "database"

    @property
    def root(self) -> str:
        """Relative folder used for this category (``guis/web``, ``backends``...)."""
        return _CATEGORY_ROOTS[self]

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_ROOTS: dict[Category, str] = {
    Category.WEB: "guis/web",
    Category.MOBILE: "guis/mobile",
    Category.BACKEND: "backends",
    Category.DATABASE: "databases",
}

_CATEGORY_LABELS: dict[Category, str] = {
    Category.WEB: "Web Technologies",
    Category.MOBILE: "Mobile Technologies",
    Category.BACKEND: "Backend Technologies",
    Category.DATABASE: "Database Technologies",
}

# Verb prefix used by the namespaced CLI commands (``guis:web:angular``).
_VERB_PREFIXES: dict[Category, str] = {
    Category.WEB: "guis:web:",
    Category.MOBILE: "guis:mobile:",
    Category.BACKEND: "backends:",
    Category.DATABASE: "databases:",
}

GeneratorKind = Literal["framework-cli", "container", "spring-initializr", "planned"]


class FolderSpec(BaseModel):
    """A suggested sub-folder and the header written to its README."""

    model_config = ConfigDict(frozen=True)

    name: str
    readme_header: str


class ContainerSpec(BaseModel):
    """How a containerised technology is brought up and awaited."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Container name polled for health")
    image: str | None = Field(
        default=None, description="Local image built with docker build when absent"
    )
    health_timeout: int = Field(default=60, ge=1)
    data_dirs: tuple[str, ...] = Field(default=())
    open_permissions: bool = Field(
        default=False, description="chmod 0o777 the project tree (bind-mounted volumes)"
    )


class TechnologyDescriptor(BaseModel):
    """Static record describing one scaffoldable technology."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., description="Human-readable name (e.g. 'ReactJs')")
    category: Category
    description: str
    documentation: str
    generator: GeneratorKind
    create_in: Literal["tech", "project"] = Field(
        default="tech",
        description="Run create commands in the technology folder (the tool makes "
        "the project folder) or inside a freshly created project folder",
    )
    create_commands: tuple[tuple[str, ...], ...] = Field(default=())
    setup_commands: tuple[tuple[str, ...], ...] = Field(default=())
    folders_root: str = Field(default="src")
    folders: tuple[FolderSpec, ...] = Field(default=())
    templates: tuple[str, ...] = Field(default=())
    container: ContainerSpec | None = None
    dev_command: tuple[str, ...] = Field(default=())
    notes: tuple[str, ...] = Field(default=())

    @property
    def verb(self) -> str:
        """Namespaced CLI verb, e.g. ``guis:web:angular``."""
        return f"{_VERB_PREFIXES[self.category]}{self.id}"


class Registry:
    """Immutable lookup table of technology descriptors."""

    def __init__(self, technologies: Mapping[str, TechnologyDescriptor]) -> None:
        self._technologies = MappingProxyType(dict(technologies))

    def __contains__(self, tech: object) -> bool:
        return tech in self._technologies

    def __iter__(self):
        return iter(self._technologies.values())

    def __len__(self) -> int:
        return len(self._technologies)

    def find(self, tech: str) -> TechnologyDescriptor | None:
        """Return the descriptor for *tech* or ``None``."""
        return self._technologies.get(tech)

    def get(self, tech: str, category: Category | str | None = None) -> TechnologyDescriptor:
        """Return the descriptor for *tech*, optionally restricted to *category*.

        Raises:
            UnknownTechnologyError: If the technology or category is unknown, or
                the technology belongs to another category.
        """
        wanted = parse_category(category) if category is not None else None
        descriptor = self._technologies.get(tech)
        if descriptor is None or (wanted is not None and descriptor.category is not wanted):
            scope = f"{wanted.value} " if wanted is not None else ""
            available = ", ".join(d.id for d in self.by_category(wanted)) if wanted else ""
            message = f"Unknown {scope}technology: {tech}"
            if available:
                message += f" (available: {available})"
            raise UnknownTechnologyError(message)
        return descriptor

    def by_category(self, category: Category | str | None) -> list[TechnologyDescriptor]:
        """Return the descriptors of one category (all of them for ``None``)."""
        if category is None:
            return list(self._technologies.values())
        wanted = parse_category(category)
        return [d for d in self._technologies.values() if d.category is wanted]

    def categories(self) -> list[Category]:
        """Return the categories that hold at least one technology, in order."""
        present = {d.category for d in self._technologies.values()}
        return [c for c in Category if c in present]

    def from_verb(self, verb: str) -> TechnologyDescriptor | None:
        """Resolve a namespaced verb such as ``backends:springboot``."""
        for descriptor in self._technologies.values():
            if descriptor.verb == verb:
                return descriptor
        return None


def parse_category(value: Category | str) -> Category:
    """Convert a user-supplied category string to :class:`Category`.

    Raises:
        UnknownTechnologyError: If the value names no category.
    """
    if isinstance(value, Category):
        return value
    try:
        return Category(value.strip().lower())
    except ValueError:
        choices = ", ".join(c.value for c in Category)
        raise UnknownTechnologyError(
            f"Unknown category: {value} (available: {choices})"
        ) from None


def load_registry(path: str | Path | None = None) -> Registry:
    """Load and validate the technology catalogue.

    Args:
        path: YAML catalogue.  Defaults to the packaged ``catalog.yaml``.

    Returns:
        A read-only :class:`Registry`.
    """
    catalog_path = Path(path) if path is not None else _DEFAULT_CATALOG
    raw = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}

    technologies: dict[str, TechnologyDescriptor] = {}
    for tech_id, entry in (raw.get("technologies") or {}).items():
        technologies[tech_id] = TechnologyDescriptor.model_validate({"id": tech_id, **entry})
    return Registry(technologies)
