"""Template handling for project scaffolding.

Two kinds of template live under ``multitech/scaffolder/templates/``:

* static files (``docker-compose.yml``, ``Dockerfile``, ...) in per-technology
  folders, copied byte-for-byte by :func:`copy_templates`;
* Jinja2 snippets under ``_snippets/`` (landing-page blocks, generated source
  files) rendered with project context by :class:`TemplateRenderer`.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from multitech.errors import GeneratorError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 snippets for generated projects.

    Snippets are looked up relative to the template directory (for example
    ``"_snippets/landing.html.j2"``) and rendered with a context dictionary
    holding the project title, the timestamp and technology specifics.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory.
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Static template copier
# ---------------------------------------------------------------------------


def copy_templates(source_dir: str | Path, dest_dir: str | Path, names: list[str] | tuple[str, ...]) -> list[Path]:
    """Copy named template files unmodified into *dest_dir*.

    File permissions are copied along with the content so shell scripts stay
    executable.

    Raises:
        GeneratorError: If a named template does not exist.
    """
    source = Path(source_dir)
    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name in names:
        template = source / name
        if not template.is_file():
            raise GeneratorError(f"Template file not found: {template}")
        target = dest / name
        shutil.copy2(template, target)
        written.append(target)
    return written


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
