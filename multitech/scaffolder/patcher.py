"""Find-and-replace edits on freshly generated framework boilerplate.

Each edit reads one file fully, applies its substitutions and writes the file
back.  A pattern that does not match leaves the file untouched; a file that
does not exist is an error.  Patches are not idempotent: applying the same
insertion twice inserts twice.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from multitech.errors import GeneratorError

Replacement = str | Callable[[re.Match[str]], str]


@dataclass(frozen=True)
class Substitution:
    """One regex (or literal) replacement.

    Attributes:
        pattern: Regular expression, or plain text when *literal* is set.
        replacement: Replacement text (``re.sub`` template syntax such as
            ``\\1`` is honoured for regexes) or a callable receiving the match.
        literal: Treat *pattern* and *replacement* as plain text.
        count: Maximum number of replacements; ``0`` replaces every match.
        flags: ``re`` flags for regex patterns.
    """

    pattern: str
    replacement: Replacement
    literal: bool = False
    count: int = 1
    flags: int = 0

    def apply(self, content: str) -> str:
        if self.literal:
            if callable(self.replacement):
                raise TypeError("Literal substitutions need a string replacement")
            return content.replace(self.pattern, self.replacement, self.count or -1)
        return re.sub(self.pattern, self.replacement, content, count=self.count, flags=self.flags)


def literal_text(text: str) -> Callable[[re.Match[str]], str]:
    """Wrap *text* so ``re.sub`` inserts it verbatim (no backslash handling)."""
    return lambda _match: text


class TextPatcher:
    """Applies edits to files inside one generated project.

    All paths are relative to *project_dir*.  Every file written is recorded
    in :attr:`touched` in the order it was modified.
    """

    def __init__(self, project_dir: str | Path) -> None:
        self.project_dir = Path(project_dir)
        self.touched: list[Path] = []

    # -- Basic I/O -----------------------------------------------------------

    def path(self, relative: str) -> Path:
        return self.project_dir / relative

    def read(self, relative: str) -> str:
        """Return the content of a generated file.

        Raises:
            GeneratorError: If the generator did not produce the file.
        """
        target = self.path(relative)
        if not target.is_file():
            raise GeneratorError(f"Expected generated file is missing: {target}")
        return target.read_text(encoding="utf-8")

    def write(self, relative: str, content: str) -> Path:
        """Write (or overwrite) a file, creating parent directories."""
        target = self.path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        self.touched.append(target)
        return target

    def append(self, relative: str, text: str) -> Path:
        return self.write(relative, self.read(relative) + text)

    def remove(self, relative: str) -> None:
        """Delete a generated file if it exists."""
        self.path(relative).unlink(missing_ok=True)

    # -- Edits ---------------------------------------------------------------

    def substitute(self, relative: str, *substitutions: Substitution) -> bool:
        """Apply *substitutions* in order and write the file back.

        Returns:
            ``True`` if the content changed.
        """
        original = self.read(relative)
        content = original
        for substitution in substitutions:
            content = substitution.apply(content)
        self.write(relative, content)
        return content != original

    def replace_title(self, relative: str, title: str) -> bool:
        """Replace the text of the first ``<title>`` element."""
        return self.substitute(
            relative,
            Substitution(r"<title>.*?</title>", literal_text(f"<title>{title}</title>")),
        )

    def insert_lines(self, relative: str, index: int, *lines: str) -> Path:
        """Insert *lines* before line number *index* (0-based)."""
        existing = self.read(relative).split("\n")
        existing[index:index] = list(lines)
        return self.write(relative, "\n".join(existing))

    def update_json(self, relative: str, mutate: Callable[[dict[str, Any]], None]) -> Path:
        """Load a JSON document, let *mutate* edit it in place and save it."""
        data = json.loads(self.read(relative))
        mutate(data)
        return self.write(relative, json.dumps(data, indent=2) + "\n")
