"""Shared pytest fixtures for the multitech test suite.

Provides reusable fixtures for:
- A configuration rooted in a temporary directory
- The packaged technology registry
- A recording fake for external commands (framework CLIs, docker, mvnw)
- Minimal framework generator output used to exercise the boilerplate edits
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from multitech.config import Config, DockerConfig
from multitech.errors import CommandError
from multitech.project import ProjectRequest, assemble_paths
from multitech.registry import Registry, load_registry
from multitech.scaffolder.base import BuildContext


# ---------------------------------------------------------------------------
# Configuration & registry
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config whose generated projects land under ``tmp_path``."""
    return Config(root_dir=tmp_path, docker=DockerConfig(poll_interval=0.01))


@pytest.fixture(scope="session")
def registry() -> Registry:
    return load_registry()


@pytest.fixture
def make_context(config: Config, registry: Registry) -> Callable[..., BuildContext]:
    """Factory building a ``BuildContext`` for ``tech_id`` and ``name``."""

    def factory(tech_id: str, name: str = "my-app", cfg: Config | None = None) -> BuildContext:
        cfg = cfg or config
        request = ProjectRequest.from_input(name, registry.get(tech_id))
        return BuildContext(cfg, request, assemble_paths(cfg, request), timestamp="19 Oct 2026 14:05")

    return factory


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

@dataclass
class RecordedCall:
    argv: list[str]
    cwd: Path | None
    env: dict[str, str] | None


class FakeRunner:
    """Async stand-in for ``run_checked`` that records every command.

    ``on(prefix, handler)`` lets a test simulate a generator's side effects;
    ``fail(prefix, returncode)`` makes matching commands raise ``CommandError``.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._handlers: list[tuple[tuple[str, ...], Callable[[list[str], Path], None]]] = []
        self._failures: list[tuple[tuple[str, ...], int]] = []

    def on(self, prefix: tuple[str, ...], handler: Callable[[list[str], Path], None]) -> FakeRunner:
        self._handlers.append((prefix, handler))
        return self

    def fail(self, prefix: tuple[str, ...], returncode: int = 1) -> FakeRunner:
        self._failures.append((prefix, returncode))
        return self

    @property
    def commands(self) -> list[list[str]]:
        return [call.argv for call in self.calls]

    async def __call__(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        argv = list(cmd)
        workdir = Path(cwd) if cwd is not None else None
        self.calls.append(RecordedCall(argv, workdir, env))
        for prefix, returncode in self._failures:
            if tuple(argv[: len(prefix)]) == prefix:
                raise CommandError(argv, returncode, "simulated failure")
        for prefix, handler in self._handlers:
            if tuple(argv[: len(prefix)]) == prefix:
                handler(argv, workdir)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ---------------------------------------------------------------------------
# Minimal framework generator output
# ---------------------------------------------------------------------------

_VITE_INDEX = (
    "<!doctype html>\n<html lang=\"en\">\n  <head>\n"
    "    <meta charset=\"UTF-8\" />\n    <title>Vite App</title>\n  </head>\n"
    "  <body>\n    <div id=\"app\"></div>\n  </body>\n</html>\n"
)

FRAMEWORK_OUTPUT: dict[str, dict[str, str]] = {
    "angular": {
        "src/index.html": "<!doctype html>\n<html>\n<head>\n  <title>MyApp</title>\n</head>\n"
                          "<body>\n  <app-root></app-root>\n</body>\n</html>\n",
        "src/styles.css": "/* You can add global styles to this file */\n",
        "src/app/app.component.html": "<h1>Welcome</h1>\n<router-outlet />\n",
        "src/app/app.component.ts": (
            "import { Component } from '@angular/core';\n"
            "import { RouterOutlet } from '@angular/router';\n\n"
            "@Component({\n  selector: 'app-root',\n  imports: [RouterOutlet],\n"
            "  templateUrl: './app.component.html',\n  styleUrl: './app.component.css'\n})\n"
            "export class AppComponent {\n  title = 'my-app';\n}\n"
        ),
    },
    "reactjs": {
        "index.html": _VITE_INDEX,
        "vite.config.ts": (
            "import { defineConfig } from 'vite'\n"
            "import react from '@vitejs/plugin-react'\n\n"
            "// https://vite.dev/config/\n"
            "export default defineConfig({\n  plugins: [react()],\n})\n"
        ),
        "src/index.css": ":root { color: black; }\n",
        "src/App.css": "#root { margin: 0 auto; }\n",
        "src/main.tsx": (
            "import { StrictMode } from 'react'\n"
            "import { createRoot } from 'react-dom/client'\n"
            "import './index.css'\n"
            "import App from './App.tsx'\n"
        ),
        "src/App.tsx": (
            "import { useState } from 'react'\n"
            "import reactLogo from './assets/react.svg'\n"
            "import viteLogo from '/vite.svg'\n"
            "import './App.css'\n\n"
            "function App() {\n"
            "  const [count, setCount] = useState(0)\n\n"
            "  return (\n"
            "    <>\n"
            "      <div>\n"
            "        <img src={viteLogo} className=\"logo\" alt=\"Vite logo\" />\n"
            "      </div>\n"
            "      <h1>Vite + React</h1>\n"
            "    </>\n"
            "  )\n"
            "}\n\n"
            "export default App\n"
        ),
    },
    "svelte": {
        "index.html": _VITE_INDEX,
        "vite.config.ts": (
            "import { defineConfig } from 'vite'\n"
            "import { svelte } from '@sveltejs/vite-plugin-svelte'\n\n"
            "// https://vite.dev/config/\n"
            "export default defineConfig({\n  plugins: [svelte()],\n})\n"
        ),
        "src/app.css": ":root { color: black; }\n",
        "src/App.svelte": "<main><h1>Vite + Svelte</h1></main>\n",
    },
    "vuejs": {
        "index.html": _VITE_INDEX,
        "vite.config.ts": (
            "import { fileURLToPath, URL } from 'node:url'\n\n"
            "import { defineConfig } from 'vite'\n"
            "import vue from '@vitejs/plugin-vue'\n"
            "import vueDevTools from 'vite-plugin-vue-devtools'\n\n"
            "// https://vite.dev/config/\n"
            "export default defineConfig({\n"
            "  plugins: [\n    vue(),\n    vueDevTools(),\n  ],\n"
            "  resolve: {\n    alias: {\n"
            "      '@': fileURLToPath(new URL('./src', import.meta.url))\n"
            "    },\n  },\n})\n"
        ),
        "src/assets/base.css": ":root { color: black; }\n",
        "src/assets/main.css": "@import './base.css';\n#app { margin: 0; }\n",
        "src/App.vue": "<script setup lang=\"ts\"></script>\n<template><HelloWorld /></template>\n",
    },
    "astro": {
        "src/layouts/Layout.astro": (
            "---\n---\n\n<!doctype html>\n<html lang=\"en\">\n\t<head>\n"
            "\t\t<title>Astro Basics</title>\n\t</head>\n\t<body>\n\t\t<slot />\n"
            "\t</body>\n</html>\n"
        ),
        "src/pages/index.astro": (
            "---\nimport Welcome from '../components/Welcome.astro';\n"
            "import Layout from '../layouts/Layout.astro';\n---\n\n"
            "<Layout>\n\t<Welcome />\n</Layout>\n"
        ),
    },
    "expressjs": {
        "package.json": json.dumps(
            {
                "name": "my-api",
                "module": "index.ts",
                "type": "module",
                "devDependencies": {"@types/bun": "latest"},
            },
            indent=2,
        ),
        "index.ts": "console.log(\"Hello via Bun!\");\n",
        "tsconfig.json": "{}\n",
    },
}


def write_tree(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


@pytest.fixture
def framework_runner(fake_runner: FakeRunner) -> Callable[[BuildContext], FakeRunner]:
    """Return a runner whose first create command writes the framework's files."""

    def factory(context: BuildContext) -> FakeRunner:
        tech = context.technology
        files = FRAMEWORK_OUTPUT[tech.id]
        first = tuple(tech.create_commands[0][:2])
        project_dir = context.paths.project_dir
        return fake_runner.on(first, lambda argv, cwd: write_tree(project_dir, files))

    return factory


@pytest.fixture
def generator_output() -> Callable[[str], Callable[[list[str], Path], None]]:
    """Handler factory writing a framework's files into ``<cwd>/<name>``.

    Matches generators invoked as ``<tool> create <template> <name> ...``.
    """

    def factory(tech_id: str) -> Callable[[list[str], Path], None]:
        return lambda argv, cwd: write_tree(cwd / argv[3], FRAMEWORK_OUTPUT[tech_id])

    return factory
