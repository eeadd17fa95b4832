"""Per-technology edits applied on top of the framework generators' output.

Every web framework gets Tailwind CSS wired in and a landing page that shows
the project title and its creation timestamp.  Each technology contributes at
most two hooks:

* ``configure`` runs right after the setup commands (build tooling, plugins,
  dev-server port);
* ``customise`` runs after the folder structure step (title, styles, landing
  page, generated sources).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .base import BuildContext
from .patcher import Substitution, TextPatcher, literal_text

Hook = Callable[[TextPatcher, BuildContext], None]

TAILWIND_IMPORT = '@import "tailwindcss";\n'
TAILWIND_VITE_IMPORT = "import tailwindcss from '@tailwindcss/vite'"

LANDING_SNIPPET = "_snippets/landing.html.j2"


@dataclass(frozen=True)
class Customiser:
    configure: Hook | None = None
    customise: Hook | None = None


def landing_block(context: BuildContext, label: str, class_attr: str = "class") -> str:
    """Render the landing-page markup (``class_attr`` is ``className`` for JSX)."""
    html = context.renderer.render(
        LANDING_SNIPPET,
        context.template_context(label=label, class_attr=class_attr),
    )
    return html.strip()


def _first_existing(patcher: TextPatcher, *candidates: str) -> str:
    for relative in candidates:
        if patcher.path(relative).is_file():
            return relative
    return candidates[0]


def _add_dev_server_port(patcher: TextPatcher, relative: str, port: int) -> None:
    """Add ``server: { port }`` after the plugins list unless a server block exists."""
    content = patcher.read(relative)
    if re.search(r"\bserver\s*:", content):
        return
    block = f"\n  server: {{\n    port: {port},\n  }},"
    patcher.substitute(
        relative,
        Substitution(
            r"plugins:\s*\[.*?\]\s*,",
            lambda m: m.group(0) + block,
            flags=re.DOTALL,
        ),
    )


# ---------------------------------------------------------------------------
# Angular
# ---------------------------------------------------------------------------


def configure_angular(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.write(
        ".postcssrc.json",
        '{\n  "plugins": {\n    "@tailwindcss/postcss": {}\n  }\n}\n',
    )
    patcher.append("src/styles.css", TAILWIND_IMPORT)


def customise_angular(patcher: TextPatcher, context: BuildContext) -> None:
    title = context.title
    patcher.replace_title("src/index.html", title)

    template = _first_existing(patcher, "src/app/app.component.html", "src/app/app.html")
    patcher.write(template, landing_block(context, "angular") + "\n")

    component = _first_existing(patcher, "src/app/app.component.ts", "src/app/app.ts")
    patcher.substitute(
        component,
        Substitution(r"import \{ RouterOutlet \} from '@angular/router';\n?", ""),
        Substitution("imports: [RouterOutlet],", "imports: [],", literal=True),
        Substitution(r"title = '[^']*';", literal_text(f"title = '{title}';")),
        Substitution(r"title = signal\('[^']*'\)", literal_text(f"title = signal('{title}')")),
    )


# ---------------------------------------------------------------------------
# ReactJs (vite)
# ---------------------------------------------------------------------------


def configure_reactjs(patcher: TextPatcher, context: BuildContext) -> None:
    config = "vite.config.ts"
    patcher.insert_lines(config, 0, 'import path from "path";')
    patcher.insert_lines(config, 3, TAILWIND_VITE_IMPORT)
    patcher.substitute(
        config,
        Substitution(r"plugins:\s*\[\s*react\(\)\s*\]", "plugins: [react(), tailwindcss()]"),
    )
    _add_dev_server_port(patcher, config, 51731)

    if "resolve:" not in patcher.read(config):
        alias = (
            '\n  resolve: {\n    alias: {\n      "@": path.resolve(__dirname, "./src"),\n'
            "    },\n  },"
        )
        patcher.substitute(
            config,
            Substitution(r"server:\s*\{[^}]*\},", lambda m: m.group(0) + alias),
        )


def customise_reactjs(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.replace_title("index.html", context.title)

    patcher.write("src/styles/global.css", TAILWIND_IMPORT)
    patcher.remove("src/index.css")
    patcher.substitute(
        "src/main.tsx",
        Substitution(r"""["']\./index\.css["']""", '"./styles/global.css"'),
    )
    patcher.write("src/App.css", "")

    landing = landing_block(context, "reactjs (vite)", class_attr="className")
    patcher.substitute(
        "src/App.tsx",
        Substitution(r"import reactLogo from .*?\n", "", count=0),
        Substitution(r"import viteLogo from .*?\n", "", count=0),
        Substitution(r"import \{ useState \} from 'react'\n", "", count=0),
        Substitution(r"\s*const \[count, setCount\] = useState\(0\)\n?", "\n", count=0),
        Substitution(
            r"(<>\s*)(.*?)(\s*</>)",
            lambda m: m.group(1) + landing + m.group(3),
            flags=re.DOTALL,
        ),
    )


# ---------------------------------------------------------------------------
# Svelte (vite)
# ---------------------------------------------------------------------------


def configure_svelte(patcher: TextPatcher, context: BuildContext) -> None:
    config = "vite.config.ts"
    patcher.insert_lines(config, 2, TAILWIND_VITE_IMPORT)
    patcher.substitute(config, Substitution("svelte()", "svelte(), tailwindcss()", literal=True))
    _add_dev_server_port(patcher, config, 51732)


def customise_svelte(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.replace_title("index.html", context.title)
    patcher.write("src/app.css", TAILWIND_IMPORT)
    patcher.write("src/App.svelte", landing_block(context, "svelte (vite)") + "\n")


# ---------------------------------------------------------------------------
# VueJs (vite)
# ---------------------------------------------------------------------------


def _vue_plugins(match: re.Match[str]) -> str:
    existing = match.group(1).rstrip().rstrip(",")
    return f"plugins: [\n    {existing},\n    tailwindcss(),\n  ]"


def configure_vuejs(patcher: TextPatcher, context: BuildContext) -> None:
    config = "vite.config.ts"
    patcher.insert_lines(config, 2, TAILWIND_VITE_IMPORT)
    patcher.substitute(config, Substitution(r"plugins:\s*\[\s*(.*?)\s*\]", _vue_plugins, flags=re.DOTALL))
    _add_dev_server_port(patcher, config, 51733)


def customise_vuejs(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.replace_title("index.html", context.title)
    patcher.write("src/assets/base.css", TAILWIND_IMPORT)
    patcher.write("src/assets/main.css", "@import './base.css';\n")
    patcher.write(
        "src/App.vue",
        f"<template>\n  {landing_block(context, 'VueJs (vite)')}\n</template>\n",
    )


# ---------------------------------------------------------------------------
# Astro
# ---------------------------------------------------------------------------

_ASTRO_STYLES_IMPORT = 'import "../styles/global.css";'


def customise_astro(patcher: TextPatcher, context: BuildContext) -> None:
    if not patcher.path("src/styles/global.css").is_file():
        patcher.write("src/styles/global.css", TAILWIND_IMPORT)

    layout = "src/layouts/Layout.astro"
    content = patcher.read(layout)
    if _ASTRO_STYLES_IMPORT not in content:
        if content.startswith("---"):
            content = content.replace("---", f"---\n{_ASTRO_STYLES_IMPORT}", 1)
        else:
            content = f"---\n{_ASTRO_STYLES_IMPORT}\n---\n\n{content}"
        patcher.write(layout, content)
    patcher.replace_title(layout, context.title)

    landing = landing_block(context, "astro")
    patcher.substitute(
        "src/pages/index.astro",
        Substitution(r"<Welcome\s*/>", lambda m: f"{landing}\n\t{m.group(0)}"),
    )


# ---------------------------------------------------------------------------
# ExpressJs
# ---------------------------------------------------------------------------

EXPRESS_SCRIPTS: dict[str, str] = {
    "start": "bun run --watch src/server.ts",
    "prisma:init": "bunx prisma init",
    "prisma:migrate": "bunx prisma migrate dev",
    "prisma:generate": "bunx prisma generate",
    "prisma:studio": "bunx prisma studio",
}


def configure_expressjs(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.write(
        "tsconfig.json",
        context.renderer.render("_snippets/express/tsconfig.json.j2", context.template_context()),
    )

    def _scripts(package: dict[str, Any]) -> None:
        package.setdefault("scripts", {}).update(EXPRESS_SCRIPTS)
        package.pop("module", None)

    patcher.update_json("package.json", _scripts)


def customise_expressjs(patcher: TextPatcher, context: BuildContext) -> None:
    patcher.write(
        "src/server.ts",
        context.renderer.render("_snippets/express/server.ts.j2", context.template_context()),
    )


CUSTOMISERS: dict[str, Customiser] = {
    "angular": Customiser(configure_angular, customise_angular),
    "reactjs": Customiser(configure_reactjs, customise_reactjs),
    "svelte": Customiser(configure_svelte, customise_svelte),
    "vuejs": Customiser(configure_vuejs, customise_vuejs),
    "astro": Customiser(customise=customise_astro),
    "expressjs": Customiser(configure_expressjs, customise_expressjs),
}


def get_customiser(tech_id: str) -> Customiser:
    """Return the hooks for *tech_id*; technologies without edits get none."""
    return CUSTOMISERS.get(tech_id, Customiser())
