"""Multitech scaffolder -- builds ready-to-run starter projects.

Every technology in the catalogue maps to one builder:

* framework generators (Angular, Astro, React, Svelte, Vue, Express) are run
  and their output patched with Tailwind CSS and a landing page;
* container technologies (API Platform, databases) get compose templates, a
  shared docker network and a health wait;
* Spring Boot is fetched from Spring Initializr.

Quick usage::

    from multitech.config import Config
    from multitech.project import ProjectRequest
    from multitech.registry import load_registry
    from multitech.scaffolder import ProjectGenerator

    registry = load_registry()
    request = ProjectRequest.from_input("my-app", registry.get("reactjs"))
    project_path = await ProjectGenerator(Config()).generate(request)
"""

from multitech.scaffolder.generator import BUILDERS, ProjectGenerator
from multitech.scaffolder.templates import TemplateRenderer

__all__ = [
    "BUILDERS",
    "ProjectGenerator",
    "TemplateRenderer",
]
