"""Tests for the project generator (multitech.scaffolder.generator).

Covers:
- Dispatch from generator kind to builder
- Refusal of existing project directories and planned technologies
- Validation before any filesystem work
- Dev server start after the summary
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from multitech.errors import (
    GeneratorError,
    InvalidProjectNameError,
    ProjectExistsError,
    UnknownTechnologyError,
)
from multitech.project import ProjectRequest
from multitech.scaffolder.containers import ContainerBuilder
from multitech.scaffolder.framework import FrameworkCliBuilder
from multitech.scaffolder.generator import BUILDERS, ProjectGenerator
from multitech.scaffolder.springboot import SpringInitializrBuilder

# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def generator(config, registry) -> ProjectGenerator:
    return ProjectGenerator(config, registry)


def _fake_build(self) -> Path:
    self.project_dir.mkdir(parents=True)
    return self.project_dir


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_builder_table(self):
        assert BUILDERS == {
            "framework-cli": FrameworkCliBuilder,
            "container": ContainerBuilder,
            "spring-initializr": SpringInitializrBuilder,
        }

    @pytest.mark.parametrize(
        ("tech_id", "builder_cls"),
        [
            ("angular", FrameworkCliBuilder),
            ("expressjs", FrameworkCliBuilder),
            ("mongodb", ContainerBuilder),
            ("apiplatform", ContainerBuilder),
            ("springboot", SpringInitializrBuilder),
        ],
    )
    def test_builder_for(self, generator: ProjectGenerator, tech_id: str, builder_cls):
        request = generator.request("my-app", tech_id)
        assert generator.builder_for(request) is builder_cls

    async def test_generate_calls_builder(self, generator: ProjectGenerator, config):
        request = generator.request("my-app", "reactjs", "web")
        with patch.object(FrameworkCliBuilder, "build", new=AsyncMock(return_value=Path("/x"))) as build:
            result = await generator.generate(request)
        assert result == Path("/x")
        build.assert_awaited_once()

    async def test_returns_project_dir(self, generator: ProjectGenerator, config):
        async def build(self):
            return _fake_build(self)

        with patch.object(ContainerBuilder, "build", new=build):
            project = await generator.create("my-mongo-db", "mongodb")
        expected = config.root_dir.resolve() / "__GEN_PROJECTS" / "databases" / "mongodb" / "my-mongo-db"
        assert project == expected
        assert project.is_dir()


# ---------------------------------------------------------------------------
# Refusals
# ---------------------------------------------------------------------------


class TestRefusals:
    async def test_existing_project(self, generator: ProjectGenerator, config):
        existing = config.root_dir / "__GEN_PROJECTS" / "guis" / "web" / "svelte" / "my-app"
        existing.mkdir(parents=True)
        (existing / "keep.txt").write_text("mine", encoding="utf-8")

        with patch.object(FrameworkCliBuilder, "build", new=AsyncMock()) as build:
            with pytest.raises(ProjectExistsError):
                await generator.create("my-app", "svelte")
        build.assert_not_awaited()
        assert (existing / "keep.txt").read_text(encoding="utf-8") == "mine"

    async def test_planned_technology(self, generator: ProjectGenerator, config):
        with pytest.raises(GeneratorError, match="not available yet"):
            await generator.create("my-mobile", "flutter", "mobile")
        assert not (config.root_dir / "__GEN_PROJECTS").exists()

    async def test_invalid_name_touches_nothing(self, generator: ProjectGenerator, config):
        with pytest.raises(InvalidProjectNameError):
            await generator.create("x", "reactjs")
        assert not (config.root_dir / "__GEN_PROJECTS").exists()

    async def test_wrong_category(self, generator: ProjectGenerator):
        with pytest.raises(UnknownTechnologyError):
            await generator.create("my-app", "reactjs", "database")


# ---------------------------------------------------------------------------
# Dev server
# ---------------------------------------------------------------------------


class TestDevServer:
    async def test_not_started_by_default(self, generator: ProjectGenerator, fake_runner):
        async def build(self):
            return _fake_build(self)

        with patch.object(FrameworkCliBuilder, "build", new=build), \
             patch("multitech.scaffolder.base.run_checked", new=fake_runner):
            await generator.create("my-app", "vuejs")
        assert fake_runner.calls == []
        assert generator.serving is False

    async def test_started_when_requested(self, config, registry, fake_runner):
        generator = ProjectGenerator(config.model_copy(update={"start_dev_server": True}), registry)

        async def build(self):
            return _fake_build(self)

        with patch.object(FrameworkCliBuilder, "build", new=build), \
             patch("multitech.scaffolder.base.run_checked", new=fake_runner):
            project = await generator.create("my-app", "vuejs")
        assert fake_runner.commands == [["bun", "run", "dev"]]
        assert fake_runner.calls[0].cwd == project
        assert generator.serving is True

    async def test_interrupted_dev_server_is_not_an_error(self, config, registry, fake_runner):
        generator = ProjectGenerator(config.model_copy(update={"start_dev_server": True}), registry)
        fake_runner.fail(("bun", "run"), returncode=130)

        async def build(self):
            return _fake_build(self)

        with patch.object(FrameworkCliBuilder, "build", new=build), \
             patch("multitech.scaffolder.base.run_checked", new=fake_runner):
            await generator.create("my-app", "astro")

    async def test_containers_have_no_dev_server(self, config, registry, fake_runner):
        generator = ProjectGenerator(config.model_copy(update={"start_dev_server": True}), registry)
        request = ProjectRequest.from_input("my-db1", registry.get("postgresql"))

        async def build(self):
            return _fake_build(self)

        with patch.object(ContainerBuilder, "build", new=build), \
             patch("multitech.scaffolder.base.run_checked", new=fake_runner):
            await generator.generate(request)
        assert fake_runner.calls == []
