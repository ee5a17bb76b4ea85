"""Tests for ProjectGenerator and the command-line entry point."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from buildinit.config import Config, ConfigurationError
from buildinit.generator import ProjectGenerator, main, registry_for
from buildinit.models import BuildInitDsl
from buildinit.scaffolder.registry import DescriptorNotFoundError, default_registry


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


def _tree(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


# ---------------------------------------------------------------------------
# ProjectGenerator
# ---------------------------------------------------------------------------


class TestProjectGenerator:
    async def test_generate(self, registry, target_dir):
        config = Config(project_type="groovy-application", output_dir=target_dir)
        result = await ProjectGenerator(config, registry).generate()
        assert result.descriptor_id == "groovy-application"
        assert "src/main/groovy/demo/App.groovy" in _tree(target_dir)

    def test_resolve(self, registry, target_dir):
        config = Config(project_type="kotlin-library", output_dir=target_dir)
        assert ProjectGenerator(config, registry).resolve().dsl is BuildInitDsl.KOTLIN

    def test_unknown_type(self, registry, target_dir):
        config = Config(project_type="cobol-application", output_dir=target_dir)
        with pytest.raises(DescriptorNotFoundError):
            ProjectGenerator(config, registry).descriptor()

    async def test_configuration_error_writes_nothing(self, registry, target_dir):
        config = Config(project_type="cpp-library", output_dir=target_dir, package_name="demo")
        with pytest.raises(ConfigurationError):
            await ProjectGenerator(config, registry).generate()
        assert _tree(target_dir) == set()


class TestRegistryFor:
    def test_shared_registry_by_default(self):
        assert registry_for(Config()) is default_registry()

    def test_versions_override(self, tmp_path):
        versions_file = tmp_path / "versions.json"
        versions_file.write_text(json.dumps({"junit": "4.12", "guava": "30.0-jre"}))
        registry = registry_for(Config(versions_file=versions_file))
        assert registry is not default_registry()
        assert registry.get("java-application").descriptor.versions.get_version("junit") == "4.12"

    def test_missing_versions_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="missing.json"):
            registry_for(Config(versions_file=tmp_path / "missing.json"))

    def test_malformed_versions_file(self, tmp_path):
        versions_file = tmp_path / "versions.json"
        versions_file.write_text("{not json")
        with pytest.raises(ConfigurationError, match="versions.json"):
            registry_for(Config(versions_file=versions_file))

    def test_missing_template_dir(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Template directory"):
            registry_for(Config(template_dir=tmp_path / "nowhere"))


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestMain:
    def test_generates_project(self, clean_env, target_dir):
        main(["--type", "java-library", "-o", str(target_dir)])
        assert {"settings.gradle", "build.gradle", "src/main/java/demo/Library.java"} <= _tree(target_dir)

    def test_options(self, clean_env, target_dir):
        main(
            [
                "--type", "java-application",
                "--dsl", "kotlin",
                "--test-framework", "testng",
                "--package", "org.acme",
                "--project-name", "acme",
                "-o", str(target_dir),
            ]
        )
        assert "src/test/java/org/acme/AppTest.java" in _tree(target_dir)
        assert 'rootProject.name = "acme"' in (target_dir / "settings.gradle.kts").read_text()

    def test_split_project(self, clean_env, target_dir):
        main(["--type", "java-application", "--split-project", "-o", str(target_dir)])
        assert "utilities/build.gradle" in _tree(target_dir)

    def test_env_supplies_defaults(self, target_dir):
        env = {"BUILDINIT_TYPE": "scala-library", "BUILDINIT_OUTPUT_DIR": str(target_dir)}
        with patch.dict(os.environ, env, clear=True):
            main([])
        assert "src/test/scala/demo/LibrarySuite.scala" in _tree(target_dir)

    def test_unknown_type_exits(self, clean_env, target_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["--type", "cobol-application", "-o", str(target_dir)])
        assert exc_info.value.code == 1

    def test_configuration_error_exits_before_writing(self, clean_env, target_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["--type", "swift-library", "--package", "demo", "-o", str(target_dir)])
        assert exc_info.value.code == 1
        assert _tree(target_dir) == set()

    @pytest.mark.parametrize(
        "name,value",
        [("BUILDINIT_DSL", "bogus"), ("BUILDINIT_TEST_FRAMEWORK", "jasmine")],
    )
    def test_invalid_env_value_exits(self, target_dir, name, value):
        with patch.dict(os.environ, {name: value}, clear=True):
            with patch("buildinit.generator.print_error") as mock_error:
                with pytest.raises(SystemExit) as exc_info:
                    main(["-o", str(target_dir)])
        assert exc_info.value.code == 1
        assert name in mock_error.call_args.args[0]
        assert _tree(target_dir) == set()

    def test_missing_versions_file_exits(self, clean_env, target_dir, tmp_path):
        versions_file = tmp_path / "missing.json"
        with patch("buildinit.generator.print_error") as mock_error:
            with pytest.raises(SystemExit) as exc_info:
                main(["--versions-file", str(versions_file), "-o", str(target_dir)])
        assert exc_info.value.code == 1
        assert "missing.json" in mock_error.call_args.args[0]
        assert _tree(target_dir) == set()

    def test_malformed_versions_file_from_env_exits(self, target_dir, tmp_path):
        versions_file = tmp_path / "versions.json"
        versions_file.write_text("[1, 2")
        env = {"BUILDINIT_VERSIONS_FILE": str(versions_file)}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(["-o", str(target_dir)])
        assert exc_info.value.code == 1
        assert _tree(target_dir) == set()

    def test_list_types(self, clean_env, target_dir):
        with patch("buildinit.generator.console") as mock_console:
            main(["--list-types", "-o", str(target_dir)])
        printed = " ".join(str(c.args[0]) for c in mock_console.print.call_args_list)
        assert "java-application" in printed
        assert "--split-project" in printed
        assert _tree(target_dir) == set()

    def test_sample(self, clean_env, target_dir):
        main(["--type", "java-library", "--sample", "-o", str(target_dir)])
        assert {"README.adoc", "groovy/build.gradle", "kotlin/build.gradle.kts"} <= _tree(target_dir)
