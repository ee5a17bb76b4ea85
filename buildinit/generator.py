"""buildinit project generator.

Resolves a :class:`~buildinit.config.Config` against the descriptor registry
and runs one generation.  Every configuration check happens before the first
file is written; lookup failures during generation stop the whole run.

Usage::

    python -m buildinit.generator --type java-library --dsl kotlin -o ./demo
    python -m buildinit.generator --type java-application --split-project -o ./demo
    python -m buildinit.generator --list-types
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

from buildinit.config import Config, ConfigurationError, InitSettings
from buildinit.models import BuildInitDsl, TestFramework
from buildinit.scaffolder.composite import CompositeProjectDescriptor, GenerationResult
from buildinit.scaffolder.registry import (
    DescriptorNotFoundError,
    ProjectLayoutSetupRegistry,
    build_default_registry,
    default_registry,
)
from buildinit.scaffolder.samples import SamplesGenerator
from buildinit.scaffolder.sources import GenerationError
from buildinit.scaffolder.templates import TemplateRenderer
from buildinit.utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)
from buildinit.versions import LibraryVersionProvider


class ProjectGenerator:
    """Generates one project tree from a :class:`Config`."""

    def __init__(
        self,
        config: Config,
        registry: Optional[ProjectLayoutSetupRegistry] = None,
    ) -> None:
        self.config = config
        self.registry = registry or registry_for(config)

    def descriptor(self) -> CompositeProjectDescriptor:
        """Raises :class:`DescriptorNotFoundError` for an unknown project type."""
        return self.registry.get(self.config.project_type)

    def resolve(self) -> InitSettings:
        return self.config.resolve(self.descriptor())

    async def generate(self) -> GenerationResult:
        """Resolve the configuration, then write the build and its sources."""
        descriptor = self.descriptor()
        settings = self.config.resolve(descriptor)
        return await descriptor.generate(settings)


def registry_for(config: Config) -> ProjectLayoutSetupRegistry:
    """The shared registry, or a private one when versions or templates are overridden.

    Raises:
        ConfigurationError: If the versions file cannot be read or parsed, or
            the template directory does not exist.
    """
    if config.versions_file is None and config.template_dir is None:
        return default_registry()

    versions = None
    if config.versions_file is not None:
        try:
            versions = LibraryVersionProvider.from_file(config.versions_file)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(
                f"Cannot load versions file {config.versions_file}: {exc}"
            ) from exc

    renderer = None
    if config.template_dir is not None:
        if not config.template_dir.is_dir():
            raise ConfigurationError(f"Template directory not found: {config.template_dir}")
        renderer = TemplateRenderer(config.template_dir)
    return build_default_registry(versions=versions, renderer=renderer)


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def print_result(result: GenerationResult) -> None:
    skipped = [
        f"{report.subproject}/{role.value}"
        for report in result.merge_reports
        for role in report.skipped_roles
    ]
    print_summary_table(
        {
            "Project type": result.descriptor_id,
            "Target": str(result.target.resolve()),
            "Build scripts": str(len(result.build_files)),
            "Source files": str(len(result.source_files)),
            "Skipped roles": ", ".join(skipped) or "none",
        },
        title="Generated Build",
    )
    for role in skipped:
        print_warning(f"Kept existing sources in {role}; no templates written there.")


def print_project_types(registry: ProjectLayoutSetupRegistry) -> None:
    for descriptor in registry.get_all():
        frameworks = ", ".join(tf.value for tf in descriptor.test_frameworks)
        extra = " (supports --split-project)" if descriptor.supports_modularization else ""
        console.print(f"  [cyan]{descriptor.id}[/cyan]  test frameworks: {frameworks}{extra}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``python -m buildinit.generator``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="buildinit -- scaffold a new build with sources and tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m buildinit.generator --type java-library -o ./demo\n"
            "  python -m buildinit.generator --type kotlin-application --dsl groovy\n"
            "  python -m buildinit.generator --type java-application --split-project\n"
        ),
    )
    parser.add_argument(
        "--type",
        dest="project_type",
        default=None,
        help="Project type id such as java-application (default: java-application)",
    )
    parser.add_argument(
        "--dsl",
        choices=[dsl.value for dsl in BuildInitDsl],
        default=None,
        help="Build script DSL (default depends on the project type)",
    )
    parser.add_argument(
        "--test-framework",
        choices=[tf.value for tf in TestFramework],
        default=None,
        help="Test framework (default depends on the project type)",
    )
    parser.add_argument(
        "--package",
        default=None,
        help="Source package (derived from the project name if omitted)",
    )
    parser.add_argument(
        "--project-name",
        default=None,
        help="Project name (default: name of the output directory)",
    )
    parser.add_argument(
        "--split-project",
        action="store_true",
        help="Generate a multi-project build with shared convention plugins",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--versions-file",
        default=None,
        help="JSON file overriding the pinned library versions",
    )
    parser.add_argument(
        "--template-dir",
        default=None,
        help="Directory overriding the bundled source templates",
    )
    parser.add_argument(
        "--list-types",
        action="store_true",
        help="List the available project types and exit",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Generate a documentation sample (both DSLs plus README.adoc)",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
        if args.output:
            config.output_dir = Path(args.output)
        if args.project_type:
            config.project_type = args.project_type
        if args.dsl:
            config.dsl = BuildInitDsl(args.dsl)
        if args.test_framework:
            config.test_framework = TestFramework(args.test_framework)
        if args.package:
            config.package_name = args.package
        if args.project_name:
            config.project_name = args.project_name
        if args.split_project:
            config.modularized = True
        if args.versions_file:
            config.versions_file = Path(args.versions_file)
        if args.template_dir:
            config.template_dir = Path(args.template_dir)

        registry = registry_for(config)

        if args.list_types:
            print_project_types(registry)
            return

        if args.sample:
            readme = asyncio.run(
                SamplesGenerator(registry).generate(
                    config.project_type, config.modularized, config.output_dir
                )
            )
            print_success(f"Sample written to {readme.parent.resolve()}")
            return

        result = asyncio.run(ProjectGenerator(config, registry).generate())
    except (ConfigurationError, DescriptorNotFoundError, GenerationError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    print_result(result)
    print_success("Build generated successfully!")


if __name__ == "__main__":
    main()
