"""Generation orchestrator for one project descriptor.

:class:`CompositeProjectDescriptor` drives a language-specific descriptor
through a full run: it assembles every build script model in memory, writes
the scripts, then hands over to the descriptor to materialise source and test
templates under the no-clobber rule.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from buildinit.buildscript.builder import BuildScriptBuilder
from buildinit.config import InitSettings
from buildinit.models import BuildInitDsl, ComponentType, Language, TestFramework
from buildinit.utils import write_file
from buildinit.versions import VersionNotFoundError

from .descriptors import ProjectInitDescriptor
from .modularization import (
    BuildScriptTarget,
    ModuleTopology,
    build_logic_script,
    build_script_targets,
    settings_script,
)
from .sources import GenerationError, MergeReport, TemplateFactory
from .templates import TemplateRenderer

GENERATED_HEADER = "This file was generated by buildinit."


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """Outcome of one generation run."""

    descriptor_id: str
    target: Path
    build_files: list[Path] = Field(default_factory=list)
    merge_reports: list[MergeReport] = Field(default_factory=list)
    comments: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Extracted comments per build file (path without extension)",
    )

    @property
    def source_files(self) -> list[Path]:
        return [path for report in self.merge_reports for path in report.written]


# ---------------------------------------------------------------------------
# CompositeProjectDescriptor
# ---------------------------------------------------------------------------


class CompositeProjectDescriptor:
    """Pairs a project descriptor with the template store and writes a build."""

    def __init__(
        self,
        descriptor: ProjectInitDescriptor,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.descriptor = descriptor
        self.renderer = renderer or TemplateRenderer()

    # -- Descriptor facade -------------------------------------------------

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def language(self) -> Language:
        return self.descriptor.language

    @property
    def component_type(self) -> ComponentType:
        return self.descriptor.component_type

    @property
    def default_dsl(self) -> BuildInitDsl:
        return self.descriptor.default_dsl

    @property
    def default_test_framework(self) -> TestFramework:
        return self.descriptor.default_test_framework

    @property
    def test_frameworks(self) -> tuple[TestFramework, ...]:
        return self.descriptor.test_frameworks

    @property
    def supports_package(self) -> bool:
        return self.descriptor.supports_package

    @property
    def supports_modularization(self) -> bool:
        return self.descriptor.supports_modularization

    @property
    def modular_test_frameworks(self) -> tuple[TestFramework, ...]:
        return self.descriptor.modular_test_frameworks

    @property
    def topology(self) -> Optional[ModuleTopology]:
        return self.descriptor.topology

    @property
    def further_reading(self) -> Optional[str]:
        return self.descriptor.further_reading

    # -- Build scripts -----------------------------------------------------

    def build_script_builders(
        self, settings: InitSettings
    ) -> list[tuple[BuildScriptTarget, BuildScriptBuilder]]:
        """Every build script of the run, in write order.

        The settings script comes first, then (modularized runs only) the
        ``buildSrc`` script and the convention scripts, then one script per
        subproject.

        Raises:
            GenerationError: If a script cannot be assembled, for example
                because a library version is missing.
        """
        scripts = [settings_script(settings)]
        if settings.modularized:
            scripts.append(build_logic_script(settings))

        for target in build_script_targets(settings, self.language):
            builder = BuildScriptBuilder()
            try:
                self.descriptor.generate_build_script(target.name, settings, builder)
            except (VersionNotFoundError, KeyError) as exc:
                raise GenerationError(target.name, str(exc)) from exc
            scripts.append((target, builder))

        for _, builder in scripts:
            _add_header(builder)
        return scripts

    # -- Generation --------------------------------------------------------

    async def generate(self, settings: InitSettings) -> GenerationResult:
        """Write build scripts and source templates for *settings*.

        Raises:
            ConfigurationError: If the descriptor cannot generate *settings*.
                Nothing is written.
            GenerationError: If a version or template lookup fails.
        """
        return await self._generate(settings, external_comments=False)

    async def generate_with_external_comments(
        self, settings: InitSettings
    ) -> dict[str, list[str]]:
        """Generate as :meth:`generate`, with ``<N>`` markers in place of comments.

        Returns the extracted comments of each convention and subproject build
        script, keyed by its path without extension, in generation order.
        """
        result = await self._generate(settings, external_comments=True)
        return result.comments

    async def _generate(
        self, settings: InitSettings, *, external_comments: bool
    ) -> GenerationResult:
        settings.check_against(self.descriptor)
        dsl = settings.dsl
        result = GenerationResult(descriptor_id=self.id, target=settings.target)

        # All models are built and rendered before the first write.
        rendered: list[tuple[BuildScriptTarget, str]] = []
        for target, builder in self.build_script_builders(settings):
            if external_comments and target.kind in ("convention", "project"):
                script = builder.render_with_external_comments(dsl)
                result.comments[target.path] = list(script.comments)
                rendered.append((target, script.text))
            else:
                rendered.append((target, builder.render(dsl)))

        for target, text in rendered:
            path = await write_file(settings.target / target.file_name(dsl), text)
            result.build_files.append(path)

        factory = TemplateFactory(settings, self.language, self.renderer)
        result.merge_reports = await self.descriptor.generate_sources(settings, factory)
        return result

    def __repr__(self) -> str:
        return f"CompositeProjectDescriptor({self.id!r})"


def _add_header(builder: BuildScriptBuilder) -> None:
    header = [GENERATED_HEADER]
    if builder.file_comments:
        header.append("")
    builder.file_comments[:0] = header
