"""Template resolution and the no-clobber merge rule.

A :class:`TemplateFactory` turns template keys chosen by a project descriptor
into :class:`~buildinit.models.TemplateSpec` objects bound to a subproject
and a source role, and knows where each one lands on disk.
:meth:`TemplateFactory.when_no_sources_available` wraps a group of specs in
a :class:`SourceTemplateOperation` which only writes a role's templates when
that role of the subproject holds no files at all.

The decision is atomic per role and independent between roles: a subproject
with hand-written main sources but no tests still receives its test
templates, and never a partial set of main templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from buildinit.config import InitSettings
from buildinit.models import Language, SourceRole, TemplateSpec
from buildinit.utils import write_file

from .templates import TemplateBindingError, TemplateNotFoundError, TemplateRenderer


class GenerationError(Exception):
    """Raised when a subproject cannot be generated; names the subproject."""

    def __init__(self, subproject: str, detail: str) -> None:
        self.subproject = subproject
        self.detail = detail
        super().__init__(f"{subproject}: {detail}")


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class MergeReport(BaseModel):
    """What happened to one subproject's source templates."""

    subproject: str
    written: list[Path] = Field(default_factory=list)
    skipped_roles: list[SourceRole] = Field(
        default_factory=list,
        description="Roles left untouched because they already held files",
    )


# ---------------------------------------------------------------------------
# Filesystem probe
# ---------------------------------------------------------------------------


def list_existing(subproject_root: Path, role: SourceRole) -> set[Path]:
    """Return every regular file under ``<subproject_root>/src/<role>/``.

    Any file counts, including placeholders such as ``.gitkeep``.
    """
    role_dir = Path(subproject_root) / "src" / role.value
    if not role_dir.is_dir():
        return set()
    return {p for p in role_dir.rglob("*") if p.is_file()}


# ---------------------------------------------------------------------------
# TemplateFactory
# ---------------------------------------------------------------------------


_PACKAGE_STATEMENT: dict[Language, str] = {
    Language.JAVA: "package {};",
    Language.GROOVY: "package {}",
    Language.KOTLIN: "package {}",
    Language.SCALA: "package {}",
}


class TemplateFactory:
    """Creates template specs for one generation run and one project language."""

    def __init__(
        self,
        settings: InitSettings,
        language: Language,
        renderer: TemplateRenderer,
    ) -> None:
        self.settings = settings
        self.language = language
        self.renderer = renderer

    def from_source_template(
        self,
        template: str,
        role: SourceRole,
        subproject: Optional[str] = None,
        language: Optional[Language] = None,
        *,
        target_dir: Optional[str] = None,
    ) -> TemplateSpec:
        """Bind *template* to a role and subproject.

        *subproject* defaults to the first subproject of the run and
        *language* to the project language.
        """
        subproject = subproject or self.settings.subprojects[0]
        language = language or self.language
        return TemplateSpec(
            template=template,
            role=role,
            subproject=subproject,
            language=language,
            target_dir=target_dir,
            package_name=self.package_for(subproject, language),
        )

    def package_for(self, subproject: str, language: Language) -> Optional[str]:
        """Package of generated files: ``<base>`` or ``<base>.<subproject>`` when modularized."""
        base = self.settings.package_name
        if not base or language not in _PACKAGE_STATEMENT:
            return None
        if self.settings.modularized:
            return f"{base}.{subproject}"
        return base

    def output_path(self, spec: TemplateSpec) -> Path:
        """``<subproject>/src/<role>/<dir>/<package path>/<file>``."""
        path = (
            self.settings.subproject_dir(spec.subproject)
            / "src"
            / spec.role.value
            / (spec.target_dir or spec.language.value)
        )
        if spec.package_name:
            path = path.joinpath(*spec.package_name.split("."))
        return path / spec.file_name

    def bindings(self, spec: TemplateSpec) -> dict[str, str]:
        package_decl = ""
        if spec.package_name:
            package_decl = _PACKAGE_STATEMENT[spec.language].format(spec.package_name)
        return {
            "project_name": self.settings.project_name,
            "subproject_name": spec.subproject,
            "package_name": spec.package_name or "",
            "base_package": self.settings.package_name or "",
            "package_decl": package_decl,
            "class_name": spec.class_name,
            "test_framework": self.settings.test_framework.display_name,
        }

    def when_no_sources_available(
        self, subproject: str, specs: Iterable[TemplateSpec]
    ) -> "SourceTemplateOperation":
        return SourceTemplateOperation(self, subproject, list(specs))


# ---------------------------------------------------------------------------
# SourceTemplateOperation
# ---------------------------------------------------------------------------


class SourceTemplateOperation:
    """Writes a subproject's templates, role by role, unless the role already has files."""

    def __init__(
        self, factory: TemplateFactory, subproject: str, specs: list[TemplateSpec]
    ) -> None:
        self.factory = factory
        self.subproject = subproject
        self.specs = specs

    def specs_for(self, role: SourceRole) -> list[TemplateSpec]:
        return [s for s in self.specs if s.role is role]

    async def generate(self) -> MergeReport:
        report = MergeReport(subproject=self.subproject)
        root = self.factory.settings.subproject_dir(self.subproject)

        # Decide every role before writing anything.
        writable: list[TemplateSpec] = []
        for role in SourceRole:
            role_specs = self.specs_for(role)
            if not role_specs:
                continue
            if list_existing(root, role):
                report.skipped_roles.append(role)
            else:
                writable.extend(role_specs)

        # Render every template before the first write.
        rendered: list[tuple[Path, str]] = []
        for spec in writable:
            try:
                content = self.factory.renderer.render(spec.template, self.factory.bindings(spec))
            except (TemplateNotFoundError, TemplateBindingError) as exc:
                raise GenerationError(self.subproject, str(exc)) from exc
            rendered.append((self.factory.output_path(spec), content))

        for path, content in rendered:
            report.written.append(await write_file(path, content))

        return report
