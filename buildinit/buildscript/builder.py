"""Dialect-neutral build script model.

A :class:`BuildScriptBuilder` accumulates the semantic content of one build
script (plugins, repositories, dependencies, nested blocks, task
configuration, property assignments and plain method calls) without knowing
which dialect it will be rendered to.  Every mutator appends one element and
returns a builder so calls can be chained.  Rendering lives in
:mod:`buildinit.buildscript.renderer`.

Usage::

    builder = (
        BuildScriptBuilder()
        .file_comment("A sample Java library project.")
        .plugin("Apply the java-library plugin.", "java-library")
        .repositories().jcenter("Use JCenter for resolving dependencies.")
        .test_implementation_dependency("Use JUnit.", "junit:junit:4.13")
    )
    text = builder.render(BuildInitDsl.KOTLIN)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from buildinit.buildscript.renderer import RenderedScript
    from buildinit.models import BuildInitDsl


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PluginSpec:
    plugin_id: str
    version: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class RepositorySpec:
    # Method name of the repository shorthand, e.g. "jcenter", "mavenCentral".
    kind: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class DependencySpec:
    """One dependency declaration.

    ``kind`` is ``"external"`` for module coordinates, ``"project"`` for a
    project path such as ``:utilities`` and ``"platform"`` for a BOM import.
    Several notations sharing one comment are rendered as consecutive lines.
    """

    configuration: str
    notations: tuple[str, ...]
    comment: Optional[str] = None
    kind: str = "external"


@dataclass(frozen=True)
class PropertyAssignment:
    comment: Optional[str]
    property_name: str
    value: Union[str, bool, int]
    # False renders Kotlin lazy properties as ``prop.set(value)``.
    assign_operator: bool = True


@dataclass(frozen=True)
class MethodInvocation:
    comment: Optional[str]
    method: str
    arguments: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskMethodInvocation:
    comment: Optional[str]
    task_name: str
    task_type: str
    method: str


@dataclass(frozen=True)
class ScriptBlock:
    comment: Optional[str]
    name: str
    statements: tuple["Statement", ...] = ()


Statement = Union[PropertyAssignment, MethodInvocation, TaskMethodInvocation, ScriptBlock]


# ---------------------------------------------------------------------------
# Nested block builder
# ---------------------------------------------------------------------------

class ScriptBlockBuilder:
    """Collects the statements of a named block such as ``application { }``."""

    def __init__(self) -> None:
        self.statements: list[Statement] = []

    def property_assignment(
        self,
        comment: Optional[str],
        property_name: str,
        value: Union[str, bool, int],
        assign_operator: bool = True,
    ) -> "ScriptBlockBuilder":
        self.statements.append(
            PropertyAssignment(comment, property_name, value, assign_operator)
        )
        return self

    def method_invocation(
        self, comment: Optional[str], method: str, *arguments: str
    ) -> "ScriptBlockBuilder":
        self.statements.append(MethodInvocation(comment, method, tuple(arguments)))
        return self

    def block(
        self,
        comment: Optional[str],
        name: str,
        configurator: Callable[["ScriptBlockBuilder"], object] | None = None,
    ) -> "ScriptBlockBuilder":
        self.statements.append(_build_block(comment, name, configurator))
        return self


def _build_block(
    comment: Optional[str],
    name: str,
    configurator: Callable[[ScriptBlockBuilder], object] | None,
) -> ScriptBlock:
    nested = ScriptBlockBuilder()
    if configurator is not None:
        configurator(nested)
    return ScriptBlock(comment, name, tuple(nested.statements))


# ---------------------------------------------------------------------------
# Section builders
# ---------------------------------------------------------------------------

class RepositoriesBuilder:
    """Fluent access to repository declarations; each call returns the script builder."""

    def __init__(self, owner: "BuildScriptBuilder") -> None:
        self._owner = owner

    def jcenter(self, comment: Optional[str] = None) -> "BuildScriptBuilder":
        return self._add("jcenter", comment)

    def maven_central(self, comment: Optional[str] = None) -> "BuildScriptBuilder":
        return self._add("mavenCentral", comment)

    def gradle_plugin_portal(self, comment: Optional[str] = None) -> "BuildScriptBuilder":
        return self._add("gradlePluginPortal", comment)

    def _add(self, kind: str, comment: Optional[str]) -> "BuildScriptBuilder":
        self._owner.repositories_.append(RepositorySpec(kind, comment))
        return self._owner


class DependenciesBuilder:
    """Fluent access to dependency declarations; each call returns the script builder."""

    def __init__(self, owner: "BuildScriptBuilder") -> None:
        self._owner = owner

    def dependency(
        self, configuration: str, comment: Optional[str], *notations: str
    ) -> "BuildScriptBuilder":
        if not notations:
            raise ValueError("At least one dependency notation is required")
        self._owner.dependencies_.append(
            DependencySpec(configuration, tuple(notations), comment)
        )
        return self._owner

    def platform_dependency(
        self, configuration: str, comment: Optional[str], notation: str
    ) -> "BuildScriptBuilder":
        self._owner.dependencies_.append(
            DependencySpec(configuration, (notation,), comment, kind="platform")
        )
        return self._owner

    def project_dependency(
        self, configuration: str, comment: Optional[str], path: str
    ) -> "BuildScriptBuilder":
        self._owner.dependencies_.append(
            DependencySpec(configuration, (path,), comment, kind="project")
        )
        return self._owner


# ---------------------------------------------------------------------------
# BuildScriptBuilder
# ---------------------------------------------------------------------------

@dataclass
class BuildScriptBuilder:
    """Ordered, dialect-neutral model of a single build script.

    Sections render in a fixed order (file comments, plugins, repositories,
    dependencies, other statements); insertion order is kept inside each
    section.
    """

    file_comments: list[str] = field(default_factory=list)
    plugins: list[PluginSpec] = field(default_factory=list)
    repositories_: list[RepositorySpec] = field(default_factory=list)
    dependencies_: list[DependencySpec] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)

    # -- File level --------------------------------------------------------

    def file_comment(self, text: str) -> "BuildScriptBuilder":
        self.file_comments.append(text)
        return self

    def plugin(
        self, comment: Optional[str], plugin_id: str, version: Optional[str] = None
    ) -> "BuildScriptBuilder":
        self.plugins.append(PluginSpec(plugin_id, version, comment))
        return self

    # -- Repositories and dependencies -------------------------------------

    def repositories(self) -> RepositoriesBuilder:
        return RepositoriesBuilder(self)

    def dependencies(self) -> DependenciesBuilder:
        return DependenciesBuilder(self)

    def implementation_dependency(
        self, comment: Optional[str], *notations: str
    ) -> "BuildScriptBuilder":
        return self.dependencies().dependency("implementation", comment, *notations)

    def api_dependency(self, comment: Optional[str], *notations: str) -> "BuildScriptBuilder":
        return self.dependencies().dependency("api", comment, *notations)

    def test_implementation_dependency(
        self, comment: Optional[str], *notations: str
    ) -> "BuildScriptBuilder":
        return self.dependencies().dependency("testImplementation", comment, *notations)

    def test_runtime_only_dependency(
        self, comment: Optional[str], *notations: str
    ) -> "BuildScriptBuilder":
        return self.dependencies().dependency("testRuntimeOnly", comment, *notations)

    def project_dependency(
        self, configuration: str, comment: Optional[str], path: str
    ) -> "BuildScriptBuilder":
        return self.dependencies().project_dependency(configuration, comment, path)

    # -- Statements --------------------------------------------------------

    def block(
        self,
        comment: Optional[str],
        name: str,
        configurator: Callable[[ScriptBlockBuilder], object] | None = None,
    ) -> "BuildScriptBuilder":
        """Append a named block; *configurator* populates its body."""
        self.statements.append(_build_block(comment, name, configurator))
        return self

    def task_method_invocation(
        self, comment: Optional[str], task_name: str, task_type: str, method: str
    ) -> "BuildScriptBuilder":
        self.statements.append(TaskMethodInvocation(comment, task_name, task_type, method))
        return self

    def property_assignment(
        self,
        comment: Optional[str],
        property_name: str,
        value: Union[str, bool, int],
        assign_operator: bool = True,
    ) -> "BuildScriptBuilder":
        self.statements.append(
            PropertyAssignment(comment, property_name, value, assign_operator)
        )
        return self

    def method_invocation(
        self, comment: Optional[str], method: str, *arguments: str
    ) -> "BuildScriptBuilder":
        self.statements.append(MethodInvocation(comment, method, tuple(arguments)))
        return self

    # -- Introspection -----------------------------------------------------

    def is_empty(self) -> bool:
        return not (
            self.file_comments
            or self.plugins
            or self.repositories_
            or self.dependencies_
            or self.statements
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, dsl: "BuildInitDsl") -> str:
        from buildinit.buildscript.renderer import render

        return render(self, dsl)

    def render_with_external_comments(self, dsl: "BuildInitDsl") -> "RenderedScript":
        from buildinit.buildscript.renderer import render_with_external_comments

        return render_with_external_comments(self, dsl)
