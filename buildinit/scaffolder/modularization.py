"""Multi-module layout: topologies, convention scripts and build logic.

When a build is modularized, every subproject applies a convention plugin
(``<package>.<language>-<role>-conventions``) written as a plain build
script inside ``buildSrc/``, instead of repeating plugin and dependency
declarations.  The inter-subproject edges come from a hand-authored
:class:`ModuleTopology` owned by the project descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass

from buildinit.buildscript.builder import BuildScriptBuilder
from buildinit.config import InitSettings
from buildinit.models import BuildInitDsl, ComponentType, Language

CONVENTION_ROLES: tuple[str, ...] = ("common", "application", "library")

BUILD_LOGIC_DIR = "buildSrc"


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectEdge:
    """``configuration(project(":target"))`` from the owning module."""

    configuration: str
    target: str


@dataclass(frozen=True)
class ModuleSpec:
    name: str
    role: ComponentType
    dependencies: tuple[ProjectEdge, ...] = ()
    source_templates: tuple[str, ...] = ()
    test_templates: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleTopology:
    """Fixed set of subprojects and the project dependencies between them."""

    modules: tuple[ModuleSpec, ...]

    def names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.modules)

    def module(self, name: str) -> ModuleSpec:
        for module in self.modules:
            if module.name == name:
                return module
        raise KeyError(f"No module named '{name}' in topology")

    def dependency_graph(self) -> dict[str, list[str]]:
        """Adjacency list ``{module: [modules it depends on]}``."""
        return {m.name: [e.target for e in m.dependencies] for m in self.modules}

    def required_modules(self, names: tuple[str, ...]) -> set[str]:
        """Transitive closure of *names* over the dependency edges."""
        graph = self.dependency_graph()
        seen: set[str] = set()
        stack = list(names)
        while stack:
            name = stack.pop()
            if name in seen:
                continue
            seen.add(name)
            stack.extend(graph.get(name, []))
        return seen

    def is_acyclic(self) -> bool:
        graph = self.dependency_graph()
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(node: str) -> bool:
            if node in done:
                return True
            if node in visiting:
                return False
            visiting.add(node)
            for target in graph.get(node, []):
                if not visit(target):
                    return False
            visiting.discard(node)
            done.add(node)
            return True

        return all(visit(name) for name in graph)


# ---------------------------------------------------------------------------
# Build script targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BuildScriptTarget:
    """Where one build script goes.

    ``path`` is relative to the build root and has no DSL extension.
    ``kind`` is one of ``"convention"``, ``"project"``, ``"build-logic"`` or
    ``"settings"``.
    """

    name: str
    path: str
    kind: str = "project"

    def file_name(self, dsl: BuildInitDsl) -> str:
        return dsl.file_name(self.path)


def convention_plugin_id(package_name: str, language: Language, role: str) -> str:
    return f"{package_name}.{language.value}-{role}-conventions"


def build_script_targets(settings: InitSettings, language: Language) -> list[BuildScriptTarget]:
    """Convention scripts (modularized runs only) followed by one script per subproject."""
    targets: list[BuildScriptTarget] = []
    if settings.modularized:
        for role in CONVENTION_ROLES:
            plugin_id = convention_plugin_id(settings.package_name or "", language, role)
            targets.append(
                BuildScriptTarget(
                    role,
                    f"{BUILD_LOGIC_DIR}/src/main/{settings.dsl.value}/{plugin_id}",
                    kind="convention",
                )
            )
    for subproject in settings.subprojects:
        targets.append(BuildScriptTarget(subproject, settings.build_file_base(subproject)))
    return targets


# ---------------------------------------------------------------------------
# Settings and build-logic scripts
# ---------------------------------------------------------------------------


def settings_script(settings: InitSettings) -> tuple[BuildScriptTarget, BuildScriptBuilder]:
    """``rootProject.name`` plus an ``include`` of every subproject when modularized."""
    builder = BuildScriptBuilder()
    builder.file_comment(
        "The settings file is used to specify which projects to include in your build."
    )
    builder.property_assignment(None, "rootProject.name", settings.project_name)
    if settings.modularized:
        builder.method_invocation(None, "include", *settings.subprojects)
    return BuildScriptTarget("settings", "settings", kind="settings"), builder


def build_logic_script(settings: InitSettings) -> tuple[BuildScriptTarget, BuildScriptBuilder]:
    """``buildSrc`` build script enabling precompiled convention plugins."""
    plugin_id = "groovy-gradle-plugin" if settings.dsl is BuildInitDsl.GROOVY else "kotlin-dsl"
    builder = (
        BuildScriptBuilder()
        .plugin(
            f"Support convention plugins written in {settings.dsl.display_name}. "
            "Convention plugins are build scripts in 'src/main' that automatically "
            "become available as plugins in the main build.",
            plugin_id,
        )
        .repositories()
        .gradle_plugin_portal("Use the plugin portal to apply community plugins in convention plugins.")
    )
    return BuildScriptTarget(BUILD_LOGIC_DIR, f"{BUILD_LOGIC_DIR}/build", kind="build-logic"), builder
