"""Rendering of the build script model into Groovy or Kotlin DSL text.

Two read-only traversals of the same element list are offered:

- :func:`render` inlines each justification comment as a ``//`` line above
  the statement it explains.
- :func:`render_with_external_comments` strips those comments out, numbers
  them in rendered order and leaves a ``// <N>`` marker on the statement,
  returning the comment texts alongside the script.

Both traversals visit elements in exactly the same order, so marker ``<N>``
always refers to the N-th commented element of the plain rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from buildinit.buildscript.builder import (
    BuildScriptBuilder,
    DependencySpec,
    MethodInvocation,
    PluginSpec,
    PropertyAssignment,
    RepositorySpec,
    ScriptBlock,
    Statement,
    TaskMethodInvocation,
)
from buildinit.models import BuildInitDsl

_INDENT = "    "


@dataclass(frozen=True)
class RenderedScript:
    """Script text plus the comments extracted from it (in marker order)."""

    text: str
    comments: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Dialects
# ---------------------------------------------------------------------------

class _Dialect:
    """Surface syntax shared by both DSLs; subclasses fill in the differences."""

    quote = "'"

    def string(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace(self.quote, "\\" + self.quote)
        return f"{self.quote}{escaped}{self.quote}"

    def literal(self, value: Union[str, bool, int]) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        return self.string(value)

    def repository(self, repo: RepositorySpec) -> str:
        return f"{repo.kind}()"

    def method_invocation(self, invocation: MethodInvocation) -> str:
        args = ", ".join(self.string(a) for a in invocation.arguments)
        return f"{invocation.method}({args})"

    def plugin(self, plugin: PluginSpec) -> str:
        raise NotImplementedError

    def dependency(self, configuration: str, notation: str, kind: str) -> str:
        raise NotImplementedError

    def property_assignment(self, assignment: PropertyAssignment) -> str:
        raise NotImplementedError

    def task_header(self, invocation: TaskMethodInvocation) -> str:
        raise NotImplementedError


class GroovyDialect(_Dialect):
    quote = "'"

    def plugin(self, plugin: PluginSpec) -> str:
        text = f"id {self.string(plugin.plugin_id)}"
        if plugin.version:
            text += f" version {self.string(plugin.version)}"
        return text

    def dependency(self, configuration: str, notation: str, kind: str) -> str:
        if kind == "project":
            return f"{configuration} project({self.string(notation)})"
        if kind == "platform":
            return f"{configuration} platform({self.string(notation)})"
        return f"{configuration} {self.string(notation)}"

    def property_assignment(self, assignment: PropertyAssignment) -> str:
        return f"{assignment.property_name} = {self.literal(assignment.value)}"

    def task_header(self, invocation: TaskMethodInvocation) -> str:
        return f"tasks.named({self.string(invocation.task_name)})"


class KotlinDialect(_Dialect):
    quote = '"'

    def string(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
        return f'"{escaped}"'

    def plugin(self, plugin: PluginSpec) -> str:
        # Core plugins (no namespace, no version) use the accessor syntax.
        if "." not in plugin.plugin_id and not plugin.version:
            if plugin.plugin_id.isidentifier():
                return plugin.plugin_id
            return f"`{plugin.plugin_id}`"
        text = f"id({self.string(plugin.plugin_id)})"
        if plugin.version:
            text += f" version {self.string(plugin.version)}"
        return text

    def dependency(self, configuration: str, notation: str, kind: str) -> str:
        if kind == "project":
            return f"{configuration}(project({self.string(notation)}))"
        if kind == "platform":
            return f"{configuration}(platform({self.string(notation)}))"
        return f"{configuration}({self.string(notation)})"

    def property_assignment(self, assignment: PropertyAssignment) -> str:
        value = self.literal(assignment.value)
        if assignment.assign_operator:
            return f"{assignment.property_name} = {value}"
        return f"{assignment.property_name}.set({value})"

    def task_header(self, invocation: TaskMethodInvocation) -> str:
        return f"tasks.named<{invocation.task_type}>({self.string(invocation.task_name)})"


_DIALECTS: dict[BuildInitDsl, _Dialect] = {
    BuildInitDsl.GROOVY: GroovyDialect(),
    BuildInitDsl.KOTLIN: KotlinDialect(),
}


def dialect_for(dsl: BuildInitDsl) -> _Dialect:
    """Return the dialect for *dsl*; an unknown value is a programming error."""
    try:
        return _DIALECTS[dsl]
    except (KeyError, TypeError):
        raise ValueError(f"Unsupported build script dialect: {dsl!r}") from None


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class _ScriptWriter:
    def __init__(self, dialect: _Dialect, external_comments: bool) -> None:
        self.dialect = dialect
        self.external_comments = external_comments
        self.lines: list[str] = []
        self.comments: list[str] = []

    def emit(self, indent: int, comment: Optional[str], text: str) -> None:
        pad = _INDENT * indent
        marker = ""
        if comment:
            if self.external_comments:
                self.comments.append(comment)
                marker = f" // <{len(self.comments)}>"
            else:
                for line in comment.splitlines():
                    self.lines.append(f"{pad}// {line}" if line else f"{pad}//")
        self.lines.append(f"{pad}{text}{marker}")

    def blank(self) -> None:
        self.lines.append("")

    # -- Sections ----------------------------------------------------------

    def file_header(self, comments: Sequence[str]) -> None:
        self.lines.append("/*")
        for comment in comments:
            for line in comment.splitlines() or [""]:
                self.lines.append(f" * {line}" if line else " *")
        self.lines.append(" */")

    def plugins(self, plugins: Sequence[PluginSpec]) -> None:
        self.lines.append("plugins {")
        for i, plugin in enumerate(plugins):
            if i and plugin.comment:
                self.blank()
            self.emit(1, plugin.comment, self.dialect.plugin(plugin))
        self.lines.append("}")

    def repositories(self, repositories: Sequence[RepositorySpec]) -> None:
        self.lines.append("repositories {")
        for i, repo in enumerate(repositories):
            if i and repo.comment:
                self.blank()
            self.emit(1, repo.comment, self.dialect.repository(repo))
        self.lines.append("}")

    def dependencies(self, dependencies: Sequence[DependencySpec]) -> None:
        self.lines.append("dependencies {")
        for i, dep in enumerate(dependencies):
            if i and dep.comment:
                self.blank()
            for j, notation in enumerate(dep.notations):
                self.emit(
                    1,
                    dep.comment if j == 0 else None,
                    self.dialect.dependency(dep.configuration, notation, dep.kind),
                )
        self.lines.append("}")

    def body(self, statements: Sequence[Statement], indent: int) -> None:
        for i, statement in enumerate(statements):
            if i and _comment_of(statement):
                self.blank()
            self.statement(statement, indent)

    def statement(self, statement: Statement, indent: int) -> None:
        if isinstance(statement, ScriptBlock):
            self.emit(indent, statement.comment, f"{statement.name} {{")
            self.body(statement.statements, indent + 1)
            self.emit(indent, None, "}")
        elif isinstance(statement, TaskMethodInvocation):
            self.emit(indent, None, f"{self.dialect.task_header(statement)} {{")
            self.emit(indent + 1, statement.comment, f"{statement.method}()")
            self.emit(indent, None, "}")
        elif isinstance(statement, PropertyAssignment):
            self.emit(indent, statement.comment, self.dialect.property_assignment(statement))
        elif isinstance(statement, MethodInvocation):
            self.emit(indent, statement.comment, self.dialect.method_invocation(statement))
        else:
            raise TypeError(f"Unknown build script statement: {statement!r}")


def _comment_of(statement: Statement) -> Optional[str]:
    return statement.comment


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render(script: BuildScriptBuilder, dsl: BuildInitDsl) -> str:
    """Render *script* in *dsl* with justification comments inlined."""
    return _render(script, dsl, external_comments=False).text


def render_with_external_comments(
    script: BuildScriptBuilder, dsl: BuildInitDsl
) -> RenderedScript:
    """Render *script* with numbered ``<N>`` markers instead of inline comments."""
    return _render(script, dsl, external_comments=True)


def _render(
    script: BuildScriptBuilder, dsl: BuildInitDsl, *, external_comments: bool
) -> RenderedScript:
    writer = _ScriptWriter(dialect_for(dsl), external_comments)

    sections = []
    if script.file_comments:
        sections.append(lambda: writer.file_header(script.file_comments))
    if script.plugins:
        sections.append(lambda: writer.plugins(script.plugins))
    if script.repositories_:
        sections.append(lambda: writer.repositories(script.repositories_))
    if script.dependencies_:
        sections.append(lambda: writer.dependencies(script.dependencies_))
    for statement in script.statements:
        sections.append(lambda s=statement: writer.statement(s, 0))

    for i, write_section in enumerate(sections):
        if i:
            writer.blank()
        write_section()

    text = "\n".join(writer.lines)
    if text:
        text += "\n"
    return RenderedScript(text=text, comments=tuple(writer.comments))
