"""Jinja2 template rendering for source stubs and README fragments.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``buildinit/scaffolder/templates/`` directory and renders them with a flat
mapping of bindings.  Unknown template keys and bindings a template refers
to but the caller did not supply are both fatal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    UndefinedError,
    select_autoescape,
)


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateNotFoundError(LookupError):
    """Raised when a template key is not present in the template store."""

    def __init__(self, template: str) -> None:
        self.template = template
        super().__init__(f"Template not found: {template}")


class TemplateBindingError(Exception):
    """Raised when a template refers to a binding that was not supplied."""

    def __init__(self, template: str, detail: str) -> None:
        self.template = template
        super().__init__(f"Unresolved binding in template {template}: {detail}")


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Templates are rendered with a bindings dictionary
    whose values are plain strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, bindings: dict[str, Any]) -> str:
        """Render a single template with the provided bindings.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"javaapplication/App.java.j2"``).
            bindings: Variables available inside the template.

        Raises:
            TemplateNotFoundError: If *template_path* does not exist.
            TemplateBindingError: If the template uses an unknown binding.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound:
            raise TemplateNotFoundError(template_path) from None
        try:
            return template.render(**bindings)
        except UndefinedError as exc:
            raise TemplateBindingError(template_path, str(exc)) from exc

    def render_string(self, template_string: str, bindings: dict[str, Any]) -> str:
        """Render an inline template string with the provided bindings."""
        template = self.env.from_string(template_string)
        try:
            return template.render(**bindings)
        except UndefinedError as exc:
            raise TemplateBindingError("<string>", str(exc)) from exc

    # -- Utility -----------------------------------------------------------

    def has_template(self, template_path: str) -> bool:
        return (self.template_dir / template_path).is_file()

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )
