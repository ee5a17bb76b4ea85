"""Dialect-neutral build script model and its Groovy/Kotlin DSL renderers.

Quick usage::

    from buildinit.buildscript import BuildScriptBuilder
    from buildinit.models import BuildInitDsl

    builder = BuildScriptBuilder().plugin(None, "java-library")
    print(builder.render(BuildInitDsl.GROOVY))
"""

from buildinit.buildscript.builder import BuildScriptBuilder, ScriptBlockBuilder
from buildinit.buildscript.renderer import (
    RenderedScript,
    render,
    render_with_external_comments,
)

__all__ = [
    "BuildScriptBuilder",
    "RenderedScript",
    "ScriptBlockBuilder",
    "render",
    "render_with_external_comments",
]
