"""buildinit scaffolder -- generates project trees for a chosen project type.

This package selects a project descriptor by ``<language>-<component>`` id,
writes its build scripts in the requested DSL and materialises source and
test templates wherever the target holds no sources yet.

Quick usage::

    from buildinit.config import Config
    from buildinit.scaffolder import default_registry

    descriptor = default_registry().get("java-application")
    settings = Config(project_name="demo", output_dir="/tmp/demo").resolve(descriptor)
    result = await descriptor.generate(settings)
"""

from buildinit.scaffolder.composite import CompositeProjectDescriptor, GenerationResult
from buildinit.scaffolder.registry import (
    DescriptorNotFoundError,
    ProjectLayoutSetupRegistry,
    build_default_registry,
    default_registry,
)
from buildinit.scaffolder.samples import SamplesGenerator
from buildinit.scaffolder.sources import GenerationError, MergeReport, TemplateFactory
from buildinit.scaffolder.templates import TemplateRenderer

__all__ = [
    "CompositeProjectDescriptor",
    "DescriptorNotFoundError",
    "GenerationError",
    "GenerationResult",
    "MergeReport",
    "ProjectLayoutSetupRegistry",
    "SamplesGenerator",
    "TemplateFactory",
    "TemplateRenderer",
    "build_default_registry",
    "default_registry",
]
