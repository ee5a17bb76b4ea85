"""Process-wide registry of project descriptors.

Descriptors are registered once, in a fixed order, by
:func:`build_default_registry`.  That order drives numbered language choices
(``1: Java, 2: Groovy, ...``) so it must stay stable.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from buildinit.models import ComponentType, Language, TestFramework
from buildinit.versions import LibraryVersionProvider

from .composite import CompositeProjectDescriptor
from .descriptors import (
    GROOVY,
    JAVA,
    JAVA_APPLICATION_TOPOLOGY,
    KOTLIN,
    SCALA,
    JvmProjectInitDescriptor,
    NativeProjectInitDescriptor,
)
from .templates import TemplateRenderer


class DescriptorNotFoundError(LookupError):
    """Raised when no descriptor is registered under an id."""

    def __init__(self, descriptor_id: str, known: list[str]) -> None:
        self.descriptor_id = descriptor_id
        super().__init__(
            f"The requested project type '{descriptor_id}' is not supported "
            f"(supported: {', '.join(known) or 'none'})"
        )


class ProjectLayoutSetupRegistry:
    """Ordered map from descriptor id to :class:`CompositeProjectDescriptor`."""

    def __init__(self) -> None:
        self._descriptors: dict[str, CompositeProjectDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: CompositeProjectDescriptor) -> None:
        if self._frozen:
            raise RuntimeError("Registry is read-only once populated")
        if descriptor.id in self._descriptors:
            raise ValueError(f"Descriptor '{descriptor.id}' is already registered")
        self._descriptors[descriptor.id] = descriptor

    def freeze(self) -> "ProjectLayoutSetupRegistry":
        self._frozen = True
        return self

    def get(self, descriptor_id: str) -> CompositeProjectDescriptor:
        try:
            return self._descriptors[descriptor_id]
        except KeyError:
            raise DescriptorNotFoundError(descriptor_id, list(self._descriptors)) from None

    def get_all(self) -> list[CompositeProjectDescriptor]:
        return list(self._descriptors.values())

    def get_component_types(self) -> list[ComponentType]:
        """Distinct component types, in registration order."""
        seen: dict[ComponentType, None] = {}
        for descriptor in self._descriptors.values():
            seen.setdefault(descriptor.component_type, None)
        return list(seen)

    def get_languages_for(self, component_type: ComponentType) -> list[Language]:
        """Distinct languages with a descriptor for *component_type*, in registration order."""
        seen: dict[Language, None] = {}
        for descriptor in self._descriptors.values():
            if descriptor.component_type is component_type:
                seen.setdefault(descriptor.language, None)
        return list(seen)

    def __contains__(self, descriptor_id: object) -> bool:
        return descriptor_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------


def build_default_registry(
    versions: Optional[LibraryVersionProvider] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> ProjectLayoutSetupRegistry:
    """Register every shipped descriptor and return the frozen registry."""
    versions = versions or LibraryVersionProvider()
    renderer = renderer or TemplateRenderer()
    registry = ProjectLayoutSetupRegistry()

    for description in (JAVA, GROOVY, KOTLIN, SCALA):
        for component_type in ComponentType:
            modular = description is JAVA and component_type is ComponentType.APPLICATION
            descriptor = JvmProjectInitDescriptor(
                description,
                component_type,
                versions,
                topology=JAVA_APPLICATION_TOPOLOGY if modular else None,
                modular_test_frameworks=(TestFramework.JUNIT_JUPITER,) if modular else (),
            )
            registry.register(CompositeProjectDescriptor(descriptor, renderer))

    for language in (Language.CPP, Language.SWIFT):
        for component_type in ComponentType:
            descriptor = NativeProjectInitDescriptor(language, component_type, versions)
            registry.register(CompositeProjectDescriptor(descriptor, renderer))

    return registry.freeze()


@lru_cache(maxsize=1)
def default_registry() -> ProjectLayoutSetupRegistry:
    """The process-wide registry built from the bundled versions and templates."""
    return build_default_registry()
