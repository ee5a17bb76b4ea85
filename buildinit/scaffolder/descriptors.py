"""Language-specific project descriptors.

A descriptor knows, for one (language, component type) pair, which build
script statements to emit and which source and test templates to
materialise.  JVM languages share :class:`JvmProjectInitDescriptor`, driven
by a per-language :class:`Description`; C++ and Swift share
:class:`NativeProjectInitDescriptor`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from buildinit.buildscript.builder import BuildScriptBuilder, ScriptBlockBuilder
from buildinit.config import InitSettings
from buildinit.models import (
    BuildInitDsl,
    ComponentType,
    Language,
    SourceRole,
    TemplateSpec,
    TestFramework,
)
from buildinit.versions import LibraryVersionProvider

from .modularization import (
    CONVENTION_ROLES,
    ModuleSpec,
    ModuleTopology,
    ProjectEdge,
    convention_plugin_id,
)
from .sources import MergeReport, TemplateFactory
from .testing import recipe_for

USER_MANUAL_URL = "https://docs.gradle.org/current/userguide/{}.html"


def documentation_for(user_manual_id: str) -> str:
    return USER_MANUAL_URL.format(user_manual_id)


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class ProjectInitDescriptor:
    """Behaviour common to every descriptor.

    Subclasses provide ``language``, ``component_type``, the test framework
    attributes, :meth:`generate_build_script` and :meth:`template_specs`.
    """

    language: Language
    component_type: ComponentType
    default_test_framework: TestFramework
    test_frameworks: tuple[TestFramework, ...] = ()
    modular_test_frameworks: tuple[TestFramework, ...] = ()
    supports_package: bool = False
    topology: Optional[ModuleTopology] = None

    @property
    def id(self) -> str:
        return f"{self.language.value}-{self.component_type.value}"

    @property
    def supports_modularization(self) -> bool:
        return self.topology is not None

    @property
    def default_dsl(self) -> BuildInitDsl:
        if self.language is Language.KOTLIN:
            return BuildInitDsl.KOTLIN
        return BuildInitDsl.GROOVY

    @property
    def further_reading(self) -> Optional[str]:
        return None

    def generate_build_script(
        self, name: str, settings: InitSettings, builder: BuildScriptBuilder
    ) -> None:
        """Populate *builder* for the subproject or convention role *name*."""
        raise NotImplementedError

    def template_specs(
        self, subproject: str, settings: InitSettings, factory: TemplateFactory
    ) -> list[TemplateSpec]:
        raise NotImplementedError

    async def generate_sources(
        self, settings: InitSettings, factory: TemplateFactory
    ) -> list[MergeReport]:
        """Materialise each subproject's templates, one merge decision per role."""
        reports: list[MergeReport] = []
        for subproject in settings.subprojects:
            specs = self.template_specs(subproject, settings, factory)
            operation = factory.when_no_sources_available(subproject, specs)
            reports.append(await operation.generate())
        return reports

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


# ---------------------------------------------------------------------------
# JVM languages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Description:
    """Static facts about one JVM language."""

    language: Language
    chapter_name: str
    user_manual_id: Optional[str]
    plugin_name: Optional[str]
    plugin_version_property: Optional[str]
    default_test_framework: TestFramework
    test_frameworks: tuple[TestFramework, ...]
    test_suffix: str = "Test"


JAVA = Description(
    Language.JAVA,
    "Java Quickstart",
    "tutorial_java_projects",
    None,
    None,
    TestFramework.JUNIT,
    (TestFramework.JUNIT, TestFramework.TESTNG, TestFramework.SPOCK, TestFramework.JUNIT_JUPITER),
)
GROOVY = Description(
    Language.GROOVY,
    "Groovy Quickstart",
    "tutorial_groovy_projects",
    "groovy",
    None,
    TestFramework.SPOCK,
    (TestFramework.SPOCK,),
)
KOTLIN = Description(
    Language.KOTLIN,
    "Kotlin",
    None,
    "org.jetbrains.kotlin.jvm",
    "kotlin",
    TestFramework.KOTLINTEST,
    (TestFramework.KOTLINTEST,),
)
SCALA = Description(
    Language.SCALA,
    "Scala Plugin",
    "scala_plugin",
    "scala",
    None,
    TestFramework.SCALATEST,
    (TestFramework.SCALATEST,),
    test_suffix="Suite",
)

# Java test templates live in one directory per framework.
_JAVA_TEST_TEMPLATE_DIRS: dict[TestFramework, str] = {
    TestFramework.JUNIT: "junit4",
    TestFramework.JUNIT_JUPITER: "junitjupiter",
    TestFramework.TESTNG: "testng",
    TestFramework.SPOCK: "groovy",
}


JAVA_APPLICATION_TOPOLOGY = ModuleTopology(
    modules=(
        ModuleSpec(
            "app",
            ComponentType.APPLICATION,
            dependencies=(ProjectEdge("implementation", "utilities"),),
            source_templates=("multi/app/App", "multi/app/MessageUtils"),
            test_templates=("multi/app/junitjupiter/MessageUtilsTest",),
        ),
        ModuleSpec(
            "list",
            ComponentType.LIBRARY,
            source_templates=("multi/list/LinkedList",),
            test_templates=("multi/list/junitjupiter/LinkedListTest",),
        ),
        ModuleSpec(
            "utilities",
            ComponentType.LIBRARY,
            dependencies=(ProjectEdge("api", "list"),),
            source_templates=(
                "multi/utilities/JoinUtils",
                "multi/utilities/SplitUtils",
                "multi/utilities/StringUtils",
            ),
        ),
    )
)


class JvmProjectInitDescriptor(ProjectInitDescriptor):
    """Java, Groovy, Kotlin and Scala projects."""

    supports_package = True

    def __init__(
        self,
        description: Description,
        component_type: ComponentType,
        versions: LibraryVersionProvider,
        topology: Optional[ModuleTopology] = None,
        modular_test_frameworks: tuple[TestFramework, ...] = (),
    ) -> None:
        self.description = description
        self.language = description.language
        self.component_type = component_type
        self.versions = versions
        self.topology = topology
        self.modular_test_frameworks = modular_test_frameworks
        self.default_test_framework = description.default_test_framework
        self.test_frameworks = description.test_frameworks

    @property
    def further_reading(self) -> Optional[str]:
        if self.description.user_manual_id is None:
            return None
        return documentation_for(self.description.user_manual_id)

    @property
    def example_class(self) -> str:
        return "App" if self.component_type is ComponentType.APPLICATION else "Library"

    @property
    def main_class(self) -> str:
        """Class holding ``main``; Kotlin compiles a top-level function to ``AppKt``."""
        return "AppKt" if self.language is Language.KOTLIN else "App"

    # -- Build scripts -----------------------------------------------------

    def generate_build_script(
        self, name: str, settings: InitSettings, builder: BuildScriptBuilder
    ) -> None:
        if not settings.modularized:
            self._project_build_script(settings, builder)
            self._configure_component(settings, builder)
        elif name in CONVENTION_ROLES:
            self._convention_build_script(name, settings, builder)
        else:
            self._subproject_build_script(name, settings, builder)

    def _project_build_script(self, settings: InitSettings, builder: BuildScriptBuilder) -> None:
        description = self.description
        builder.repositories().jcenter("Use JCenter for resolving dependencies.")
        if description.plugin_name is not None:
            version = None
            if description.plugin_version_property is not None:
                version = self.versions.get_version(description.plugin_version_property)
            builder.plugin(
                f"Apply the {description.plugin_name} Plugin to add support for {self.language}.",
                description.plugin_name,
                version,
            )
        builder.file_comment(
            f"This generated file contains a sample {self.language} {self.component_type} "
            "project to get you started."
        )
        if description.user_manual_id is not None:
            builder.file_comment(
                f"For more details take a look at the {description.chapter_name} chapter in the Gradle"
            )
            builder.file_comment(f"User Manual available at {self.further_reading}")
        recipe_for(settings.test_framework, self.language).apply(builder, self.versions)

    def _configure_component(self, settings: InitSettings, builder: BuildScriptBuilder) -> None:
        if self.component_type is ComponentType.APPLICATION:
            self._apply_application_plugin(builder)
            builder.block(None, "application", self._main_class_assignment(settings, self.main_class))
            builder.implementation_dependency(
                "This dependency is used by the application.",
                self.versions.expand("com.google.guava:guava:{guava}"),
            )
        else:
            self._apply_library_plugin(builder)
            builder.api_dependency(
                "This dependency is exported to consumers, that is to say found on their compile classpath.",
                self.versions.expand("org.apache.commons:commons-math3:{commons-math}"),
            )
            builder.implementation_dependency(
                "This dependency is used internally, and not exposed to consumers on their own compile classpath.",
                self.versions.expand("com.google.guava:guava:{guava}"),
            )

    def _convention_build_script(
        self, role: str, settings: InitSettings, builder: BuildScriptBuilder
    ) -> None:
        package_name = settings.package_name or ""
        if role == "common":
            plugin_name = self.description.plugin_name or "java"
            builder.plugin(
                f"Apply the {plugin_name} Plugin to add support for {self.language}.", plugin_name
            )
            builder.repositories().jcenter("Use JCenter for resolving dependencies.")
            recipe_for(settings.test_framework, self.language).apply(builder, self.versions)
            return

        builder.plugin(
            "Apply the common convention plugin for shared build configuration between "
            "library and application projects.",
            convention_plugin_id(package_name, self.language, "common"),
        )
        if role == "application":
            self._apply_application_plugin(builder)
        else:
            self._apply_library_plugin(builder)

    def _subproject_build_script(
        self, name: str, settings: InitSettings, builder: BuildScriptBuilder
    ) -> None:
        assert self.topology is not None
        module = self.topology.module(name)
        builder.plugin(
            None, convention_plugin_id(settings.package_name or "", self.language, module.role.value)
        )
        if module.role is ComponentType.APPLICATION:
            builder.block(
                None, "application", self._main_class_assignment(settings, f"{name}.{self.main_class}")
            )
        for edge in module.dependencies:
            builder.project_dependency(edge.configuration, None, f":{edge.target}")

    def _apply_application_plugin(self, builder: BuildScriptBuilder) -> None:
        builder.plugin(
            f"Apply the application plugin to add support for building a CLI application in {self.language}.",
            "application",
        )

    @staticmethod
    def _apply_library_plugin(builder: BuildScriptBuilder) -> None:
        builder.plugin(
            "Apply the java-library plugin for API and implementation separation.", "java-library"
        )

    @staticmethod
    def _main_class_assignment(settings: InitSettings, class_name: str):
        main_class = f"{settings.package_name}.{class_name}" if settings.package_name else class_name

        def configure(block: ScriptBlockBuilder) -> None:
            block.property_assignment(
                "Define the main class for the application.", "mainClass", main_class, False
            )

        return configure

    # -- Sources -----------------------------------------------------------

    def source_templates(self, subproject: str, settings: InitSettings) -> list[str]:
        if settings.modularized:
            return list(self._module(subproject).source_templates)
        return [self.example_class]

    def test_source_templates(self, subproject: str, settings: InitSettings) -> list[str]:
        if settings.modularized:
            return list(self._module(subproject).test_templates)
        test_name = f"{self.example_class}{self.description.test_suffix}"
        if self.language is Language.JAVA:
            return [f"{_JAVA_TEST_TEMPLATE_DIRS[settings.test_framework]}/{test_name}"]
        return [test_name]

    def template_specs(
        self, subproject: str, settings: InitSettings, factory: TemplateFactory
    ) -> list[TemplateSpec]:
        specs = [
            factory.from_source_template(
                self.template_path(t), SourceRole.MAIN, subproject, self.template_language(t)
            )
            for t in self.source_templates(subproject, settings)
        ]
        specs.extend(
            factory.from_source_template(
                self.template_path(t), SourceRole.TEST, subproject, self.template_language(t)
            )
            for t in self.test_source_templates(subproject, settings)
        )
        return specs

    def template_path(self, base_name: str) -> str:
        """``<language><component>/<base>.<ext>.j2`` for a template base name."""
        extension = self.template_language(base_name).extension
        return f"{self.language.value}{self.component_type.value}/{base_name}.{extension}.j2"

    def template_language(self, base_name: str) -> Language:
        if base_name.startswith("groovy/"):
            return Language.GROOVY
        return self.language

    def _module(self, subproject: str) -> ModuleSpec:
        assert self.topology is not None
        return self.topology.module(subproject)


# ---------------------------------------------------------------------------
# Native languages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NativeTemplate:
    name: str
    role: SourceRole
    target_dir: Optional[str] = None


_NATIVE_TEMPLATES: dict[tuple[Language, ComponentType], tuple[NativeTemplate, ...]] = {
    (Language.CPP, ComponentType.APPLICATION): (
        NativeTemplate("app.cpp", SourceRole.MAIN),
        NativeTemplate("app.h", SourceRole.MAIN, "headers"),
        NativeTemplate("app_test.cpp", SourceRole.TEST),
    ),
    (Language.CPP, ComponentType.LIBRARY): (
        NativeTemplate("hello.cpp", SourceRole.MAIN),
        NativeTemplate("hello.h", SourceRole.MAIN, "public"),
        NativeTemplate("hello_test.cpp", SourceRole.TEST),
    ),
    (Language.SWIFT, ComponentType.APPLICATION): (
        NativeTemplate("main.swift", SourceRole.MAIN),
        NativeTemplate("GreeterTests.swift", SourceRole.TEST),
        NativeTemplate("LinuxMain.swift", SourceRole.TEST),
    ),
    (Language.SWIFT, ComponentType.LIBRARY): (
        NativeTemplate("Hello.swift", SourceRole.MAIN),
        NativeTemplate("HelloTests.swift", SourceRole.TEST),
        NativeTemplate("LinuxMain.swift", SourceRole.TEST),
    ),
}

_NATIVE_TEST_FRAMEWORKS: dict[Language, TestFramework] = {
    Language.CPP: TestFramework.CPPTEST,
    Language.SWIFT: TestFramework.XCTEST,
}

_NATIVE_USER_MANUAL: dict[Language, tuple[str, str]] = {
    Language.CPP: ("Building C++ projects", "building_cpp_projects"),
    Language.SWIFT: ("Building Swift projects", "building_swift_projects"),
}


class NativeProjectInitDescriptor(ProjectInitDescriptor):
    """C++ and Swift projects: no packages, no modularization."""

    def __init__(
        self,
        language: Language,
        component_type: ComponentType,
        versions: LibraryVersionProvider,
    ) -> None:
        if not language.is_native:
            raise ValueError(f"{language} is not a native language")
        self.language = language
        self.component_type = component_type
        self.versions = versions
        self.default_test_framework = _NATIVE_TEST_FRAMEWORKS[language]
        self.test_frameworks = (self.default_test_framework,)

    @property
    def further_reading(self) -> Optional[str]:
        return documentation_for(_NATIVE_USER_MANUAL[self.language][1])

    @property
    def templates(self) -> tuple[NativeTemplate, ...]:
        return _NATIVE_TEMPLATES[(self.language, self.component_type)]

    def generate_build_script(
        self, name: str, settings: InitSettings, builder: BuildScriptBuilder
    ) -> None:
        plugin_id = f"{self.language.value}-{self.component_type.value}"
        products = "executables" if self.component_type is ComponentType.APPLICATION else "libraries"
        builder.plugin(
            f"Apply the {plugin_id} plugin to add support for building {self.language} {products}",
            plugin_id,
        )
        chapter, user_manual_id = _NATIVE_USER_MANUAL[self.language]
        builder.file_comment(
            f"This generated file contains a sample {self.language} {self.component_type} "
            "project to get you started."
        )
        builder.file_comment(f"For more details take a look at the {chapter} chapter in the Gradle")
        builder.file_comment(f"User Manual available at {documentation_for(user_manual_id)}")
        recipe_for(settings.test_framework, self.language).apply(builder, self.versions)

    def template_specs(
        self, subproject: str, settings: InitSettings, factory: TemplateFactory
    ) -> list[TemplateSpec]:
        prefix = f"{self.language.value}{self.component_type.value}"
        return [
            factory.from_source_template(
                f"{prefix}/{t.name}.j2", t.role, subproject, target_dir=t.target_dir
            )
            for t in self.templates
        ]
