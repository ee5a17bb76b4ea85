"""Documentation samples: a generated project in both DSLs plus a README.

For one project type, :class:`SamplesGenerator` generates the ``demo``
project into ``<target>/groovy`` and ``<target>/kotlin`` and assembles
``<target>/README.adoc`` from the ``readme/*.adoc.j2`` fragments.  The
comments extracted from the Groovy build script are listed as numbered
callouts so the README can refer to ``<1>``, ``<2>`` and so on.  The expected
``gradle build`` transcript and its runner configuration go to
``<target>/tests/build.out`` and ``<target>/tests/build.sample.conf``.
"""

from __future__ import annotations

from pathlib import Path

from buildinit.config import InitSettings
from buildinit.models import BuildInitDsl, ComponentType, Language, TestFramework
from buildinit.utils import write_file

from .composite import CompositeProjectDescriptor
from .registry import ProjectLayoutSetupRegistry

SAMPLE_PROJECT_NAME = "demo"

_TEST_FRAMEWORK_CHOICE = """
Select test framework:
  1: JUnit 4
  2: TestNG
  3: Spock
  4: JUnit Jupiter
Enter selection (default: JUnit 4) [1..4]
"""

_TOOL_CHAINS: dict[Language, str] = {
    Language.CPP: (
        "* An installed {cpp} compiler. See which "
        "link:{userManualPath}/building_cpp_projects.html#sec:cpp_supported_tool_chain"
        "[{cpp} tool chains] are supported by Gradle."
    ),
    Language.SWIFT: (
        "* An installed Swift compiler. See which "
        "link:{userManualPath}/building_swift_projects.html#sec:swift_supported_tool_chain"
        "[Swift tool chains] are supported by Gradle."
    ),
}


class SamplesGenerator:
    """Builds a documentation sample for one registered project type."""

    def __init__(self, registry: ProjectLayoutSetupRegistry) -> None:
        self.registry = registry

    async def generate(self, type_id: str, modularized: bool, target: str | Path) -> Path:
        """Generate both DSL variants and the README; return the README path."""
        descriptor = self.registry.get(type_id)
        target = Path(target)

        groovy_settings = self.settings_for(descriptor, modularized, BuildInitDsl.GROOVY, target)
        kotlin_settings = self.settings_for(descriptor, modularized, BuildInitDsl.KOTLIN, target)

        extracted = await descriptor.generate_with_external_comments(groovy_settings)
        await descriptor.generate_with_external_comments(kotlin_settings)
        comments = next(iter(extracted.values()), [])

        bindings = self.readme_bindings(descriptor, groovy_settings, comments)
        sections = [
            descriptor.renderer.render(f"readme/{fragment}.adoc.j2", bindings)
            for fragment in self.readme_fragments(descriptor)
        ]
        build_output = descriptor.renderer.render(
            f"readme/{self.specific_content_id(descriptor)}-build.out.j2",
            self.build_output_bindings(descriptor, groovy_settings),
        )
        sample_conf = descriptor.renderer.render("readme/build.sample.conf.j2", {})

        readme = await write_file(target / "README.adoc", "".join(sections))
        await write_file(target / "tests" / "build.out", build_output)
        await write_file(target / "tests" / "build.sample.conf", sample_conf)
        return readme

    # -- Settings ----------------------------------------------------------

    @staticmethod
    def settings_for(
        descriptor: CompositeProjectDescriptor,
        modularized: bool,
        dsl: BuildInitDsl,
        target: Path,
    ) -> InitSettings:
        if modularized and descriptor.topology is not None:
            subprojects = descriptor.topology.names()
        else:
            subprojects = (SAMPLE_PROJECT_NAME,)
        return InitSettings(
            project_name=SAMPLE_PROJECT_NAME,
            subprojects=subprojects,
            modularized=modularized,
            dsl=dsl,
            package_name=SAMPLE_PROJECT_NAME if descriptor.supports_package else None,
            test_framework=(
                TestFramework.JUNIT_JUPITER if modularized else descriptor.default_test_framework
            ),
            target=target / dsl.value,
        )

    # -- README ------------------------------------------------------------

    @staticmethod
    def specific_content_id(descriptor: CompositeProjectDescriptor) -> str:
        if descriptor.language.is_native:
            return f"native-{descriptor.component_type.value}"
        return descriptor.component_type.value

    def readme_fragments(self, descriptor: CompositeProjectDescriptor) -> list[str]:
        """Fragment names in README order."""
        specific = self.specific_content_id(descriptor)
        fragments = ["common-body", f"{specific}-body"]
        if descriptor.language is Language.JAVA and descriptor.component_type is ComponentType.LIBRARY:
            fragments.append(f"{specific}-api-docs")
        fragments += ["common-summary", f"{specific}-summary"]
        return fragments

    def readme_bindings(
        self,
        descriptor: CompositeProjectDescriptor,
        settings: InitSettings,
        comments: list[str],
    ) -> dict[str, str]:
        language = descriptor.language
        component = descriptor.component_type
        languages = self.registry.get_languages_for(component)
        component_types = self.registry.get_component_types()

        files = _sample_files(descriptor)
        further_reading = ""
        if descriptor.further_reading:
            further_reading = f"\n> Task :init\n{descriptor.further_reading}"

        return {
            "language": language.display_name,
            "language_lc": language.value,
            "language_index": str(languages.index(language) + 1),
            "component_type": component.value,
            "component_type_index": str(component_types.index(component) + 1),
            "package_name_choice": (
                f"Source package (default: {SAMPLE_PROJECT_NAME}):\n"
                if descriptor.supports_package
                else ""
            ),
            "further_reading": further_reading,
            "subproject_name": settings.subprojects[0],
            "tool_chain": _TOOL_CHAINS.get(language, ""),
            "example_class": files["example_class"],
            "source_file": files["source_file"],
            "test_source_file": files["test_source_file"],
            "source_file_tree": files["source_file_tree"],
            "test_source_file_tree": files["test_source_file_tree"],
            "test_framework": f"_{descriptor.default_test_framework.display_name}_",
            "build_file_comments": "\n".join(
                f"<{i}> {comment}" for i, comment in enumerate(comments, start=1)
            ),
            "test_framework_choice": (
                _TEST_FRAMEWORK_CHOICE if len(descriptor.test_frameworks) > 1 else ""
            ),
        }


    # -- Expected build output -----------------------------------------------

    @staticmethod
    def build_output_bindings(
        descriptor: CompositeProjectDescriptor, settings: InitSettings
    ) -> dict[str, str]:
        """Bindings for the ``gradle build`` transcript checked by the sample test."""
        language = descriptor.language
        subproject = settings.subprojects[0]
        kotlin = language is Language.KOTLIN

        extra_compile_java = ""
        extra_compile_test_java = ""
        if language is not Language.JAVA:
            extra_compile_java = f"> Task :{subproject}:compileJava NO-SOURCE\n"
            extra_compile_test_java = f"> Task :{subproject}:compileTestJava NO-SOURCE\n"

        tasks_executed = 4 if descriptor.component_type is ComponentType.LIBRARY else 7
        if kotlin:
            tasks_executed += 1

        return {
            "language": language.value.capitalize(),
            "subproject_name": subproject,
            "extra_compile_java": extra_compile_java,
            "extra_compile_test_java": extra_compile_test_java,
            "native_test_task_prefix": "xc" if language is Language.SWIFT else "run",
            "tasks_executed": str(tasks_executed),
            "classes_up_to_date": " UP-TO-DATE" if kotlin else "",
            "inspect_classes_for_kotlin_ic_task": (
                f"> Task :{subproject}:inspectClassesForKotlinIC\n" if kotlin else ""
            ),
        }


def _sample_files(descriptor: CompositeProjectDescriptor) -> dict[str, str]:
    """Example class and source file names shown in the README file trees."""
    language = descriptor.language
    library = descriptor.component_type is ComponentType.LIBRARY

    if language is Language.CPP:
        stem = "hello" if library else "app"
        header_dir, header = ("public", "hello.h") if library else ("headers", "app.h")
        source_file = f"{stem}.cpp"
        test_source_file = f"{stem}_test.cpp"
        return {
            "example_class": "Hello" if library else "Greeter",
            "source_file": source_file,
            "test_source_file": test_source_file,
            "source_file_tree": (
                f"        │   │   └── {source_file}\n"
                f"        │   └── {header_dir}\n"
                f"        │       └── {header}"
            ),
            "test_source_file_tree": f"                └── {test_source_file}",
        }

    if language is Language.SWIFT:
        example_class = "Hello" if library else "Greeter"
        source_file = f"{'Hello' if library else 'main'}.swift"
        test_source_file = f"{example_class}Tests.swift"
        return {
            "example_class": example_class,
            "source_file": source_file,
            "test_source_file": test_source_file,
            "source_file_tree": f"        │       └── {source_file}",
            "test_source_file_tree": (
                f"                └── {test_source_file}\n"
                "                └── LinuxMain.swift"
            ),
        }

    example_class = "Library" if library else "App"
    suffix = "Suite" if language is Language.SCALA else "Test"
    extension = language.extension
    return {
        "example_class": example_class,
        "source_file": f"{SAMPLE_PROJECT_NAME}/{example_class}.{extension}",
        "test_source_file": f"{SAMPLE_PROJECT_NAME}/{example_class}{suffix}.{extension}",
        "source_file_tree": (
            f"        │       └── {SAMPLE_PROJECT_NAME}\n"
            f"        │           └── {example_class}.{extension}"
        ),
        "test_source_file_tree": (
            f"        │       └── {SAMPLE_PROJECT_NAME}\n"
            f"        │           └── {example_class}{suffix}.{extension}"
        ),
    }
