"""Tests for the JVM and native project descriptors.

Covers:
- Identity, defaults and supported test frameworks
- Build script content for single-module and modularized builds
- Template selection per language, component type and test framework
- Source generation through a TemplateFactory
"""

from __future__ import annotations

import pytest

from buildinit.buildscript.builder import BuildScriptBuilder, ScriptBlock
from buildinit.models import BuildInitDsl, ComponentType, Language, SourceRole, TestFramework
from buildinit.scaffolder.descriptors import (
    GROOVY,
    JAVA,
    JAVA_APPLICATION_TOPOLOGY,
    KOTLIN,
    SCALA,
    JvmProjectInitDescriptor,
    NativeProjectInitDescriptor,
    documentation_for,
)
from buildinit.scaffolder.sources import TemplateFactory


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def java_application(versions) -> JvmProjectInitDescriptor:
    return JvmProjectInitDescriptor(
        JAVA,
        ComponentType.APPLICATION,
        versions,
        topology=JAVA_APPLICATION_TOPOLOGY,
        modular_test_frameworks=(TestFramework.JUNIT_JUPITER,),
    )


def _script(descriptor, name, settings) -> BuildScriptBuilder:
    builder = BuildScriptBuilder()
    descriptor.generate_build_script(name, settings, builder)
    return builder


def _template_keys(descriptor, settings, mock_renderer, subproject="demo") -> list[str]:
    factory = TemplateFactory(settings, descriptor.language, mock_renderer)
    return [s.template for s in descriptor.template_specs(subproject, settings, factory)]


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIdentity:
    @pytest.mark.parametrize(
        "description,component,expected",
        [
            (JAVA, ComponentType.APPLICATION, "java-application"),
            (GROOVY, ComponentType.LIBRARY, "groovy-library"),
            (KOTLIN, ComponentType.APPLICATION, "kotlin-application"),
            (SCALA, ComponentType.LIBRARY, "scala-library"),
        ],
    )
    def test_jvm_ids(self, versions, description, component, expected):
        assert JvmProjectInitDescriptor(description, component, versions).id == expected

    def test_native_id(self, versions):
        assert NativeProjectInitDescriptor(Language.SWIFT, ComponentType.LIBRARY, versions).id == "swift-library"

    def test_native_rejects_jvm_language(self, versions):
        with pytest.raises(ValueError):
            NativeProjectInitDescriptor(Language.JAVA, ComponentType.LIBRARY, versions)

    def test_kotlin_defaults_to_kotlin_dsl(self, versions):
        kotlin = JvmProjectInitDescriptor(KOTLIN, ComponentType.LIBRARY, versions)
        assert kotlin.default_dsl is BuildInitDsl.KOTLIN
        assert JvmProjectInitDescriptor(SCALA, ComponentType.LIBRARY, versions).default_dsl is BuildInitDsl.GROOVY

    def test_java_test_frameworks(self, java_application):
        assert java_application.default_test_framework is TestFramework.JUNIT
        assert java_application.test_frameworks == (
            TestFramework.JUNIT,
            TestFramework.TESTNG,
            TestFramework.SPOCK,
            TestFramework.JUNIT_JUPITER,
        )
        assert java_application.modular_test_frameworks == (TestFramework.JUNIT_JUPITER,)

    def test_modularization_support(self, java_application, versions):
        assert java_application.supports_modularization
        assert not JvmProjectInitDescriptor(JAVA, ComponentType.LIBRARY, versions).supports_modularization
        assert not NativeProjectInitDescriptor(Language.CPP, ComponentType.APPLICATION, versions).supports_modularization

    def test_package_support(self, java_application, versions):
        assert java_application.supports_package
        assert not NativeProjectInitDescriptor(Language.CPP, ComponentType.LIBRARY, versions).supports_package

    def test_further_reading(self, java_application, versions):
        assert java_application.further_reading == documentation_for("tutorial_java_projects")
        assert JvmProjectInitDescriptor(KOTLIN, ComponentType.LIBRARY, versions).further_reading is None
        swift = NativeProjectInitDescriptor(Language.SWIFT, ComponentType.APPLICATION, versions)
        assert swift.further_reading == "https://docs.gradle.org/current/userguide/building_swift_projects.html"


# ---------------------------------------------------------------------------
# Single-module build scripts
# ---------------------------------------------------------------------------


class TestSingleModuleBuildScript:
    def test_java_application(self, java_application, single_settings):
        text = _script(java_application, "demo", single_settings).render(BuildInitDsl.GROOVY)
        assert text == (
            "/*\n"
            " * This generated file contains a sample Java application project to get you started.\n"
            " * For more details take a look at the Java Quickstart chapter in the Gradle\n"
            " * User Manual available at https://docs.gradle.org/current/userguide/tutorial_java_projects.html\n"
            " */\n"
            "\n"
            "plugins {\n"
            "    // Apply the application plugin to add support for building a CLI application in Java.\n"
            "    id 'application'\n"
            "}\n"
            "\n"
            "repositories {\n"
            "    // Use JCenter for resolving dependencies.\n"
            "    jcenter()\n"
            "}\n"
            "\n"
            "dependencies {\n"
            "    // Use JUnit test framework.\n"
            "    testImplementation 'junit:junit:4.13'\n"
            "\n"
            "    // This dependency is used by the application.\n"
            "    implementation 'com.google.guava:guava:29.0-jre'\n"
            "}\n"
            "\n"
            "application {\n"
            "    // Define the main class for the application.\n"
            "    mainClass = 'demo.App'\n"
            "}\n"
        )

    def test_java_library(self, versions, single_settings):
        descriptor = JvmProjectInitDescriptor(JAVA, ComponentType.LIBRARY, versions)
        builder = _script(descriptor, "demo", single_settings)
        assert [p.plugin_id for p in builder.plugins] == ["java-library"]
        assert [(d.configuration, d.notations) for d in builder.dependencies_][1:] == [
            ("api", ("org.apache.commons:commons-math3:3.6.1",)),
            ("implementation", ("com.google.guava:guava:29.0-jre",)),
        ]
        assert builder.statements == []

    def test_kotlin_plugin_is_versioned(self, versions, make_settings):
        descriptor = JvmProjectInitDescriptor(KOTLIN, ComponentType.APPLICATION, versions)
        settings = make_settings(dsl=BuildInitDsl.KOTLIN, test_framework=TestFramework.KOTLINTEST)
        text = _script(descriptor, "demo", settings).render(BuildInitDsl.KOTLIN)
        assert '    id("org.jetbrains.kotlin.jvm") version "1.4.10"' in text
        assert '    mainClass.set("demo.AppKt")' in text

    def test_groovy_plugin_comment(self, versions, make_settings):
        descriptor = JvmProjectInitDescriptor(GROOVY, ComponentType.LIBRARY, versions)
        builder = _script(descriptor, "demo", make_settings(test_framework=TestFramework.SPOCK))
        assert builder.plugins[0].comment == "Apply the groovy Plugin to add support for Groovy."

    def test_testng_configures_test_task(self, java_application, make_settings):
        builder = _script(java_application, "demo", make_settings(test_framework=TestFramework.TESTNG))
        assert "tasks.named('test') {\n    // Use TestNG for unit tests.\n    useTestNG()\n}\n" in builder.render(
            BuildInitDsl.GROOVY
        )

    def test_cpp_application(self, versions, make_settings):
        descriptor = NativeProjectInitDescriptor(Language.CPP, ComponentType.APPLICATION, versions)
        settings = make_settings(package_name=None, test_framework=TestFramework.CPPTEST)
        builder = _script(descriptor, "demo", settings)
        assert [p.plugin_id for p in builder.plugins] == ["cpp-application", "cpp-unit-test"]
        assert builder.plugins[0].comment == (
            "Apply the cpp-application plugin to add support for building C++ executables"
        )
        assert builder.repositories_ == []

    def test_swift_library(self, versions, make_settings):
        descriptor = NativeProjectInitDescriptor(Language.SWIFT, ComponentType.LIBRARY, versions)
        settings = make_settings(package_name=None, test_framework=TestFramework.XCTEST)
        builder = _script(descriptor, "demo", settings)
        assert [p.plugin_id for p in builder.plugins] == ["swift-library", "xctest"]
        assert "building Swift libraries" in builder.plugins[0].comment


# ---------------------------------------------------------------------------
# Modularized build scripts
# ---------------------------------------------------------------------------


class TestModularizedBuildScripts:
    def test_common_convention(self, java_application, modular_settings):
        builder = _script(java_application, "common", modular_settings)
        assert [p.plugin_id for p in builder.plugins] == ["java"]
        assert [r.kind for r in builder.repositories_] == ["jcenter"]
        assert builder.statements[0].method == "useJUnitPlatform"

    def test_application_convention(self, java_application, modular_settings):
        builder = _script(java_application, "application", modular_settings)
        assert [p.plugin_id for p in builder.plugins] == ["demo.java-common-conventions", "application"]
        assert builder.dependencies_ == []

    def test_library_convention(self, java_application, modular_settings):
        builder = _script(java_application, "library", modular_settings)
        assert [p.plugin_id for p in builder.plugins] == ["demo.java-common-conventions", "java-library"]

    def test_app_subproject(self, java_application, modular_settings):
        builder = _script(java_application, "app", modular_settings)
        assert [p.plugin_id for p in builder.plugins] == ["demo.java-application-conventions"]
        assert [(d.configuration, d.notations, d.kind) for d in builder.dependencies_] == [
            ("implementation", (":utilities",), "project")
        ]
        (block,) = builder.statements
        assert isinstance(block, ScriptBlock)
        assert block.statements[0].value == "demo.app.App"

    def test_utilities_subproject(self, java_application, modular_settings):
        text = _script(java_application, "utilities", modular_settings).render(BuildInitDsl.KOTLIN)
        assert text == (
            "plugins {\n"
            '    id("demo.java-library-conventions")\n'
            "}\n"
            "\n"
            "dependencies {\n"
            '    api(project(":list"))\n'
            "}\n"
        )

    def test_list_subproject_has_no_dependencies(self, java_application, modular_settings):
        builder = _script(java_application, "list", modular_settings)
        assert builder.dependencies_ == []


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestTemplateSelection:
    @pytest.mark.parametrize(
        "framework,test_template",
        [
            (TestFramework.JUNIT, "javaapplication/junit4/AppTest.java.j2"),
            (TestFramework.JUNIT_JUPITER, "javaapplication/junitjupiter/AppTest.java.j2"),
            (TestFramework.TESTNG, "javaapplication/testng/AppTest.java.j2"),
            (TestFramework.SPOCK, "javaapplication/groovy/AppTest.groovy.j2"),
        ],
    )
    def test_java_application(self, java_application, make_settings, mock_renderer, framework, test_template):
        settings = make_settings(test_framework=framework)
        assert _template_keys(java_application, settings, mock_renderer) == [
            "javaapplication/App.java.j2",
            test_template,
        ]

    def test_spock_spec_is_groovy(self, java_application, make_settings, mock_renderer):
        settings = make_settings(test_framework=TestFramework.SPOCK)
        factory = TemplateFactory(settings, Language.JAVA, mock_renderer)
        specs = java_application.template_specs("demo", settings, factory)
        assert specs[1].language is Language.GROOVY
        assert specs[1].role is SourceRole.TEST

    def test_scala_library_uses_suite(self, versions, make_settings, mock_renderer):
        descriptor = JvmProjectInitDescriptor(SCALA, ComponentType.LIBRARY, versions)
        settings = make_settings(test_framework=TestFramework.SCALATEST)
        assert _template_keys(descriptor, settings, mock_renderer) == [
            "scalalibrary/Library.scala.j2",
            "scalalibrary/LibrarySuite.scala.j2",
        ]

    def test_modular_templates_per_subproject(self, java_application, modular_settings, mock_renderer):
        assert _template_keys(java_application, modular_settings, mock_renderer, "utilities") == [
            "javaapplication/multi/utilities/JoinUtils.java.j2",
            "javaapplication/multi/utilities/SplitUtils.java.j2",
            "javaapplication/multi/utilities/StringUtils.java.j2",
        ]
        assert _template_keys(java_application, modular_settings, mock_renderer, "list") == [
            "javaapplication/multi/list/LinkedList.java.j2",
            "javaapplication/multi/list/junitjupiter/LinkedListTest.java.j2",
        ]

    def test_cpp_library_targets(self, versions, make_settings, mock_renderer):
        descriptor = NativeProjectInitDescriptor(Language.CPP, ComponentType.LIBRARY, versions)
        settings = make_settings(package_name=None, test_framework=TestFramework.CPPTEST)
        factory = TemplateFactory(settings, Language.CPP, mock_renderer)
        specs = descriptor.template_specs("demo", settings, factory)
        assert [(s.template, s.role, s.target_dir) for s in specs] == [
            ("cpplibrary/hello.cpp.j2", SourceRole.MAIN, None),
            ("cpplibrary/hello.h.j2", SourceRole.MAIN, "public"),
            ("cpplibrary/hello_test.cpp.j2", SourceRole.TEST, None),
        ]


class TestGenerateSources:
    async def test_one_report_per_subproject(self, java_application, modular_settings, mock_renderer):
        factory = TemplateFactory(modular_settings, Language.JAVA, mock_renderer)
        reports = await java_application.generate_sources(modular_settings, factory)
        assert [r.subproject for r in reports] == ["app", "list", "utilities"]
        assert [len(r.written) for r in reports] == [3, 2, 3]
