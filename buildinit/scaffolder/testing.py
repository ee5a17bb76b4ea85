"""Test framework wiring for generated build scripts.

Each test framework maps to a fixed recipe: plugins to apply, dependency
declarations whose coordinates carry ``{key}`` version placeholders resolved
through :class:`~buildinit.versions.LibraryVersionProvider`, and optionally a
method to call on the ``test`` task.  Spock is the only framework whose
recipe depends on the project language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from buildinit.buildscript.builder import BuildScriptBuilder
from buildinit.models import Language, TestFramework
from buildinit.versions import LibraryVersionProvider


@dataclass(frozen=True)
class PluginRecipe:
    comment: str
    plugin_id: str


@dataclass(frozen=True)
class DependencyRecipe:
    configuration: str
    comment: str
    notations: tuple[str, ...]
    platform: bool = False


@dataclass(frozen=True)
class TaskMethodRecipe:
    comment: str
    method: str
    task_name: str = "test"
    task_type: str = "Test"


@dataclass(frozen=True)
class TestFrameworkRecipe:
    """Everything a build script needs to run tests with one framework."""

    __test__ = False

    plugins: tuple[PluginRecipe, ...] = ()
    dependencies: tuple[DependencyRecipe, ...] = ()
    task_method: Optional[TaskMethodRecipe] = None

    def apply(self, builder: BuildScriptBuilder, versions: LibraryVersionProvider) -> None:
        """Append this recipe to *builder*, resolving every version placeholder.

        Raises:
            VersionNotFoundError: If a placeholder names an unknown key.
        """
        for plugin in self.plugins:
            builder.plugin(plugin.comment, plugin.plugin_id)
        for dep in self.dependencies:
            comment = versions.expand(dep.comment)
            notations = [versions.expand(n) for n in dep.notations]
            if dep.platform:
                for notation in notations:
                    builder.dependencies().platform_dependency(dep.configuration, comment, notation)
            else:
                builder.dependencies().dependency(dep.configuration, comment, *notations)
        if self.task_method is not None:
            builder.task_method_invocation(
                self.task_method.comment,
                self.task_method.task_name,
                self.task_method.task_type,
                self.task_method.method,
            )


# ---------------------------------------------------------------------------
# Recipe table
# ---------------------------------------------------------------------------

_SPOCK_DEPENDENCY = DependencyRecipe(
    "testImplementation",
    "Use the awesome Spock testing and specification framework even with Java",
    ("org.spockframework:spock-core:{spock}", "junit:junit:{junit}"),
)

# Keyed by (framework, language); a language of None matches any language.
_RECIPES: dict[tuple[TestFramework, Optional[Language]], TestFrameworkRecipe] = {
    (TestFramework.JUNIT, None): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe("testImplementation", "Use JUnit test framework.", ("junit:junit:{junit}",)),
        ),
    ),
    (TestFramework.JUNIT_JUPITER, None): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe(
                "testImplementation",
                "Use JUnit Jupiter API for testing.",
                ("org.junit.jupiter:junit-jupiter-api:{junit-jupiter}",),
            ),
            DependencyRecipe(
                "testRuntimeOnly",
                "Use JUnit Jupiter Engine for testing.",
                ("org.junit.jupiter:junit-jupiter-engine:{junit-jupiter}",),
            ),
        ),
        task_method=TaskMethodRecipe("Use junit platform for unit tests.", "useJUnitPlatform"),
    ),
    (TestFramework.TESTNG, None): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe(
                "testImplementation",
                "Use TestNG framework, also requires calling test.useTestNG() below",
                ("org.testng:testng:{testng}",),
            ),
        ),
        task_method=TaskMethodRecipe("Use TestNG for unit tests.", "useTestNG"),
    ),
    (TestFramework.SPOCK, Language.GROOVY): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe(
                "implementation",
                "Use the latest Groovy version for building this library",
                ("org.codehaus.groovy:groovy-all:{groovy}",),
            ),
            _SPOCK_DEPENDENCY,
        ),
    ),
    (TestFramework.SPOCK, None): TestFrameworkRecipe(
        plugins=(
            PluginRecipe("Apply the groovy plugin to also add support for Groovy (needed for Spock)", "groovy"),
        ),
        dependencies=(
            DependencyRecipe(
                "testImplementation",
                "Use the latest Groovy version for Spock testing",
                ("org.codehaus.groovy:groovy-all:{groovy}",),
            ),
            _SPOCK_DEPENDENCY,
        ),
    ),
    (TestFramework.SCALATEST, None): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe(
                "implementation",
                "Use Scala {scala} in our library project",
                ("org.scala-lang:scala-library:{scala-library}",),
            ),
            DependencyRecipe(
                "testImplementation",
                "Use Scalatest for testing our library",
                (
                    "junit:junit:{scala-junit}",
                    "org.scalatest:scalatest_{scala}:{scalatest}",
                    "org.scalatestplus:junit-4-12_{scala}:{scalatestplus-junit}",
                ),
            ),
            DependencyRecipe(
                "testRuntimeOnly",
                "Need scala-xml at test runtime",
                ("org.scala-lang.modules:scala-xml_{scala}:{scala-xml}",),
            ),
        ),
    ),
    (TestFramework.KOTLINTEST, None): TestFrameworkRecipe(
        dependencies=(
            DependencyRecipe(
                "implementation",
                "Align versions of all Kotlin components",
                ("org.jetbrains.kotlin:kotlin-bom",),
                platform=True,
            ),
            DependencyRecipe(
                "implementation",
                "Use the Kotlin JDK 8 standard library.",
                ("org.jetbrains.kotlin:kotlin-stdlib-jdk8",),
            ),
            DependencyRecipe(
                "testImplementation", "Use the Kotlin test library.", ("org.jetbrains.kotlin:kotlin-test",)
            ),
            DependencyRecipe(
                "testImplementation",
                "Use the Kotlin JUnit integration.",
                ("org.jetbrains.kotlin:kotlin-test-junit",),
            ),
        ),
    ),
    (TestFramework.CPPTEST, None): TestFrameworkRecipe(
        plugins=(
            PluginRecipe(
                "Apply the cpp-unit-test plugin to add support for building and running C++ test executables.",
                "cpp-unit-test",
            ),
        ),
    ),
    (TestFramework.XCTEST, None): TestFrameworkRecipe(
        plugins=(
            PluginRecipe(
                "Apply the xctest plugin to add support for building and running Swift test executables (Linux) or bundles (macOS).",
                "xctest",
            ),
        ),
    ),
}


def recipe_for(test_framework: TestFramework, language: Language) -> TestFrameworkRecipe:
    """Return the recipe for *test_framework* in a *language* project.

    Raises:
        KeyError: If no recipe exists for the framework.
    """
    recipe = _RECIPES.get((test_framework, language)) or _RECIPES.get((test_framework, None))
    if recipe is None:
        raise KeyError(f"No build recipe for test framework '{test_framework.value}'")
    return recipe
