"""Core enumerations and value objects for build initialisation.

Defines the vocabulary shared by every other module: the implementation
languages a project can be generated in, the component shapes, the two
build-script dialects, the supported test frameworks and the source roles a
template can target.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Implementation language of a generated project."""
    JAVA = "java"
    GROOVY = "groovy"
    KOTLIN = "kotlin"
    SCALA = "scala"
    CPP = "cpp"
    SWIFT = "swift"

    @property
    def display_name(self) -> str:
        return _LANGUAGE_DISPLAY_NAMES[self]

    @property
    def extension(self) -> str:
        """Source file extension, without the leading dot."""
        return _LANGUAGE_EXTENSIONS[self]

    @property
    def is_native(self) -> bool:
        return self in (Language.CPP, Language.SWIFT)

    def __str__(self) -> str:
        return self.display_name


_LANGUAGE_DISPLAY_NAMES: dict[Language, str] = {
    Language.JAVA: "Java",
    Language.GROOVY: "Groovy",
    Language.KOTLIN: "Kotlin",
    Language.SCALA: "Scala",
    Language.CPP: "C++",
    Language.SWIFT: "Swift",
}

_LANGUAGE_EXTENSIONS: dict[Language, str] = {
    Language.JAVA: "java",
    Language.GROOVY: "groovy",
    Language.KOTLIN: "kt",
    Language.SCALA: "scala",
    Language.CPP: "cpp",
    Language.SWIFT: "swift",
}


class ComponentType(str, Enum):
    """Shape of the generated component."""
    APPLICATION = "application"
    LIBRARY = "library"

    def __str__(self) -> str:
        return self.value


class BuildInitDsl(str, Enum):
    """Build-script dialect."""
    GROOVY = "groovy"
    KOTLIN = "kotlin"

    @property
    def display_name(self) -> str:
        return "Groovy" if self is BuildInitDsl.GROOVY else "Kotlin"

    @property
    def file_extension(self) -> str:
        return ".gradle" if self is BuildInitDsl.GROOVY else ".gradle.kts"

    def file_name(self, base_name: str) -> str:
        """Append the dialect's script extension to *base_name*."""
        return base_name + self.file_extension

    def __str__(self) -> str:
        return self.display_name


class TestFramework(str, Enum):
    """Test framework wired into a generated build."""
    JUNIT = "junit"
    JUNIT_JUPITER = "junit-jupiter"
    TESTNG = "testng"
    SPOCK = "spock"
    KOTLINTEST = "kotlintest"
    SCALATEST = "scalatest"
    CPPTEST = "cpptest"
    XCTEST = "xctest"

    __test__ = False  # keep pytest from collecting the enum

    @property
    def display_name(self) -> str:
        return _TEST_FRAMEWORK_LABELS[self]

    def __str__(self) -> str:
        return self.display_name


_TEST_FRAMEWORK_LABELS: dict[TestFramework, str] = {
    TestFramework.JUNIT: "JUnit 4",
    TestFramework.JUNIT_JUPITER: "JUnit Jupiter",
    TestFramework.TESTNG: "TestNG",
    TestFramework.SPOCK: "Spock",
    TestFramework.KOTLINTEST: "kotlin.test",
    TestFramework.SCALATEST: "ScalaTest",
    TestFramework.CPPTEST: "C++ Test",
    TestFramework.XCTEST: "XCTest",
}


class SourceRole(str, Enum):
    """Source set a template is materialised into."""
    MAIN = "main"
    TEST = "test"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Template specification
# ---------------------------------------------------------------------------

class TemplateSpec(BaseModel):
    """A single source or test template resolved for one subproject.

    ``language`` is the language the template is written in.  It normally
    matches the project language but may differ (a Spock specification is
    always Groovy, even inside a Java project).
    """

    model_config = ConfigDict(frozen=True)

    template: str = Field(..., description="Template key relative to the template root")
    role: SourceRole = Field(..., description="Source set the file lands in")
    subproject: str = Field(..., description="Owning subproject name")
    language: Language = Field(..., description="Language the template is written in")
    target_dir: Optional[str] = Field(
        default=None,
        description="Directory under src/<role>/ (defaults to the language name)",
    )
    package_name: Optional[str] = Field(
        default=None, description="Package the generated file belongs to"
    )

    @property
    def file_name(self) -> str:
        """Output file name: the template's base name without ``.j2``."""
        base = self.template.rsplit("/", 1)[-1]
        return base[: -len(".j2")] if base.endswith(".j2") else base

    @property
    def class_name(self) -> str:
        return self.file_name.split(".", 1)[0]
