"""buildinit configuration.

Two layers of typed configuration, both Pydantic v2 models:

- :class:`Config` is what a caller (the CLI, an environment, a saved JSON
  file) asks for.  Most fields are optional and fall back to the chosen
  project descriptor's defaults.
- :class:`InitSettings` is the fully resolved, read-only configuration of one
  generation run.  It is produced by :meth:`Config.resolve`, which performs
  every configuration check before a single file is written.
"""

from __future__ import annotations

import os
from pathlib import Path
from enum import Enum
from typing import TYPE_CHECKING, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from buildinit.models import BuildInitDsl, TestFramework
from buildinit.utils import derive_package_name, is_valid_package_name

if TYPE_CHECKING:  # pragma: no cover
    from buildinit.scaffolder.descriptors import ProjectInitDescriptor

E = TypeVar("E", bound=Enum)


class ConfigurationError(Exception):
    """Raised when the requested configuration cannot be generated.

    Always raised before any file is written.
    """


# ---------------------------------------------------------------------------
# Resolved per-run settings
# ---------------------------------------------------------------------------


class InitSettings(BaseModel):
    """Resolved configuration for one generation run."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1)
    subprojects: tuple[str, ...] = Field(..., min_length=1)
    modularized: bool = Field(default=False)
    dsl: BuildInitDsl = Field(default=BuildInitDsl.GROOVY)
    package_name: Optional[str] = Field(default=None)
    test_framework: TestFramework = Field(...)
    target: Path = Field(..., description="Root directory of the generated build")

    @model_validator(mode="after")
    def _check_subprojects(self) -> "InitSettings":
        if not self.modularized and len(self.subprojects) != 1:
            raise ValueError(
                "Exactly one subproject is required unless the build is modularized"
            )
        if len(set(self.subprojects)) != len(self.subprojects):
            raise ValueError(f"Duplicate subproject names: {list(self.subprojects)}")
        return self

    def check_against(self, descriptor: "ProjectInitDescriptor") -> None:
        """Reject settings that *descriptor* cannot generate.

        Applies the same rules as :meth:`Config.resolve` to settings built by
        hand.

        Raises:
            ConfigurationError: On the first rule the settings break.
        """
        if self.modularized and not descriptor.supports_modularization:
            raise ConfigurationError(
                f"Project type '{descriptor.id}' does not support modularization"
            )
        _check_test_framework(descriptor, self.test_framework, self.modularized)

        if descriptor.supports_package:
            if not self.package_name:
                raise ConfigurationError(f"A package name is required for '{descriptor.id}'")
            if not is_valid_package_name(self.package_name):
                raise ConfigurationError(f"Package name '{self.package_name}' is not valid")
        elif self.package_name:
            raise ConfigurationError(f"Package name is not supported for '{descriptor.id}'")

        if self.modularized and descriptor.topology is not None:
            known = descriptor.topology.names()
            unknown = [name for name in self.subprojects if name not in known]
            if unknown:
                raise ConfigurationError(
                    f"Unknown subproject(s) for '{descriptor.id}': {', '.join(unknown)}"
                )

    def subproject_dir(self, subproject: str) -> Path:
        """Root directory of *subproject* (the target itself when single-module)."""
        if not self.modularized:
            return self.target
        return self.target / subproject

    def build_file_base(self, subproject: str) -> str:
        """Build script path relative to the target, without the DSL extension."""
        if not self.modularized:
            return "build"
        return f"{subproject}/build"


# ---------------------------------------------------------------------------
# User-facing configuration
# ---------------------------------------------------------------------------


class Config(BaseModel):
    """What to generate, before descriptor defaults are applied."""

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("."))
    project_type: str = Field(default="java-application", description="Descriptor id")
    dsl: Optional[BuildInitDsl] = Field(default=None)
    test_framework: Optional[TestFramework] = Field(default=None)
    package_name: Optional[str] = Field(default=None)
    modularized: bool = Field(default=False)
    subprojects: list[str] = Field(default_factory=list)
    template_dir: Optional[Path] = Field(
        default=None, description="Override for the bundled template directory"
    )
    versions_file: Optional[Path] = Field(
        default=None, description="JSON file overriding the pinned library versions"
    )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, descriptor: "ProjectInitDescriptor") -> InitSettings:
        """Apply *descriptor* defaults and validate the result.

        Raises:
            ConfigurationError: If the combination cannot be generated.
        """
        project_name = self.project_name or self.output_dir.resolve().name
        if not project_name:
            raise ConfigurationError("A project name is required")

        if self.modularized and not descriptor.supports_modularization:
            raise ConfigurationError(
                f"Project type '{descriptor.id}' does not support modularization"
            )

        test_framework = self._resolve_test_framework(descriptor)
        package_name = self._resolve_package_name(descriptor, project_name)
        subprojects = self._resolve_subprojects(descriptor, project_name)

        try:
            return InitSettings(
                project_name=project_name,
                subprojects=subprojects,
                modularized=self.modularized,
                dsl=self.dsl or descriptor.default_dsl,
                package_name=package_name,
                test_framework=test_framework,
                target=self.output_dir,
            )
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    def _resolve_test_framework(
        self, descriptor: "ProjectInitDescriptor"
    ) -> TestFramework:
        if self.modularized:
            allowed = descriptor.modular_test_frameworks
            default = allowed[0] if allowed else descriptor.default_test_framework
        else:
            default = descriptor.default_test_framework

        test_framework = self.test_framework or default
        _check_test_framework(descriptor, test_framework, self.modularized)
        return test_framework

    def _resolve_package_name(
        self, descriptor: "ProjectInitDescriptor", project_name: str
    ) -> Optional[str]:
        if not descriptor.supports_package:
            if self.package_name:
                raise ConfigurationError(
                    f"Package name is not supported for '{descriptor.id}'"
                )
            return None

        package_name = self.package_name or derive_package_name(project_name)
        if not package_name:
            raise ConfigurationError(
                f"A package name is required for '{descriptor.id}' and none could be "
                f"derived from project name '{project_name}'"
            )
        if not is_valid_package_name(package_name):
            raise ConfigurationError(f"Package name '{package_name}' is not valid")
        return package_name

    def _resolve_subprojects(
        self, descriptor: "ProjectInitDescriptor", project_name: str
    ) -> tuple[str, ...]:
        if not self.modularized:
            if len(self.subprojects) > 1:
                raise ConfigurationError(
                    "Several subprojects were requested but the build is not modularized"
                )
            return (self.subprojects[0],) if self.subprojects else (project_name,)

        topology = descriptor.topology
        known = topology.names() if topology is not None else ()
        requested = tuple(self.subprojects) or known
        unknown = [name for name in requested if name not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown subproject(s) for '{descriptor.id}': {', '.join(unknown)} "
                f"(expected any of: {', '.join(known)})"
            )
        missing = sorted(topology.required_modules(requested) - set(requested)) if topology else []
        if missing:
            raise ConfigurationError(
                f"Subproject(s) {', '.join(missing)} are required by the requested "
                "subprojects and must be included"
            )
        return requested

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            BUILDINIT_PROJECT_NAME, BUILDINIT_OUTPUT_DIR, BUILDINIT_TYPE,
            BUILDINIT_DSL, BUILDINIT_TEST_FRAMEWORK, BUILDINIT_PACKAGE,
            BUILDINIT_MODULARIZED, BUILDINIT_TEMPLATE_DIR,
            BUILDINIT_VERSIONS_FILE.
        """
        kwargs: dict[str, object] = {
            "project_name": os.environ.get("BUILDINIT_PROJECT_NAME", ""),
            "output_dir": Path(os.environ.get("BUILDINIT_OUTPUT_DIR", ".")),
            "project_type": os.environ.get("BUILDINIT_TYPE", "java-application"),
            "modularized": _env_bool("BUILDINIT_MODULARIZED", default=False),
        }
        if os.environ.get("BUILDINIT_DSL"):
            kwargs["dsl"] = _env_enum("BUILDINIT_DSL", BuildInitDsl)
        if os.environ.get("BUILDINIT_TEST_FRAMEWORK"):
            kwargs["test_framework"] = _env_enum("BUILDINIT_TEST_FRAMEWORK", TestFramework)
        if os.environ.get("BUILDINIT_PACKAGE"):
            kwargs["package_name"] = os.environ["BUILDINIT_PACKAGE"]
        if os.environ.get("BUILDINIT_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["BUILDINIT_TEMPLATE_DIR"])
        if os.environ.get("BUILDINIT_VERSIONS_FILE"):
            kwargs["versions_file"] = Path(os.environ["BUILDINIT_VERSIONS_FILE"])
        return cls(**kwargs)


def _check_test_framework(
    descriptor: "ProjectInitDescriptor", test_framework: TestFramework, modularized: bool
) -> None:
    allowed = descriptor.modular_test_frameworks if modularized else descriptor.test_frameworks
    if test_framework not in allowed:
        supported = ", ".join(tf.value for tf in allowed) or "none"
        raise ConfigurationError(
            f"The requested test framework '{test_framework.value}' is not supported "
            f"for '{descriptor.id}' (supported: {supported})"
        )


def _env_enum(name: str, enum_cls: type[E]) -> E:
    raw = os.environ[name]
    try:
        return enum_cls(raw)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"{name}={raw!r} is not valid (expected one of: {choices})"
        ) from None


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default
