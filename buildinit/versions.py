"""Pinned library versions for generated build scripts.

Generated builds never resolve versions themselves; every coordinate is
stamped with a version looked up by symbolic key from a JSON table shipped
with the package (``library-versions.json``).  An alternative table can be
supplied with :meth:`LibraryVersionProvider.from_file`.
"""

from __future__ import annotations

import re
from pathlib import Path

from buildinit.utils import load_json

_DEFAULT_VERSIONS_FILE = Path(__file__).parent / "library-versions.json"

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_.-]+)\}")


class VersionNotFoundError(LookupError):
    """Raised when a symbolic library key has no pinned version."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No version is pinned for library key '{key}'")


class LibraryVersionProvider:
    """Read-only lookup table of ``{symbolic key: version}``."""

    def __init__(self, versions: dict[str, str] | None = None) -> None:
        if versions is None:
            versions = load_json(_DEFAULT_VERSIONS_FILE)
        self._versions = {str(k): str(v) for k, v in versions.items()}

    @classmethod
    def from_file(cls, path: str | Path) -> "LibraryVersionProvider":
        """Load a version table from a JSON file."""
        return cls(load_json(path))

    def get_version(self, key: str) -> str:
        """Return the pinned version for *key*.

        Raises:
            VersionNotFoundError: If *key* is not in the table.
        """
        try:
            return self._versions[key]
        except KeyError:
            raise VersionNotFoundError(key) from None

    def expand(self, notation: str) -> str:
        """Replace every ``{key}`` placeholder in *notation* with its version.

        E.g. ``"junit:junit:{junit}"`` -> ``"junit:junit:4.13"``.
        """
        return _PLACEHOLDER_RE.sub(lambda m: self.get_version(m.group(1)), notation)

    def keys(self) -> list[str]:
        return sorted(self._versions)

    def __contains__(self, key: object) -> bool:
        return key in self._versions
