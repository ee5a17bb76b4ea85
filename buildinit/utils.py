"""Shared utility functions for buildinit.

Provides JSON loading, async file writes, package name helpers and
Rich-based console reporting.
"""

from __future__ import annotations

import asyncio
import json
import keyword
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def derive_package_name(project_name: str) -> str:
    """Derive a JVM package name from a project name.

    Non-identifier characters are dropped and the result is lower-cased, as
    ``gradle init`` does.  Returns an empty string when nothing usable is
    left.

    Examples::

        derive_package_name("demo") -> "demo"
        derive_package_name("My-App 2") -> "myapp2"
    """
    candidate = re.sub(r"[^a-zA-Z0-9_]", "", project_name).lower()
    candidate = candidate.lstrip("0123456789")
    return candidate


def is_valid_package_name(package_name: str) -> bool:
    """Return ``True`` if *package_name* is a dotted sequence of identifiers."""
    if not package_name:
        return False
    for part in package_name.split("."):
        if not part.isidentifier() or keyword.iskeyword(part):
            return False
    return True


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


async def write_file(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories as needed."""
    out = Path(path)
    await asyncio.to_thread(_write_file, out, content)
    return out


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
