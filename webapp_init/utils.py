"""Shared utility functions for webapp-init.

Provides async command execution, tool discovery, file-system helpers and
Rich-based console reporting.  All operator-facing output goes through the
module-level ``console`` so tests can capture it and callers never mix
``print`` with Rich.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()

BANNER_CHAR = "═"
BANNER_WIDTH = 75

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
) -> tuple[int, str]:
    """Run a command asynchronously with its output going straight to the terminal.

    Args:
        cmd: Executable and its arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        A ``(returncode, message)`` tuple.  *message* is empty unless the
        command timed out, in which case the return code is ``-1``.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=str(cwd) if cwd else None,
    )

    try:
        await asyncio.wait_for(process.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, f"Command timed out after {timeout}s: {' '.join(cmd)}")

    return (process.returncode or 0, "")


def find_tool(name: str) -> str | None:
    """Return the absolute path of executable *name* on ``PATH``, if any."""
    return shutil.which(name)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def remove_path(path: str | Path) -> None:
    """Delete a file, symlink or directory tree; a missing path is a no-op."""
    target = Path(path)
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.is_dir():
        shutil.rmtree(target)


def copy_contents(source: str | Path, destination: str | Path) -> list[Path]:
    """Copy every entry of *source* into *destination*, merging directories.

    Dot files are included and symlinks are copied as links.  Existing files
    in *destination* are overwritten; files that only exist there are kept.

    Returns:
        The top-level destination paths that were written.
    """
    src = Path(source)
    dst = ensure_dir(destination)
    written: list[Path] = []
    for entry in sorted(src.iterdir()):
        target = dst / entry.name
        if entry.is_dir() and not entry.is_symlink():
            if target.is_symlink() or (target.exists() and not target.is_dir()):
                target.unlink()
            copy_contents(entry, target)
            shutil.copystat(entry, target)
        else:
            # A file or link already at the target is replaced, like `cp -r`.
            if target.is_symlink() or target.is_file():
                target.unlink()
            elif target.is_dir():
                shutil.rmtree(target)
            shutil.copy2(entry, target, follow_symlinks=False)
        written.append(target)
    return written


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False, soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", highlight=False, soft_wrap=True)


def print_plain(text: str = "") -> None:
    """Write *text* exactly as given: no markup, no highlighting, no wrapping."""
    console.out(text, highlight=False)


def print_banner() -> None:
    """Print a full-width double-line separator."""
    console.print(Rule(characters=BANNER_CHAR, style="bright_blue"), width=BANNER_WIDTH)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
