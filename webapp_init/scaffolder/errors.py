"""Exceptions raised by the scaffolding layer.

Every error carries the one-line message the CLI prints before exiting with
status 1.  Nothing here retries or rolls back: the first failure ends the run.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every scaffolding failure."""


class UsageError(ScaffoldError):
    """Raised when the caller omits a required argument."""


class ToolNotFoundError(ScaffoldError):
    """Raised when a required external executable is not on ``PATH``."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Error: {tool} not found")


class TemplateNotFoundError(ScaffoldError):
    """Raised when a template directory, archive or info document is missing.

    ``available`` lists the entries of the templates directory so the CLI
    can show the operator what exists.
    """

    def __init__(
        self,
        message: str,
        template: str,
        available: list[str] | None = None,
    ) -> None:
        self.template = template
        self.available = available or []
        super().__init__(message)


class TemplateArchiveError(ScaffoldError):
    """Raised when a template archive is unreadable or its contents are unusable."""


class DependencyCacheError(ScaffoldError):
    """Raised when the pre-resolved ``node_modules`` cache is missing."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Error: dependency cache not found: {path} "
            "(run prepare-webapp-template first)"
        )


class CommandError(ScaffoldError):
    """Raised when an external command exits non-zero or times out."""

    def __init__(self, command: list[str], returncode: int, detail: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.detail = detail
        cmd_str = " ".join(command)
        message = f"Error: command failed (exit {returncode}): {cmd_str}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class FileOperationError(ScaffoldError):
    """Raised when staging, copying or creating a directory fails on disk."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Error: {cause}")
