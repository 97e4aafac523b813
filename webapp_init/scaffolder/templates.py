"""Template discovery and archive extraction.

Templates live under ``<skill-root>/templates/<name>/`` and each one holds
``<name>.zip`` (the project skeleton) and ``info.md`` (operator notes that
are printed after scaffolding).  ``TemplateCatalog`` validates that layout
and extracts archives into a staging directory.
"""

from __future__ import annotations

import asyncio
import os
import stat
import zipfile
from pathlib import Path

from pydantic import BaseModel

from .errors import TemplateArchiveError, TemplateNotFoundError

INFO_FILENAME = "info.md"


class TemplateInfo(BaseModel):
    """A validated template on disk."""

    name: str
    directory: Path
    archive: Path
    info_path: Path
    is_default: bool = False

    def read_info(self) -> str:
        """Return the info document's text."""
        return self.info_path.read_text(encoding="utf-8")

    def summary(self) -> str:
        """First markdown heading of the info document, or ``""``."""
        if not self.info_path.is_file():
            return ""
        for line in self.read_info().splitlines():
            stripped = line.strip()
            if stripped.startswith("#"):
                return stripped.lstrip("#").strip()
        return ""


class TemplateCatalog:
    """Looks up templates in a ``templates/`` directory."""

    def __init__(self, templates_dir: str | Path, default_name: str) -> None:
        self.templates_dir = Path(templates_dir)
        self.default_name = default_name

    def names(self) -> list[str]:
        """Sorted entry names of the templates directory (empty if it is absent)."""
        if not self.templates_dir.is_dir():
            return []
        return sorted(p.name for p in self.templates_dir.iterdir())

    def describe(self, name: str) -> TemplateInfo:
        directory = self.templates_dir / name
        return TemplateInfo(
            name=name,
            directory=directory,
            archive=directory / f"{name}.zip",
            info_path=directory / INFO_FILENAME,
            is_default=name == self.default_name,
        )

    def available(self) -> list[TemplateInfo]:
        """Every template directory that actually contains its archive."""
        result: list[TemplateInfo] = []
        for name in self.names():
            info = self.describe(name)
            if info.directory.is_dir() and info.archive.is_file():
                result.append(info)
        return result

    def get(self, name: str) -> TemplateInfo:
        """Return the validated template *name*.

        Raises:
            TemplateNotFoundError: If the directory, the archive or the info
                document is missing.  Only the missing-archive case carries
                the list of available templates, matching what the CLI shows.
        """
        info = self.describe(name)
        if not info.directory.is_dir():
            raise TemplateNotFoundError(f"Error: template not found: {name}", name)
        if not info.archive.is_file():
            raise TemplateNotFoundError(
                f"Error: Template '{name}' not found at: {info.archive}",
                name,
                available=self.names(),
            )
        if not info.info_path.is_file():
            raise TemplateNotFoundError(
                f"Error: info document not found: {info.info_path}", name
            )
        return info

    async def extract(self, template: TemplateInfo, destination: str | Path) -> Path:
        """Extract *template*'s archive into *destination*.

        Returns the effective project root: ``destination/<name>`` when the
        archive wraps everything in a folder named after the template,
        otherwise *destination* itself.
        """
        dest = Path(destination)
        await asyncio.to_thread(extract_archive, template.archive, dest)
        nested = dest / template.name
        if nested.is_dir():
            return nested
        return dest


# ---------------------------------------------------------------------------
# Archive extraction
# ---------------------------------------------------------------------------


def extract_archive(archive: str | Path, destination: str | Path) -> list[Path]:
    """Extract a zip archive, restoring unix permission bits and symlinks.

    Members whose resolved path falls outside *destination* are rejected
    before anything is written, and so are symlinks pointing outside it.

    Returns:
        The extracted paths, in archive order.

    Raises:
        TemplateArchiveError: If the archive is corrupt or contains an
            unsafe member path.
    """
    archive_path = Path(archive)
    dest = Path(destination)
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()

    try:
        with zipfile.ZipFile(archive_path) as zf:
            members = zf.infolist()
            for member in members:
                _check_inside(root, root / member.filename, archive_path, member.filename)

            extracted: list[Path] = []
            for member in members:
                mode = member.external_attr >> 16
                target = root / member.filename
                # Links extracted by earlier members are on disk now.
                _check_inside(root, target, archive_path, member.filename)
                if stat.S_ISLNK(mode):
                    link_target = zf.read(member).decode("utf-8")
                    _check_inside(
                        root, target.parent / link_target, archive_path, member.filename
                    )
                    target.parent.mkdir(parents=True, exist_ok=True)
                    if target.is_symlink() or target.exists():
                        target.unlink()
                    os.symlink(link_target, target)
                else:
                    zf.extract(member, root)
                    if mode and not member.is_dir():
                        os.chmod(target, stat.S_IMODE(mode))
                extracted.append(target)
            return extracted
    except zipfile.BadZipFile as exc:
        raise TemplateArchiveError(
            f"Error: cannot read template archive {archive_path}: {exc}"
        ) from exc


def _check_inside(root: Path, path: Path, archive: Path, member: str) -> None:
    resolved = path.resolve()
    if resolved != root and root not in resolved.parents:
        raise TemplateArchiveError(f"Error: unsafe path in archive {archive.name}: {member}")
