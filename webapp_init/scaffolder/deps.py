"""Dependency cache management.

The default template's ``node_modules`` is resolved once by :meth:`prepare`
and copied into every new project by :meth:`overlay`, so scaffolding the
default template never waits on the package manager.  Other templates get a
fresh :meth:`install` on top of the overlay.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path

from webapp_init.config import Config
from webapp_init.utils import (
    copy_contents,
    ensure_dir,
    find_tool,
    print_plain,
    print_warning,
    run_command,
)

from .errors import (
    CommandError,
    DependencyCacheError,
    FileOperationError,
    TemplateNotFoundError,
    ToolNotFoundError,
)
from .templates import TemplateCatalog


@dataclass
class PrepareResult:
    """What a :meth:`DependencyCache.prepare` run produced."""

    install_root: Path
    cache_dir: Path
    copied: list[Path]
    duration_seconds: float = 0.0


class DependencyCache:
    """Owns the pre-resolved dependency tree under ``scripts/template``."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.catalog = TemplateCatalog(config.templates_dir, config.default_template)

    # -- Package manager ---------------------------------------------------

    def require_package_manager(self) -> str:
        """Return the package manager's path or raise ``ToolNotFoundError``."""
        path = find_tool(self.config.package_manager)
        if path is None:
            raise ToolNotFoundError(self.config.package_manager)
        return path

    async def install(self, project_path: str | Path) -> None:
        """Run ``<package-manager> install`` in *project_path*.

        The package manager's progress reaches the terminal as-is.

        Raises:
            CommandError: On a non-zero exit or a timeout.
        """
        cmd = [self.config.package_manager, "install"]
        returncode, message = await run_command(
            cmd,
            cwd=project_path,
            timeout=self.config.install_timeout,
        )
        if returncode != 0:
            raise CommandError(cmd, returncode, message)

    # -- Preparation -------------------------------------------------------

    async def prepare(self) -> PrepareResult:
        """Install the default template's dependencies and fill the cache.

        The default template's archive (if present) is extracted in place,
        dependencies are installed in the effective root, and that whole tree
        is copied into the cache directory.
        """
        start = time.monotonic()
        self.require_package_manager()
        try:
            cache_dir = await asyncio.to_thread(ensure_dir, self.config.cache_dir)
        except OSError as exc:
            raise FileOperationError(exc) from exc

        name = self.config.default_template
        template_dir = self.config.templates_dir / name
        if not template_dir.is_dir():
            raise TemplateNotFoundError(f"Error: template not found: {name}", name)

        print_plain("Installing dependencies...")

        install_root = template_dir
        archive = template_dir / f"{name}.zip"
        if archive.is_file():
            info = self.catalog.describe(name)
            install_root = await self.catalog.extract(info, template_dir)
        elif (template_dir / name).is_dir():
            install_root = template_dir / name

        await self.install(install_root)

        try:
            copied = await asyncio.to_thread(copy_contents, install_root, cache_dir)
        except OSError as exc:
            raise FileOperationError(exc) from exc

        print_plain()
        print_plain(f"Setup complete: {install_root}")
        print_plain()

        return PrepareResult(
            install_root=install_root,
            cache_dir=cache_dir,
            copied=copied,
            duration_seconds=time.monotonic() - start,
        )

    # -- Overlay -----------------------------------------------------------

    async def overlay(self, project_path: str | Path, *, required: bool = True) -> bool:
        """Copy the cached ``node_modules`` into *project_path*.

        Args:
            project_path: The scaffolded project directory.
            required: When ``True`` a missing cache raises; otherwise a
                warning is printed and ``False`` returned.

        Returns:
            ``True`` if the cache was copied.
        """
        source = self.config.cached_node_modules
        if not source.is_dir():
            if required:
                raise DependencyCacheError(source)
            print_warning(f"Dependency cache not found, skipping overlay: {source}")
            return False

        target = Path(project_path) / "node_modules"
        await asyncio.to_thread(copy_contents, source, target)
        return True
