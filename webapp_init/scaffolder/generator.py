"""Project initialization from a zipped template.

Takes a project title and a template name and produces a runnable project
directory: the archive is staged, the ``index.html`` title is rewritten,
the staged tree is copied into the output directory, and the cached
``node_modules`` is overlaid.  Non-default templates additionally get a
fresh dependency install and a framed copy of their info document.
"""

from __future__ import annotations

import asyncio
import re
import shutil
import time
from dataclasses import dataclass
from pathlib import Path

from webapp_init.config import Config
from webapp_init.utils import (
    copy_contents,
    ensure_dir,
    print_banner,
    print_plain,
    print_warning,
    remove_path,
)

from .deps import DependencyCache
from .errors import FileOperationError, TemplateArchiveError, UsageError
from .templates import INFO_FILENAME, TemplateCatalog, TemplateInfo

USAGE = "Usage: init-webapp <project-name> [template-name]"

_TITLE_RE = re.compile(r"<title>.*</title>")


@dataclass
class InitResult:
    """What a :meth:`ProjectInitializer.initialize` run produced."""

    project_path: Path
    template: str
    title: str
    is_default: bool
    installed: bool
    cache_overlaid: bool
    info_text: str = ""
    duration_seconds: float = 0.0


class ProjectInitializer:
    """Scaffolds a project directory from a template archive."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.catalog = TemplateCatalog(config.templates_dir, config.default_template)
        self.deps = DependencyCache(config)

    # -- Public API --------------------------------------------------------

    def validate(self, project_name: str | None, template_name: str | None = None) -> TemplateInfo:
        """Check every precondition and return the resolved template.

        Checks run in a fixed order: package manager, project name, template
        directory, archive, info document.  The first failure raises.  A name
        made only of whitespace counts as missing.
        """
        self.deps.require_package_manager()
        if not project_name or not sanitize_title(project_name):
            raise UsageError(USAGE)
        return self.catalog.get(template_name or self.config.default_template)

    async def initialize(
        self,
        project_name: str | None,
        template_name: str | None = None,
        *,
        clean: bool = False,
    ) -> InitResult:
        """Create the project directory for *project_name* from a template.

        Args:
            project_name: Title written into ``index.html``.
            template_name: Template to use; defaults to the configured
                default template.
            clean: Remove an existing project directory first.  Without it
                a re-run copies on top of whatever is already there.

        Returns:
            An ``InitResult`` describing the scaffolded project.
        """
        start = time.monotonic()
        template = self.validate(project_name, template_name)
        title = sanitize_title(project_name or "")
        project_path = self.config.project_path
        staging = self.config.temp_path

        print_plain(f"Creating project: {project_path}")
        try:
            if clean:
                await asyncio.to_thread(remove_path, project_path)
            await asyncio.to_thread(ensure_dir, project_path)
            await asyncio.to_thread(remove_path, staging)
            await asyncio.to_thread(ensure_dir, staging)

            print_plain("Installing dependencies...")
            root = await self.catalog.extract(template, staging)

            await asyncio.to_thread(shutil.copyfile, template.info_path, root / INFO_FILENAME)
            await asyncio.to_thread(rewrite_title, root / "index.html", title)

            await asyncio.to_thread(copy_contents, root, project_path)
            overlaid = await self.deps.overlay(project_path, required=template.is_default)
        except OSError as exc:
            raise FileOperationError(exc) from exc

        installed = False
        if not template.is_default:
            await self.deps.install(project_path)
            installed = True

        info_text = template.read_info()
        self._report(template, project_path, info_text)

        return InitResult(
            project_path=project_path,
            template=template.name,
            title=title,
            is_default=template.is_default,
            installed=installed,
            cache_overlaid=overlaid,
            info_text=info_text,
            duration_seconds=time.monotonic() - start,
        )

    # -- Reporting ---------------------------------------------------------

    def _report(self, template: TemplateInfo, project_path: Path, info_text: str) -> None:
        """Print the info document; framed for non-default templates."""
        if template.is_default:
            print_plain(info_text.rstrip("\n"))
            return

        print_plain()
        print_plain(f"✓ Template '{template.name}' extracted successfully to: {project_path}")
        print_plain()
        print_banner()
        print_plain("TEMPLATE INFO")
        print_banner()
        print_plain()
        print_plain(info_text.rstrip("\n"))
        print_plain()
        print_banner()


# ---------------------------------------------------------------------------
# Title substitution
# ---------------------------------------------------------------------------


def sanitize_title(name: str) -> str:
    """Collapse *name* onto one line and strip surrounding whitespace.

    Nothing else is changed: characters such as ``&``, ``/`` or ``\\`` are
    kept verbatim and inserted literally by :func:`replace_title`.
    """
    return " ".join(part.strip() for part in name.splitlines() if part.strip())


def replace_title(html: str, title: str) -> str:
    """Replace each line's ``<title>...</title>`` span with *title*.

    The match is greedy within a line and never spans lines.  The
    replacement is a callable so regex back-references in *title* stay
    literal text.
    """
    replacement = f"<title>{title}</title>"
    return _TITLE_RE.sub(lambda _match: replacement, html)


def rewrite_title(index_html: Path, title: str) -> bool:
    """Rewrite the title in *index_html* in place.

    Returns:
        ``True`` if a ``<title>`` tag was found and rewritten.

    Raises:
        TemplateArchiveError: If the template did not provide ``index.html``.
    """
    if not index_html.is_file():
        raise TemplateArchiveError(f"Error: index.html not found in template: {index_html}")
    with index_html.open(encoding="utf-8", newline="") as fh:
        original = fh.read()
    if not _TITLE_RE.search(original):
        print_warning(f"No <title> tag in {index_html}; title left unchanged")
        return False
    updated = replace_title(original, title)
    with index_html.open("w", encoding="utf-8", newline="") as fh:
        fh.write(updated)
    return True
