"""webapp-init command-line entry points.

Two commands are installed:

``init-webapp <project-name> [template-name]``
    Scaffold a project from a template into ``$PROJECT_PATH``.

``prepare-webapp-template``
    Resolve the default template's dependencies once and fill the cache
    that ``init-webapp`` copies into every new project.

Usage::

    init-webapp "My Dashboard"
    init-webapp "Sales Report" 1-dashboard --clean
    init-webapp --list
    python -m webapp_init.cli "My Dashboard"
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from webapp_init.config import Config
from webapp_init.scaffolder import (
    DependencyCache,
    FileOperationError,
    ProjectInitializer,
    ScaffoldError,
    TemplateCatalog,
    TemplateNotFoundError,
    UsageError,
)
from webapp_init.utils import print_error, print_plain, print_summary_table


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--skill-root",
        type=Path,
        default=None,
        help="Directory holding scripts/ and templates/ (default: $WEBAPP_SKILL_ROOT or .)",
    )


def _load_config(args: argparse.Namespace) -> Config:
    try:
        return Config.from_env(skill_root=args.skill_root)
    except ValueError as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(1)


def _fail(exc: ScaffoldError) -> None:
    """Print *exc* the way the operator expects and exit with status 1."""
    if isinstance(exc, UsageError):
        print_plain(str(exc))
    else:
        print_error(str(exc))
    if isinstance(exc, TemplateNotFoundError) and exc.available:
        print_plain("Available templates:")
        for name in exc.available:
            print_plain(f"  - {name}")
    sys.exit(1)


def list_templates(config: Config) -> None:
    """Print every usable template with the first heading of its info document."""
    catalog = TemplateCatalog(config.templates_dir, config.default_template)
    templates = catalog.available()
    if not templates:
        print_plain(f"No templates found in {config.templates_dir}")
        return
    rows: dict[str, str] = {}
    for template in templates:
        label = f"{template.name} (default)" if template.is_default else template.name
        rows[label] = template.summary()
    print_summary_table(rows, title="Available templates")


# ---------------------------------------------------------------------------
# init-webapp
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``init-webapp``."""
    parser = argparse.ArgumentParser(
        prog="init-webapp",
        description="Scaffold a web application from a zipped template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment:\n"
            "  PROJECT_PATH   output directory (default: /mnt/okcomputer/output/app)\n"
            "  TEMP_PATH      staging directory (default: /tmp/temp-webapp)\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default=None, help="Project title")
    parser.add_argument(
        "template_name",
        nargs="?",
        default=None,
        help="Template to use (default: 0-origin)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove an existing project directory before copying",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available templates and exit",
    )
    _add_common_options(parser)

    args = parser.parse_args(argv)
    config = _load_config(args)

    if args.list:
        list_templates(config)
        return

    initializer = ProjectInitializer(config)
    try:
        asyncio.run(
            initializer.initialize(args.project_name, args.template_name, clean=args.clean)
        )
    except ScaffoldError as exc:
        _fail(exc)
    except OSError as exc:
        _fail(FileOperationError(exc))


# ---------------------------------------------------------------------------
# prepare-webapp-template
# ---------------------------------------------------------------------------


def prepare_main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``prepare-webapp-template``."""
    parser = argparse.ArgumentParser(
        prog="prepare-webapp-template",
        description="Install the default template's dependencies into the shared cache",
    )
    _add_common_options(parser)

    args = parser.parse_args(argv)
    config = _load_config(args)

    try:
        asyncio.run(DependencyCache(config).prepare())
    except ScaffoldError as exc:
        _fail(exc)
    except OSError as exc:
        _fail(FileOperationError(exc))


if __name__ == "__main__":
    main()
