"""Shared pytest fixtures for the webapp-init test suite.

Provides reusable fixtures for:
- A skill root with real zipped templates and info documents
- A filled dependency cache (with an npm-style ``.bin`` symlink)
- A ``Config`` pointing every path into ``tmp_path``
- Mocked package-manager discovery and install subprocess
"""

from __future__ import annotations

import stat
import textwrap
import zipfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from webapp_init.config import Config


# ---------------------------------------------------------------------------
# Archive helpers
# ---------------------------------------------------------------------------

INDEX_HTML = textwrap.dedent("""\
    <!doctype html>
    <html lang="en">
      <head>
        <meta charset="UTF-8" />
        <title>Vite + React + TS</title>
      </head>
      <body>
        <div id="root"></div>
        <script type="module" src="/src/main.tsx"></script>
      </body>
    </html>
""")

ORIGIN_INFO = textwrap.dedent("""\
    # Default React template

    Vite, React 19, Tailwind and shadcn/ui are preconfigured.
    Run `npm run build` before deploying.
""")

DASHBOARD_INFO = textwrap.dedent("""\
    # Dashboard template

    Charts use [recharts]; edit `src/config.ts` for data sources.
""")


def _make_zip(
    path: Path,
    files: dict[str, str],
    *,
    modes: dict[str, int] | None = None,
    symlinks: dict[str, str] | None = None,
) -> Path:
    """Write a zip archive at *path* holding *files* (name -> text).

    *modes* records unix permission bits for selected members and
    *symlinks* adds symlink members (name -> link target), the way ``zip -y``
    stores them.
    """
    modes = modes or {}
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (stat.S_IFREG | modes.get(name, 0o644)) << 16
            zf.writestr(info, content)
        for name, target in (symlinks or {}).items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (stat.S_IFLNK | 0o777) << 16
            zf.writestr(info, target)
    return path


@pytest.fixture
def make_archive():
    """The archive builder, for tests that need their own zip files."""
    return _make_zip


def _template_files(prefix: str = "") -> dict[str, str]:
    return {
        f"{prefix}index.html": INDEX_HTML,
        f"{prefix}package.json": '{"name": "app", "private": true}\n',
        f"{prefix}src/main.tsx": "import './index.css'\n",
        f"{prefix}.gitignore": "node_modules\ndist\n",
    }


# ---------------------------------------------------------------------------
# Skill root & config
# ---------------------------------------------------------------------------


@pytest.fixture
def skill_root(tmp_path: Path) -> Path:
    """A skill root with two templates and a filled dependency cache.

    ``0-origin`` wraps its files in a ``0-origin/`` folder inside the archive;
    ``1-dashboard`` stores them flat.
    """
    root = tmp_path / "webapp-building"
    templates = root / "templates"

    origin = templates / "0-origin"
    _make_zip(origin / "0-origin.zip", _template_files("0-origin/"))
    (origin / "info.md").write_text(ORIGIN_INFO, encoding="utf-8")

    dashboard = templates / "1-dashboard"
    _make_zip(dashboard / "1-dashboard.zip", _template_files())
    (dashboard / "info.md").write_text(DASHBOARD_INFO, encoding="utf-8")

    node_modules = root / "scripts" / "template" / "node_modules"
    (node_modules / "react").mkdir(parents=True)
    (node_modules / "react" / "index.js").write_text("module.exports = {}\n", encoding="utf-8")
    (node_modules / ".package-lock.json").write_text("{}\n", encoding="utf-8")
    (node_modules / ".bin").mkdir()
    (node_modules / ".bin" / "react").symlink_to("../react/index.js")

    yield root


@pytest.fixture
def config(skill_root: Path, tmp_path: Path) -> Config:
    """A Config whose output and staging directories live under ``tmp_path``."""
    return Config(
        skill_root=skill_root,
        project_path=tmp_path / "output" / "app",
        temp_path=tmp_path / "staging",
    )


# ---------------------------------------------------------------------------
# Package manager mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def npm_available():
    """Pretend ``npm`` is on PATH."""
    with patch(
        "webapp_init.scaffolder.deps.find_tool", return_value="/usr/bin/npm"
    ) as mocked:
        yield mocked


@pytest.fixture
def npm_missing():
    """Pretend ``npm`` is not installed."""
    with patch("webapp_init.scaffolder.deps.find_tool", return_value=None) as mocked:
        yield mocked


@pytest.fixture
def mock_install(npm_available) -> Any:
    """Replace the install subprocess with a successful no-op.

    The mock records ``(cmd, cwd=..., timeout=...)`` calls.
    """
    with patch(
        "webapp_init.scaffolder.deps.run_command",
        new=AsyncMock(return_value=(0, "")),
    ) as mocked:
        yield mocked
