"""webapp-init configuration.

Typed configuration for template scaffolding. Settings use a Pydantic v2
model so they are validated at construction time and can be built from the
environment variables the skill runtime exports.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_NAME = "0-origin"
DEFAULT_PROJECT_PATH = Path("/mnt/okcomputer/output/app")
DEFAULT_TEMP_PATH = Path("/tmp/temp-webapp")


class Config(BaseModel):
    """Global webapp-init configuration.

    The skill root is the directory holding ``scripts/`` and ``templates/``.
    Instances are created once by the CLI entry points and passed to the
    initializer and the dependency cache.
    """

    skill_root: Path = Field(default=Path("."))
    project_path: Path = Field(default=DEFAULT_PROJECT_PATH)
    temp_path: Path = Field(default=DEFAULT_TEMP_PATH)
    default_template: str = Field(default=DEFAULT_TEMPLATE_NAME, min_length=1)
    package_manager: str = Field(default="npm", min_length=1)
    install_timeout: int = Field(
        default=1800, ge=10, description="Package-manager timeout in seconds"
    )

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def scripts_dir(self) -> Path:
        """The skill's ``scripts/`` directory."""
        return self.skill_root / "scripts"

    @property
    def templates_dir(self) -> Path:
        """Directory holding one ``<name>/`` folder per template."""
        return self.skill_root / "templates"

    @property
    def cache_dir(self) -> Path:
        """Dependency cache filled by ``prepare`` and overlaid by ``init``."""
        return self.scripts_dir / "template"

    @property
    def cached_node_modules(self) -> Path:
        """The cached ``node_modules`` tree copied into every new project."""
        return self.cache_dir / "node_modules"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROJECT_PATH, TEMP_PATH, WEBAPP_SKILL_ROOT, WEBAPP_INSTALL_TIMEOUT.

        Keyword *overrides* whose value is not ``None`` win over the
        environment, which is how CLI options are applied.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("WEBAPP_SKILL_ROOT"):
            kwargs["skill_root"] = Path(os.environ["WEBAPP_SKILL_ROOT"])
        if os.environ.get("PROJECT_PATH"):
            kwargs["project_path"] = Path(os.environ["PROJECT_PATH"])
        if os.environ.get("TEMP_PATH"):
            kwargs["temp_path"] = Path(os.environ["TEMP_PATH"])
        if os.environ.get("WEBAPP_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["WEBAPP_INSTALL_TIMEOUT"])

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
