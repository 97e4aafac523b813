"""webapp-init scaffolder -- creates web projects from zipped templates.

Quick usage::

    from webapp_init.config import Config
    from webapp_init.scaffolder import ProjectInitializer

    config = Config.from_env(skill_root=Path("/app/.skills/webapp-building"))
    result = await ProjectInitializer(config).initialize("My App", "0-origin")
"""

from webapp_init.scaffolder.deps import DependencyCache, PrepareResult
from webapp_init.scaffolder.errors import (
    CommandError,
    DependencyCacheError,
    FileOperationError,
    ScaffoldError,
    TemplateArchiveError,
    TemplateNotFoundError,
    ToolNotFoundError,
    UsageError,
)
from webapp_init.scaffolder.generator import InitResult, ProjectInitializer
from webapp_init.scaffolder.templates import TemplateCatalog, TemplateInfo

__all__ = [
    "CommandError",
    "DependencyCache",
    "DependencyCacheError",
    "FileOperationError",
    "InitResult",
    "PrepareResult",
    "ProjectInitializer",
    "ScaffoldError",
    "TemplateArchiveError",
    "TemplateCatalog",
    "TemplateInfo",
    "TemplateNotFoundError",
    "ToolNotFoundError",
    "UsageError",
]
