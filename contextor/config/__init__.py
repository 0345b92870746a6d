from .loader import (
    DEFAULT_CONFIG_TEMPLATE,
    ConfigError,
    find_project_config,
    load_config,
    render_config_template,
)
from .models import (
    DEFAULT_CACHE_FILE,
    DEFAULT_DATE_PATTERN,
    CheckFlags,
    ProjectConfig,
    ReporterConfig,
    Threshold,
)

__all__ = [
    "CheckFlags",
    "ConfigError",
    "DEFAULT_CACHE_FILE",
    "DEFAULT_CONFIG_TEMPLATE",
    "DEFAULT_DATE_PATTERN",
    "ProjectConfig",
    "ReporterConfig",
    "Threshold",
    "find_project_config",
    "load_config",
    "render_config_template",
]
