"""Configuration handling for the build environment checker."""

from .models import (
    ProbeConfig,
    ToolSearchConfig,
    ToolchainConfig,
    LongPathConfig,
    CppToolsConfig,
    SdkConfig,
    OptionalToolConfig,
    WorkspaceConfig,
    ChangeFilterConfig,
)
from .loader import ConfigLoader, ConfigError

__all__ = [
    "ProbeConfig",
    "ToolSearchConfig",
    "ToolchainConfig",
    "LongPathConfig",
    "CppToolsConfig",
    "SdkConfig",
    "OptionalToolConfig",
    "WorkspaceConfig",
    "ChangeFilterConfig",
    "ConfigLoader",
    "ConfigError",
]
