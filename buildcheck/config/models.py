"""
Pydantic models for probe configuration.

These models define the schema of ``buildcheck.yaml``. Every field has a
default, so an empty file (or no file) describes the standard Windows
Rust/C++ build host.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from . import defaults


class ToolSearchConfig(BaseModel):
    """Where to look for an executable: candidate paths first, then PATH."""

    display_name: str = Field(..., description="Name used in reports")
    executable: str = Field(..., description="Executable looked up on PATH")
    candidates: List[str] = Field(
        default_factory=list,
        description="Known install locations, highest priority first",
    )
    hint: Optional[str] = Field(None, description="Remediation text when missing")


class ToolchainConfig(BaseModel):
    """Rust toolchain manager and the tools it provides."""

    manager: str = Field(default="rustup", description="Toolchain manager executable")
    compiler: str = Field(default="rustc", description="Compiler executable")
    package_manager: str = Field(default="cargo", description="Package manager executable")
    installer_url: str = Field(default=defaults.RUSTUP_INSTALLER_URL)
    installer_args: List[str] = Field(
        default_factory=lambda: ["-y", "--default-toolchain", "none"],
    )
    install_timeout: float = Field(
        default=900.0,
        gt=0,
        description="Seconds allowed for installing the toolchain under --fix",
    )
    hint: str = Field(default="Install rustup from https://rustup.rs")


class LongPathConfig(BaseModel):
    """Where long-path support is configured."""

    git_key: str = Field(default="core.longpaths")
    registry_key: str = Field(default=defaults.LONG_PATHS_REGISTRY_KEY)
    registry_value: str = Field(default="LongPathsEnabled")


class CppToolsConfig(BaseModel):
    """MSVC C/C++ build tools discovery."""

    vswhere: str = Field(default=defaults.VSWHERE_PATH)
    required_component: str = Field(default=defaults.VC_TOOLS_COMPONENT)
    search: ToolSearchConfig = Field(
        default_factory=lambda: ToolSearchConfig(
            display_name="MSVC build tools",
            executable="cl",
            candidates=list(defaults.CPP_TOOLS_CANDIDATES),
            hint=(
                "Install Visual Studio 2019/2022 with the C++ workload "
                "or Visual Studio Build Tools"
            ),
        )
    )


class SdkConfig(BaseModel):
    """Windows platform SDK discovery."""

    root: str = Field(default=defaults.SDK_ROOT)
    pattern: str = Field(default=defaults.SDK_VERSION_PATTERN)
    minimum_version: str = Field(default=defaults.MINIMUM_SDK_VERSION)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid SDK version pattern '{v}': {e}")
        return v

    @field_validator("minimum_version")
    @classmethod
    def validate_minimum(cls, v: str) -> str:
        if not re.fullmatch(r"\d+(\.\d+)*", v):
            raise ValueError(f"Invalid minimum SDK version: {v}")
        return v


class OptionalToolConfig(BaseModel):
    """A convenience tool whose absence is only a warning."""

    name: str
    executable: str
    hint: Optional[str] = None


class WorkspaceConfig(BaseModel):
    """Files and directories that identify the project root."""

    primary_marker: str = Field(default=defaults.WORKSPACE_PRIMARY_MARKER)
    secondary_markers: List[str] = Field(
        default_factory=lambda: list(defaults.WORKSPACE_SECONDARY_MARKERS)
    )


class ChangeFilterConfig(BaseModel):
    """Glob patterns of paths that make a change relevant."""

    patterns: List[str] = Field(default_factory=lambda: list(defaults.CHANGE_PATTERNS))

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one change pattern is required")
        return v


class ProbeConfig(BaseModel):
    """
    Complete probe configuration.

    Drives which tools are searched for, where, and what counts as
    a relevant change.
    """

    timeout: float = Field(
        default=defaults.DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds allowed for each external probe",
    )
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    long_paths: LongPathConfig = Field(default_factory=LongPathConfig)
    cpp_tools: CppToolsConfig = Field(default_factory=CppToolsConfig)
    sdk: SdkConfig = Field(default_factory=SdkConfig)
    build_graph_tool: ToolSearchConfig = Field(
        default_factory=lambda: ToolSearchConfig(
            display_name="CMake",
            executable="cmake",
            candidates=list(defaults.CMAKE_CANDIDATES),
            hint="Install CMake or Visual Studio with the C++ CMake tools",
        )
    )
    optional_tools: List[OptionalToolConfig] = Field(
        default_factory=lambda: [OptionalToolConfig(**t) for t in defaults.OPTIONAL_TOOLS]
    )
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    changes: ChangeFilterConfig = Field(default_factory=ChangeFilterConfig)
