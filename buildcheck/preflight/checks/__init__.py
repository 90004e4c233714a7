"""
Pre-flight Check Implementations

Individual check modules for each capability of the build host.
"""

from .toolchain import check_toolchain
from .longpaths import check_git_long_paths, check_os_long_paths
from .native import check_cpp_build_tools, check_platform_sdk
from .tools import check_build_graph_tool, check_optional_tool, optional_check_name
from .workspace import check_workspace

__all__ = [
    "check_toolchain",
    "check_git_long_paths",
    "check_os_long_paths",
    "check_cpp_build_tools",
    "check_platform_sdk",
    "check_build_graph_tool",
    "check_optional_tool",
    "optional_check_name",
    "check_workspace",
]
