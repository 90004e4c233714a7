"""
Default configuration values.

Candidate paths are ordered newest product first. ``{NAME}`` placeholders
are expanded from the environment of the host being checked.
"""

from typing import Dict, List

DEFAULT_TIMEOUT_SECONDS = 10.0

RUSTUP_INSTALLER_URL = "https://win.rustup.rs/x86_64"

MINIMUM_SDK_VERSION = "10.0.20348.0"

SDK_ROOT = "{ProgramFiles(x86)}\\Windows Kits\\10\\bin"

SDK_VERSION_PATTERN = r"^10\.0\.\d+(\.\d+)?$"

LONG_PATHS_REGISTRY_KEY = "HKLM\\SYSTEM\\CurrentControlSet\\Control\\FileSystem"

VSWHERE_PATH = "{ProgramFiles(x86)}\\Microsoft Visual Studio\\Installer\\vswhere.exe"

VC_TOOLS_COMPONENT = "Microsoft.VisualStudio.Component.VC.Tools.x86.x64"

_VS_EDITIONS = ["Enterprise", "Professional", "Community", "BuildTools"]


def _vs_paths(suffix: str) -> List[str]:
    paths = []
    for year, root in (("2022", "{ProgramFiles}"), ("2019", "{ProgramFiles(x86)}")):
        for edition in _VS_EDITIONS:
            paths.append(f"{root}\\Microsoft Visual Studio\\{year}\\{edition}\\{suffix}")
    return paths


CPP_TOOLS_CANDIDATES: List[str] = _vs_paths("VC\\Auxiliary\\Build\\vcvarsall.bat")

CMAKE_CANDIDATES: List[str] = [
    "{ProgramFiles}\\CMake\\bin\\cmake.exe",
    "{ProgramFiles(x86)}\\CMake\\bin\\cmake.exe",
] + [
    path for path in _vs_paths(
        "Common7\\IDE\\CommonExtensions\\Microsoft\\CMake\\CMake\\bin\\cmake.exe"
    )
    if "BuildTools" not in path
]

# Paths that make a change relevant to a Windows build.
CHANGE_PATTERNS: List[str] = [
    "**.rs",
    "**.toml",
    "crates/**",
    "assets/**",
    "script/**",
    ".cargo/**",
    ".github/workflows/windows-build.yml",
    ".github/actions/**",
]

OPTIONAL_TOOLS: List[Dict[str, str]] = [
    {
        "name": "docker",
        "executable": "docker",
        "hint": "Install Docker Desktop to run the collaboration backend locally",
    },
    {
        "name": "node",
        "executable": "node",
        "hint": "Install Node.js 18 or later; some tests shell out to node",
    },
    {
        "name": "editor",
        "executable": "code",
        "hint": "Install an editor with a command-line launcher (e.g. VS Code)",
    },
]

WORKSPACE_PRIMARY_MARKER = "Cargo.toml"

WORKSPACE_SECONDARY_MARKERS: List[str] = ["crates", "rust-toolchain.toml"]
