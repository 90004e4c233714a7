from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, Union

import pytest

from buildcheck.config import ProbeConfig
from buildcheck.config.defaults import LONG_PATHS_REGISTRY_KEY
from buildcheck.preflight.host import CommandResult, Host
from buildcheck.preflight.models import ProbeError, ProbeErrorKind

PROGRAM_FILES = r"C:\Program Files"
PROGRAM_FILES_X86 = r"C:\Program Files (x86)"
SDK_ROOT = PROGRAM_FILES_X86 + r"\Windows Kits\10\bin"
VCVARSALL_2022 = PROGRAM_FILES + r"\Microsoft Visual Studio\2022\Community\VC\Auxiliary\Build\vcvarsall.bat"
CMAKE_EXE = PROGRAM_FILES + r"\CMake\bin\cmake.exe"
VSWHERE = PROGRAM_FILES_X86 + r"\Microsoft Visual Studio\Installer\vswhere.exe"
WORKSPACE = Path("/work/project")

Outcome = Union[CommandResult, Exception, Callable[["FakeHost"], CommandResult]]


class FakeHost(Host):
    """In-memory machine for tests."""

    def __init__(self, system: str = "windows", cwd: Path = WORKSPACE):
        self._system = system
        self._cwd = cwd
        self.environ: Dict[str, str] = {}
        self.executables: Dict[str, str] = {}
        self.files: Set[str] = set()
        self.dirs: Dict[str, List[str]] = {}
        self.commands: Dict[Tuple[str, ...], Outcome] = {}
        self.git_available = True
        self.git_config: Dict[str, str] = {}
        self.registry: Dict[Tuple[str, str], int] = {}
        self.registry_error: Optional[ProbeError] = None
        self.registry_writable = True
        self.downloads: List[Tuple[str, Path]] = []
        self.removed: List[Path] = []
        self.path_prepends: List[str] = []
        self.calls: List[List[str]] = []

    @property
    def system(self) -> str:
        return self._system

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def home(self) -> Path:
        return Path("/home/builder")

    def env(self, name: str) -> Optional[str]:
        return self.environ.get(name)

    def which(self, name: str) -> Optional[str]:
        return self.executables.get(name)

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def list_dirs(self, path: str) -> List[str]:
        return list(self.dirs.get(path, []))

    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        args = list(args)
        self.calls.append(args)

        if args[:2] == ["git", "config"] and self.git_available:
            return self._git_config(args[2:])

        outcome = self.commands.get(tuple(args))
        if outcome is None:
            raise ProbeError(ProbeErrorKind.MISSING_DEPENDENCY, f"{args[0]} not found")
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome(self)
        return outcome

    def _git_config(self, args: List[str]) -> CommandResult:
        args = [a for a in args if a != "--global"]
        if args[0] == "--get":
            value = self.git_config.get(args[1])
            return CommandResult(0, value + "\n") if value is not None else CommandResult(1)
        self.git_config[args[0]] = args[1]
        return CommandResult(0)

    def read_registry_dword(self, key: str, value: str, timeout: float) -> Optional[int]:
        if self.registry_error:
            raise self.registry_error
        return self.registry.get((key, value))

    def write_registry_dword(self, key: str, value: str, data: int, timeout: float) -> None:
        if not self.registry_writable:
            raise ProbeError(
                ProbeErrorKind.PERMISSION_DENIED,
                "registry write requires administrator privileges",
            )
        self.registry[(key, value)] = data

    def download(self, url: str, destination: Path, timeout: float) -> None:
        self.downloads.append((url, destination))
        self.files.add(str(destination))

    def remove_file(self, path: Path) -> None:
        self.removed.append(Path(path))
        self.files.discard(str(path))

    def prepend_path(self, directory: str) -> None:
        self.path_prepends.append(directory)


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(0, stdout)


def install_rust(host: FakeHost) -> None:
    host.executables["rustup"] = r"C:\Users\builder\.cargo\bin\rustup.exe"
    host.commands[("rustc", "--version")] = ok("rustc 1.81.0 (eeb90cda1 2024-09-04)\n")
    host.commands[("cargo", "--version")] = ok("cargo 1.81.0 (2dbb1af80 2024-08-20)\n")


def make_healthy_host() -> FakeHost:
    """A Windows host where every check passes."""
    host = FakeHost()
    host.environ.update({
        "ProgramFiles": PROGRAM_FILES,
        "ProgramFiles(x86)": PROGRAM_FILES_X86,
    })
    install_rust(host)
    host.executables.update({
        "git": r"C:\Program Files\Git\cmd\git.exe",
        "docker": r"C:\Program Files\Docker\docker.exe",
        "node": r"C:\Program Files\nodejs\node.exe",
        "code": r"C:\Users\builder\AppData\Local\Programs\VS Code\bin\code.cmd",
    })
    host.git_config["core.longpaths"] = "true"
    host.registry[(LONG_PATHS_REGISTRY_KEY, "LongPathsEnabled")] = 1
    host.files.update({VCVARSALL_2022, CMAKE_EXE})
    host.dirs[SDK_ROOT] = ["10.0.19041.0", "10.0.22621.0", "x64"]
    host.files.update({
        str(WORKSPACE / "Cargo.toml"),
        str(WORKSPACE / "crates"),
        str(WORKSPACE / "rust-toolchain.toml"),
    })
    return host


@pytest.fixture
def host() -> FakeHost:
    return make_healthy_host()


@pytest.fixture
def empty_host() -> FakeHost:
    """A Windows host with nothing installed."""
    h = FakeHost()
    h.git_available = False
    return h


@pytest.fixture
def config() -> ProbeConfig:
    return ProbeConfig()
