"""
Host Adapter

Everything the checks need to know about the machine goes through a Host:
processes, PATH lookups, the filesystem, the registry and the network.
Checks never touch the machine directly, which keeps them testable on any OS.
"""

import http.client
import logging
import os
import platform
import shutil
import socket
import subprocess
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional, Sequence, TypeVar

from .models import ProbeError, ProbeErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CommandResult(NamedTuple):
    """Captured output of a finished command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def first_line(self) -> str:
        lines = self.stdout.strip().splitlines()
        return lines[0].strip() if lines else ""


class Host(ABC):
    """Read and write access to the machine being verified."""

    @property
    @abstractmethod
    def system(self) -> str:
        """Lower-case platform name: windows, linux or darwin."""

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"

    @property
    @abstractmethod
    def cwd(self) -> Path:
        """Working directory the checks run against."""

    @property
    @abstractmethod
    def home(self) -> Path:
        """User home directory."""

    @abstractmethod
    def env(self, name: str) -> Optional[str]:
        """Read an environment variable."""

    @abstractmethod
    def which(self, name: str) -> Optional[str]:
        """Resolve an executable on PATH."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists."""

    @abstractmethod
    def list_dirs(self, path: str) -> List[str]:
        """Names of the sub-directories of ``path`` (empty if missing)."""

    @abstractmethod
    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        """
        Run a command and capture its output.

        Raises:
            ProbeError: MISSING_DEPENDENCY if the executable is absent,
                PROBE_TIMEOUT if it exceeds ``timeout``, PERMISSION_DENIED
                if it cannot be executed
        """

    @abstractmethod
    def read_registry_dword(self, key: str, value: str, timeout: float) -> Optional[int]:
        """Read an HKLM DWORD value, None when the key or value is absent."""

    @abstractmethod
    def write_registry_dword(self, key: str, value: str, data: int, timeout: float) -> None:
        """Create or overwrite an HKLM DWORD value."""

    @abstractmethod
    def download(self, url: str, destination: Path, timeout: float) -> None:
        """Fetch ``url`` into ``destination``."""

    @abstractmethod
    def remove_file(self, path: Path) -> None:
        """Delete a file if it exists."""

    @abstractmethod
    def prepend_path(self, directory: str) -> None:
        """Put ``directory`` first on PATH for the rest of this process."""


class SystemHost(Host):
    """The real machine this process runs on."""

    REGISTRY_KEY_PREFIX = "HKLM\\"

    def __init__(self, cwd: Optional[Path] = None):
        self._cwd = Path(cwd) if cwd else Path.cwd()

    @property
    def system(self) -> str:
        return platform.system().lower()

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def home(self) -> Path:
        return Path.home()

    def env(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def list_dirs(self, path: str) -> List[str]:
        root = Path(path)
        if not root.is_dir():
            return []
        return [p.name for p in root.iterdir() if p.is_dir()]

    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        logger.debug("Running %s (timeout %ss)", " ".join(args), timeout)
        try:
            result = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(self._cwd),
            )
        except FileNotFoundError:
            raise ProbeError(
                ProbeErrorKind.MISSING_DEPENDENCY,
                f"{args[0]} not found",
            )
        except subprocess.TimeoutExpired:
            raise ProbeError(
                ProbeErrorKind.PROBE_TIMEOUT,
                f"{args[0]} did not answer within {timeout:g}s",
            )
        except PermissionError as e:
            raise ProbeError(
                ProbeErrorKind.PERMISSION_DENIED,
                f"Cannot execute {args[0]}: {e}",
            )
        return CommandResult(result.returncode, result.stdout or "", result.stderr or "")

    def read_registry_dword(self, key: str, value: str, timeout: float) -> Optional[int]:
        winreg = self._winreg()

        def _read() -> Optional[int]:
            try:
                with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, self._subkey(key)) as handle:
                    data, _ = winreg.QueryValueEx(handle, value)
                    return int(data)
            except FileNotFoundError:
                return None

        return self._with_timeout(_read, timeout, f"registry read of {key}\\{value}")

    def write_registry_dword(self, key: str, value: str, data: int, timeout: float) -> None:
        winreg = self._winreg()

        def _write() -> None:
            with winreg.CreateKeyEx(
                winreg.HKEY_LOCAL_MACHINE, self._subkey(key), 0, winreg.KEY_SET_VALUE
            ) as handle:
                winreg.SetValueEx(handle, value, 0, winreg.REG_DWORD, data)

        self._with_timeout(_write, timeout, f"registry write of {key}\\{value}")

    def download(self, url: str, destination: Path, timeout: float) -> None:
        logger.info("Downloading %s", url)
        try:
            with urllib.request.urlopen(url, timeout=timeout) as resp, open(destination, "wb") as f:
                shutil.copyfileobj(resp, f)
        except (socket.timeout, urllib.error.URLError, OSError, http.client.HTTPException) as e:
            self.remove_file(destination)
            raise self._download_error(url, e, timeout)

    @staticmethod
    def _download_error(url: str, error: Exception, timeout: float) -> ProbeError:
        """Classify a failed download."""
        reason = error.reason if isinstance(error, urllib.error.URLError) else error
        if isinstance(reason, socket.timeout):
            return ProbeError(
                ProbeErrorKind.PROBE_TIMEOUT,
                f"Download of {url} timed out after {timeout:g}s",
            )
        if isinstance(reason, PermissionError):
            return ProbeError(
                ProbeErrorKind.PERMISSION_DENIED,
                f"Download of {url} failed: {reason}",
            )
        return ProbeError(
            ProbeErrorKind.MISSING_DEPENDENCY,
            f"Download of {url} failed: {reason}",
        )

    def remove_file(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)

    def prepend_path(self, directory: str) -> None:
        current = os.environ.get("PATH", "")
        parts = current.split(os.pathsep) if current else []
        if directory not in parts:
            os.environ["PATH"] = os.pathsep.join([directory] + parts)

    def _winreg(self):
        if not self.is_windows:
            raise ProbeError(
                ProbeErrorKind.MISSING_DEPENDENCY,
                "The Windows registry is not available on this platform",
            )
        import winreg

        return winreg

    def _subkey(self, key: str) -> str:
        if key.upper().startswith(self.REGISTRY_KEY_PREFIX):
            return key[len(self.REGISTRY_KEY_PREFIX):]
        return key

    def _with_timeout(self, fn: Callable[[], T], timeout: float, what: str) -> T:
        """Run a blocking call in a worker thread and give up after ``timeout``."""
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            return executor.submit(fn).result(timeout=timeout)
        except FutureTimeout:
            raise ProbeError(
                ProbeErrorKind.PROBE_TIMEOUT,
                f"{what} did not complete within {timeout:g}s",
            )
        except PermissionError:
            raise ProbeError(
                ProbeErrorKind.PERMISSION_DENIED,
                f"{what} requires administrator privileges",
            )
        finally:
            executor.shutdown(wait=False)
