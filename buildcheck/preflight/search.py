"""
Tool Search

One algorithm for every located tool: walk the configured candidate paths
in priority order, stop at the first one that exists, otherwise fall back
to a PATH lookup.
"""

import logging
import re
from pathlib import PurePosixPath, PureWindowsPath
from typing import NamedTuple, Optional

from ..config.models import ToolSearchConfig
from .host import Host

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class ToolLocation(NamedTuple):
    """Where a tool was found."""
    path: str
    from_candidates: bool

    @property
    def directory(self) -> str:
        """Parent directory of the tool, in the path's own flavour."""
        if "\\" in self.path:
            return str(PureWindowsPath(self.path).parent)
        return str(PurePosixPath(self.path).parent)


def expand_candidate(candidate: str, host: Host) -> Optional[str]:
    """
    Substitute ``{NAME}`` placeholders from the host environment.

    Returns:
        Expanded path, or None if a referenced variable is unset
    """
    missing = []

    def _sub(match: "re.Match[str]") -> str:
        value = host.env(match.group(1))
        if value is None:
            missing.append(match.group(1))
            return ""
        return value

    expanded = _PLACEHOLDER.sub(_sub, candidate)
    if missing:
        logger.debug("Skipping candidate %s: %s not set", candidate, ", ".join(missing))
        return None
    return expanded


def find_tool(search: ToolSearchConfig, host: Host) -> Optional[ToolLocation]:
    """
    Locate a tool.

    Args:
        search: Candidate paths and PATH executable name
        host: Machine to search

    Returns:
        ToolLocation for the first match, or None if not found anywhere
    """
    for candidate in search.candidates:
        path = expand_candidate(candidate, host)
        if path and host.exists(path):
            logger.debug("Found %s at %s", search.display_name, path)
            return ToolLocation(path=path, from_candidates=True)

    on_path = host.which(search.executable)
    if on_path:
        logger.debug("Found %s on PATH at %s", search.display_name, on_path)
        return ToolLocation(path=on_path, from_candidates=False)

    return None
