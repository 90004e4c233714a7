"""Windows build environment checker."""

__version__ = "0.1.0"
