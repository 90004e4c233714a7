"""
Configuration loader for YAML files.

Handles discovery, loading and validation of ``buildcheck.yaml``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .models import ProbeConfig

logger = logging.getLogger(__name__)

# Looked up relative to the working directory, in this order.
CONFIG_FILENAMES = [
    "buildcheck.yaml",
    "buildcheck.yml",
    ".config/buildcheck.yaml",
]


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """
    Loads and validates probe configuration from a YAML file.

    Without an explicit path the loader searches the working directory for
    one of ``CONFIG_FILENAMES``; if none exists the built-in defaults apply.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to a config file, or None to discover one
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[ProbeConfig] = None

    @classmethod
    def discover(cls, directory: Union[str, Path]) -> "ConfigLoader":
        """Create a loader for the first known config file in ``directory``."""
        directory = Path(directory)
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                logger.debug("Using configuration file %s", candidate)
                return cls(candidate)
        return cls()

    def load(self) -> "ConfigLoader":
        """
        Load the configuration.

        Returns:
            Self for method chaining
        """
        if self.config_path is None:
            self._config = ProbeConfig()
            return self

        if not self.config_path.is_file():
            raise ConfigError(f"Configuration file does not exist: {self.config_path}")

        self._config = self._parse(self._read_yaml(self.config_path))
        return self

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {file_path}")
        return data

    def _parse(self, data: Dict[str, Any]) -> ProbeConfig:
        try:
            return ProbeConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    @property
    def config(self) -> ProbeConfig:
        """Get the loaded configuration, loading it on first access."""
        if self._config is None:
            self.load()
        return self._config

    def save(self, output_path: Union[str, Path]) -> None:
        """
        Save the current configuration as YAML.

        Args:
            output_path: File to write
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            yaml.dump(
                self.config.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigLoader":
        """
        Create a ConfigLoader from a dictionary.

        Useful for programmatic configuration.
        """
        loader = cls()
        loader._config = loader._parse(data)
        return loader
