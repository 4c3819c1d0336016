"""
Configuration management for satlab solvers and experiments.
Uses OmegaConf for flexible configuration handling.
"""

import copy
import logging
import os
from typing import Any

import omegaconf
import yaml
from omegaconf import DictConfig, OmegaConf

from satlab.exceptions import ConfigurationError

# Set up logging
logger = logging.getLogger(__name__)


class SolverConfig:
    """
    Configuration manager for SAT solvers.
    Handles loading, merging, and accessing configuration parameters.
    """

    DEFAULT_CONFIG = {
        "solver": {
            "name": "dpll",
            "walksat": {
                "max_steps": 20000,
                # Greedy (min-break) moves are taken with probability 0.567.
                "noise_probability": 0.433,
                "seed": None,
            },
        },
        "generator": {
            "num_variables": 20,
            "num_clauses": 85,
            "clause_width": 3,
            "seed": None,
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
        "experiment": {
            "name": "default",
            "runs": 5,
            "results_dir": "./results",
        },
    }

    def __init__(self, config_path: str | None = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to configuration file (YAML or JSON)
        """
        self.config: DictConfig = OmegaConf.create(copy.deepcopy(self.DEFAULT_CONFIG))

        if config_path:
            self._load_config_file(config_path)

    def _load_config_file(self, config_path: str) -> None:
        """
        Merge a configuration file over the current configuration.

        Args:
            config_path: Path to configuration file

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            file_config = OmegaConf.load(config_path)
        except (OSError, yaml.YAMLError, omegaconf.errors.OmegaConfBaseException, ValueError) as e:
            raise ConfigurationError(f"Error loading configuration file {config_path}: {e}") from e

        self.config = OmegaConf.merge(self.config, file_config)
        logger.debug(f"Loaded configuration from {config_path}")

    def update(self, config_dict: dict[str, Any]) -> None:
        """
        Update the configuration with the given dictionary.

        Args:
            config_dict: Dictionary to update the configuration with
        """
        self.config = OmegaConf.merge(self.config, config_dict)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.
        Supports dot notation for nested keys (e.g., "solver.walksat.max_steps").

        Args:
            key: Configuration key
            default: Default value if key not found or unset

        Returns:
            Configuration value
        """
        return OmegaConf.select(self.config, key, default=default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by key.
        Supports dot notation for nested keys (e.g., "logging.level").

        Args:
            key: Configuration key
            value: Value to set
        """
        OmegaConf.update(self.config, key, value, merge=True)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        return OmegaConf.to_container(self.config, resolve=True)

    def save(self, file_path: str) -> None:
        """
        Save the configuration to a YAML file.

        Args:
            file_path: Path to save the configuration to

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
            OmegaConf.save(self.config, file_path)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration to {file_path}: {e}") from e

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# Process-wide defaults. Solvers copy what they need at construction.
config = SolverConfig()


def load_config(config_path: str | None = None) -> SolverConfig:
    """
    Load configuration from a file and make it the process-wide default.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration instance
    """
    global config
    if config_path:
        config = SolverConfig(config_path)
    return config


def get_config() -> SolverConfig:
    """
    Get the process-wide configuration instance.

    Returns:
        Configuration instance
    """
    return config
