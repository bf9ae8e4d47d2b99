"""
Configuration for mesh extraction.

This module provides the configuration used by the command-line tools, with
validation, defaults and JSON serialization.
"""

import json
import logging
from typing import Any, Dict
from dataclasses import dataclass, field, asdict, fields

# Set up logging
logger = logging.getLogger(__name__)

VALID_OUTPUT_FORMATS = ['npz', 'json']


@dataclass
class MeshConfig:
    """
    Configuration for mesh extraction runs.

    ``max_grid_size`` bounds the grids a caller is willing to process; it is
    checked before any index is built.
    """
    max_error: float = 1.0
    max_grid_size: int = 4097
    output_format: str = 'npz'

    # Optional parameters (stored as dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.max_error >= 0:
            raise ValueError(f"max_error must be non-negative, got {self.max_error}")

        if self.max_grid_size < 2:
            raise ValueError(f"max_grid_size must be at least 2, got {self.max_grid_size}")

        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {VALID_OUTPUT_FORMATS}, "
                f"got '{self.output_format}'"
            )

    def check_grid_size(self, grid_size: int) -> None:
        """
        Refuse grid sizes above the configured bound.

        Raises:
            ValueError: If grid_size exceeds max_grid_size
        """
        if grid_size > self.max_grid_size:
            raise ValueError(
                f"Grid size {grid_size} exceeds the configured maximum of {self.max_grid_size}"
            )

    def as_dict(self) -> Dict[str, Any]:
        """
        Get configuration as a dictionary.

        Returns:
            Dictionary representation of configuration
        """
        result = asdict(self)
        # Remove extra if empty
        if not result['extra']:
            del result['extra']
        return result

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'MeshConfig':
        """
        Create configuration from a dictionary.

        Unknown keys are kept in ``extra``.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            New MeshConfig instance
        """
        names = [f.name for f in fields(cls)]
        known_params = {k: v for k, v in config_dict.items() if k in names}
        extra_params = {k: v for k, v in config_dict.items() if k not in names}

        config = cls(**known_params)
        config.extra.update(extra_params)
        return config


def load_config(config_file: str) -> MeshConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_file: Path to configuration file

    Returns:
        MeshConfig loaded from file

    Raises:
        IOError: If the file cannot be read or holds an invalid configuration
    """
    try:
        with open(config_file, 'r') as f:
            config_dict = json.load(f)
        return MeshConfig.from_dict(config_dict)
    except (OSError, ValueError, TypeError) as e:
        raise IOError(f"Failed to load configuration from {config_file}: {e}") from e


def save_config(config: MeshConfig, config_file: str) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: MeshConfig to save
        config_file: Path to configuration file

    Raises:
        IOError: If file cannot be written
    """
    try:
        with open(config_file, 'w') as f:
            json.dump(config.as_dict(), f, indent=2)
    except OSError as e:
        raise IOError(f"Failed to save configuration to {config_file}: {e}") from e
    logger.debug(f"Saved configuration to {config_file}")
