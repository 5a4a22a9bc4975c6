"""
Storage for compression settings.

This module provides functions to load and save CompressionConfig objects
to/from JSON files on disk:

    {
      "min_arbitrary_distance": 10,
      "mode": "diagonal",
      "solver_backend": "cbc",
      "time_limit": 5.0
    }

Missing keys take their defaults. Unknown keys are rejected.
"""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path

from position_compressor.config.settings import CompressionConfig


# Default settings file
DEFAULT_CONFIG_PATH = Path("compression.json")


def load_compression_config(config_path: Path = DEFAULT_CONFIG_PATH) -> CompressionConfig:
    """
    Load a CompressionConfig from a JSON file.

    Args:
        config_path: Path to the JSON settings file

    Returns:
        The loaded and validated config, or the defaults if the file does not exist

    Raises:
        ValueError: If the file is not valid JSON, has unknown keys, or
            holds out-of-range settings

    Example:
        >>> config = load_compression_config(Path("compression.json"))
        >>> config.mode
        'orthogonal'
    """
    if not config_path.exists():
        return CompressionConfig()

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Settings file {config_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {config_path} must contain a JSON object")

    known = {f.name for f in fields(CompressionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {config_path}: {unknown}")

    config = CompressionConfig(**data)
    config.validate()
    return config


def save_compression_config(config: CompressionConfig, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
    """
    Save a CompressionConfig to a JSON file, creating parent directories.

    Raises:
        ValueError: If the config is invalid
    """
    config.validate()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2)
        f.write("\n")
