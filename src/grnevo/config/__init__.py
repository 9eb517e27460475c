"""Configuration utilities for grnevo."""
from pathlib import Path

from .schema import ConfigSchema, EvolutionConfig, GRNConfig, OutputConfig, TaskConfig, load_config

DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")

__all__ = [
    "ConfigSchema",
    "EvolutionConfig",
    "GRNConfig",
    "OutputConfig",
    "TaskConfig",
    "load_config",
    "DEFAULTS_PATH",
]
