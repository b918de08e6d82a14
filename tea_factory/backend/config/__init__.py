"""Configuration package for the tea factory simulation."""

from .settings import (
    ConfigError,
    DashboardConfig,
    Settings,
    SimulationConfig,
    DEFAULT_CONFIG_PATH,
    MAX_BATCHES,
    MAX_SECONDS,
    load_config,
    load_settings,
)

__all__ = [
    "ConfigError",
    "DashboardConfig",
    "Settings",
    "SimulationConfig",
    "DEFAULT_CONFIG_PATH",
    "MAX_BATCHES",
    "MAX_SECONDS",
    "load_config",
    "load_settings",
]
