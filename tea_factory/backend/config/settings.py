"""Configuration settings for the tea factory simulation."""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..simulation.physics import ModelVariant

logger = logging.getLogger("Config")

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "settings.json")

# Upper bound for any duration / dt argument (one day)
MAX_SECONDS = 24 * 60 * 60
MAX_BATCHES = 128


class ConfigError(ValueError):
    """Raised when settings or CLI arguments are out of range."""


def _positive_seconds(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0 or value > MAX_SECONDS:
        raise ConfigError(f"{name} must be in 1..{MAX_SECONDS}, got {value}")
    return value


@dataclass
class SimulationConfig:
    """Simulation run parameters."""
    # Reporting step for the CLI loop (seconds); may exceed a stage duration
    dt_seconds: int = 1

    # Stage durations (seconds)
    steaming_seconds: int = 30
    rolling_seconds: int = 30
    drying_seconds: int = 60

    model: ModelVariant = ModelVariant.DEFAULT

    # Parallel batches
    batches: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        config = cls()
        for key in ("dt_seconds", "steaming_seconds", "rolling_seconds",
                    "drying_seconds", "batches"):
            if key in data:
                setattr(config, key, data[key])
        if "model" in data:
            try:
                config.model = ModelVariant.from_name(data["model"])
            except ValueError as e:
                raise ConfigError(str(e)) from None
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dt_seconds": self.dt_seconds,
            "steaming_seconds": self.steaming_seconds,
            "rolling_seconds": self.rolling_seconds,
            "drying_seconds": self.drying_seconds,
            "model": self.model.value,
            "batches": self.batches,
        }

    def validate(self) -> "SimulationConfig":
        _positive_seconds("dt_seconds", self.dt_seconds)
        _positive_seconds("steaming_seconds", self.steaming_seconds)
        _positive_seconds("rolling_seconds", self.rolling_seconds)
        _positive_seconds("drying_seconds", self.drying_seconds)
        if not isinstance(self.model, ModelVariant):
            raise ConfigError(f"Invalid model: {self.model!r}")
        if isinstance(self.batches, bool) or not isinstance(self.batches, int):
            raise ConfigError(f"batches must be an integer, got {self.batches!r}")
        if not 1 <= self.batches <= MAX_BATCHES:
            raise ConfigError(f"batches must be in 1..{MAX_BATCHES}, got {self.batches}")
        return self


@dataclass
class DashboardConfig:
    """Dashboard API parameters."""
    host: str = "0.0.0.0"
    port: int = 8000

    # Frame loop period (seconds); each frame calls BatchLine.update(measured dt)
    frame_seconds: float = 0.1

    # Directory for per-batch CSV recordings (None = recording off)
    csv_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardConfig":
        config = cls()
        for key in ("host", "port", "frame_seconds", "csv_dir"):
            if key in data:
                setattr(config, key, data[key])
        return config


@dataclass
class Settings:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings JSON, falling back to defaults if the file is absent.

    Layout:
        {"simulation": {...SimulationConfig keys...},
         "dashboard": {...DashboardConfig keys...}}
    """
    config_path = path or DEFAULT_CONFIG_PATH
    try:
        with open(config_path, "r") as f:
            raw = json.load(f)
    except FileNotFoundError:
        if path is not None:
            raise ConfigError(f"Settings file not found: {path}") from None
        logger.debug(f"No settings at {config_path}, using defaults")
        return Settings()
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from None

    if not isinstance(raw, dict):
        raise ConfigError(f"Settings root must be an object: {config_path}")

    return Settings(
        simulation=SimulationConfig.from_dict(raw.get("simulation", {})),
        dashboard=DashboardConfig.from_dict(raw.get("dashboard", {})),
    )


def load_config(path: Optional[str] = None) -> SimulationConfig:
    """Simulation section of the settings file."""
    return load_settings(path).simulation
