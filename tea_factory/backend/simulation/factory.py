from .batch import StageDurations
from .engine import BatchLine, GUI_MAX_BATCHES
from ..config import SimulationConfig


def durations_from_config(config: SimulationConfig) -> StageDurations:
    return StageDurations(
        steaming=config.steaming_seconds,
        rolling=config.rolling_seconds,
        drying=config.drying_seconds,
    )


def build_line(config: SimulationConfig, max_batches: int = GUI_MAX_BATCHES) -> BatchLine:
    """
    Build the batch line from a validated configuration.

    CRITICAL: This function ONLY assembles batches.
    - NO validation (SimulationConfig.validate() runs first)
    - NO stepping
    """
    return BatchLine(
        batch_count=config.batches,
        durations=durations_from_config(config),
        model=config.model,
        max_batches=max_batches,
    )
