"""
Tea factory simulation core.

- physics/: leaf state, coefficient models, stage laws, quality
- batch.py: TeaBatch time-stepping engine
- simulator.py: single-batch run control
- engine.py: BatchLine (parallel batches)
- history.py / charts.py: ring buffers and PNG charts
- factory.py: build a BatchLine from configuration
"""

from .batch import TeaBatch, StageDurations
from .engine import BatchLine, GUI_MAX_BATCHES, CLI_MAX_BATCHES
from .history import BatchHistory, HistorySample
from .simulator import Simulator

__all__ = [
    'TeaBatch',
    'StageDurations',
    'BatchLine',
    'GUI_MAX_BATCHES',
    'CLI_MAX_BATCHES',
    'BatchHistory',
    'HistorySample',
    'Simulator',
]
