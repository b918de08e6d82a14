"""
Single-Batch Simulator

Run control (start / pause / reset) around one TeaBatch.
The driver only issues commands and reads the batch.
"""

import logging
from typing import Optional

from .batch import TeaBatch, StageDurations
from .physics import ModelVariant

logger = logging.getLogger("Simulator")


class Simulator:
    def __init__(self, durations: Optional[StageDurations] = None,
                 model: ModelVariant = ModelVariant.DEFAULT):
        self.running = False
        self._batch = TeaBatch(durations, model)

    def start(self) -> bool:
        """IDLE/PAUSED -> RUNNING. Refused once the batch is FINISHED."""
        if self._batch.is_finished:
            return False
        self.running = True
        return True

    def pause(self) -> bool:
        self.running = False
        return True

    def reset(self) -> None:
        """Stop and return the batch to its initial state."""
        self.running = False
        self._batch.reset()

    def set_model(self, model: ModelVariant) -> bool:
        """Refused while running; otherwise keeps stage and elapsed time."""
        if self.running:
            logger.debug(f"set_model({model}) rejected: simulator running")
            return False
        return self._batch.set_model(model)

    def update(self, delta_seconds: float) -> None:
        """Advance only while running; stops by itself at FINISHED."""
        if not self.running:
            return
        self._batch.update(delta_seconds)
        if self._batch.is_finished:
            self.running = False

    def is_running(self) -> bool:
        return self.running

    @property
    def batch(self) -> TeaBatch:
        return self._batch
