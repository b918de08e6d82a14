import logging
from typing import List, Dict, Any, Optional

from .batch import TeaBatch, StageDurations
from .history import BatchHistory, DEFAULT_CAPACITY
from .physics import ModelVariant

logger = logging.getLogger("BatchLine")

GUI_MAX_BATCHES = 16
CLI_MAX_BATCHES = 128


class BatchLine:
    """
    Parallel batches sharing one model selection.

    Batches are independent engines stepped one after another in the
    caller's thread. The line also keeps one history buffer per batch.
    """
    def __init__(self, batch_count: int = 1,
                 durations: Optional[StageDurations] = None,
                 model: ModelVariant = ModelVariant.DEFAULT,
                 max_batches: int = GUI_MAX_BATCHES,
                 history_capacity: int = DEFAULT_CAPACITY):
        """
        Args:
            batch_count: Initial number of batches (clamped to [1, max_batches])
            durations: Stage durations shared by every batch
            model: Initial model variant
            max_batches: 16 for the dashboard, 128 for the CLI
            history_capacity: Samples kept per batch
        """
        self.durations = durations or StageDurations()
        self.model = model
        self.max_batches = max(1, max_batches)
        self.history_capacity = history_capacity
        self.running = False

        self.batches: List[TeaBatch] = []
        self.histories: List[BatchHistory] = []
        self._rebuild(self._clamp_count(batch_count))

    def _clamp_count(self, count: int) -> int:
        return max(1, min(int(count), self.max_batches))

    def _rebuild(self, count: int) -> None:
        self.batches = [
            TeaBatch(self.durations, self.model, batch_id=f"batch{i + 1:02d}")
            for i in range(count)
        ]
        self.histories = [BatchHistory(self.history_capacity) for _ in range(count)]
        self._record_history()

    def _record_history(self) -> None:
        for batch, history in zip(self.batches, self.histories):
            history.record(batch)

    # ============================================================
    # COMMANDS (broadcast to every batch)
    # ============================================================

    def start(self) -> bool:
        """Refused when the first (reference) batch is already FINISHED."""
        if self.batches[0].is_finished:
            return False
        self.running = True
        return True

    def pause(self) -> bool:
        self.running = False
        return True

    def reset(self) -> None:
        self.running = False
        for batch in self.batches:
            batch.reset()
        for history in self.histories:
            history.clear()
        self._record_history()

    def set_model(self, model: ModelVariant) -> bool:
        if self.running:
            logger.debug(f"set_model({model}) rejected: line running")
            return False
        self.model = model
        for batch in self.batches:
            batch.set_model(model)
        logger.info(f"Model set to {model} for {len(self.batches)} batch(es)")
        return True

    def set_batch_count(self, count: int) -> bool:
        """Discard and rebuild all batches. Refused while running."""
        if self.running:
            logger.debug(f"set_batch_count({count}) rejected: line running")
            return False
        self._rebuild(self._clamp_count(count))
        logger.info(f"Batch count set to {len(self.batches)}")
        return True

    # ============================================================
    # CYCLIC EXECUTION
    # ============================================================

    def update(self, delta_seconds: float) -> None:
        """
        Advance every batch by the same frame delta.

        The line stays running while at least one batch is still active.
        """
        if not self.running:
            return

        any_active = False
        for batch in self.batches:
            batch.update(delta_seconds)
            if not batch.is_finished:
                any_active = True
        self._record_history()

        if not any_active:
            logger.info("All batches finished")
        self.running = any_active

    def is_running(self) -> bool:
        return self.running

    # ============================================================
    # READ ACCESS
    # ============================================================

    @property
    def batch_count(self) -> int:
        return len(self.batches)

    def clamp_index(self, index: int) -> int:
        return max(0, min(int(index), len(self.batches) - 1))

    def batch(self, index: int) -> TeaBatch:
        """Batch by index; out-of-range indices are clamped."""
        return self.batches[self.clamp_index(index)]

    def history(self, index: int) -> BatchHistory:
        return self.histories[self.clamp_index(index)]

    def get_all_tags(self) -> Dict[str, Any]:
        """Collects all tags from all batches for the dashboard."""
        all_tags = {
            "Line.running": self.running,
            "Line.model": self.model.value,
            "Line.batch_count": len(self.batches),
        }
        for batch in self.batches:
            all_tags.update(batch.get_tags())
        return all_tags
