"""
Batch History

Fixed-capacity ring buffer of per-second samples for charts.
A sample is appended whenever the batch's elapsed seconds change.
"""

from collections import deque
from dataclasses import dataclass, asdict
from typing import Deque, Dict, Any, List, Optional

from .batch import TeaBatch

DEFAULT_CAPACITY = 600

FIELDS = ('elapsed_seconds', 'moisture', 'temperature_c', 'aroma', 'color', 'quality_score')


@dataclass(frozen=True)
class HistorySample:
    elapsed_seconds: int
    process: str
    moisture: float
    temperature_c: float
    aroma: float
    color: float
    quality_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BatchHistory:
    """Oldest samples are dropped once capacity is reached."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = max(1, int(capacity))
        self._samples: Deque[HistorySample] = deque(maxlen=self.capacity)
        self._last_elapsed: Optional[int] = None

    def record(self, batch: TeaBatch) -> bool:
        """Append a sample if elapsed time moved since the last one."""
        if batch.elapsed_seconds == self._last_elapsed:
            return False
        self._last_elapsed = batch.elapsed_seconds
        self._samples.append(HistorySample(
            elapsed_seconds=batch.elapsed_seconds,
            process=batch.process_state.value,
            moisture=batch.moisture,
            temperature_c=batch.temperature_c,
            aroma=batch.aroma,
            color=batch.color,
            quality_score=batch.quality_score(),
        ))
        return True

    def clear(self) -> None:
        self._samples.clear()
        self._last_elapsed = None

    def series(self, field: str) -> List[Any]:
        """Column of the buffer, oldest first."""
        if field not in FIELDS and field != 'process':
            raise KeyError(f"Unknown history field: {field}")
        return [getattr(s, field) for s in self._samples]

    def samples(self) -> List[HistorySample]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)
