import logging
from typing import List, Optional, Sequence

from .interfaces import ISource, ISink, TelemetryRow

logger = logging.getLogger("DataGateway")


class DataEngine:
    """
    Core Logic: Read -> Dedupe -> Write.
    Emits one row per reported tick (change of elapsed seconds).
    """
    def __init__(self, source: ISource, sinks: Sequence[ISink]):
        self.source = source
        self.sinks: List[ISink] = list(sinks)
        self.last_elapsed: Optional[int] = None
        self.rows_written = 0

    def step(self) -> bool:
        """
        Returns:
            True if a row was written to the sinks
        """
        # 1. Read
        row = self.source.read()
        if row is None:
            return False

        # 2. Dedupe on elapsed seconds
        if row.elapsed_seconds == self.last_elapsed:
            return False
        self.last_elapsed = row.elapsed_seconds

        # 3. Write
        self.write(row)
        return True

    def write(self, row: TelemetryRow) -> None:
        for sink in self.sinks:
            sink.write(row)
        self.rows_written += 1
