from typing import Optional

from tea_factory.data_gateway.core.interfaces import ISource, TelemetryRow
from tea_factory.backend.simulation.batch import TeaBatch


class BatchSourceAdapter(ISource):
    """
    Reads telemetry straight from a TeaBatch's accessors.
    """
    def __init__(self, batch: TeaBatch):
        self.batch = batch

    def read(self, process: Optional[str] = None) -> Optional[TelemetryRow]:
        """
        Args:
            process: Stage label for the row. Defaults to the batch's current
                stage; a step driver passes the stage that was active when
                the step began.
        """
        b = self.batch
        return TelemetryRow(
            process=process or b.process_state.value,
            elapsed_seconds=b.elapsed_seconds,
            moisture=b.moisture,
            temperature_c=b.temperature_c,
            aroma=b.aroma,
            color=b.color,
        )
