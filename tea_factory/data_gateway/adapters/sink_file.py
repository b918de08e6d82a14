import logging
import os
import sys
from typing import Optional, TextIO

from tea_factory.data_gateway.core.interfaces import ISink, IAdapter, TelemetryRow
from tea_factory.backend.simulation.physics.quality import compute_quality_score, classify_quality

logger = logging.getLogger("DataGateway")

CSV_HEADER = "process,elapsedSeconds,moisture,temperatureC,aroma,color,qualityScore,qualityStatus"

# "[STEAMING]" is the widest label; shorter ones are padded to match
LABEL_WIDTH = 11


def format_csv_row(row: TelemetryRow) -> str:
    """Fixed-precision CSV line; score/status recomputed from the row."""
    score = compute_quality_score(row.moisture, row.aroma, row.color)
    status = classify_quality(score)
    return (f"{row.process},{row.elapsed_seconds},"
            f"{row.moisture:.6f},{row.temperature_c:.3f},"
            f"{row.aroma:.3f},{row.color:.3f},"
            f"{score:.2f},{status.value}")


def format_log_line(row: TelemetryRow) -> str:
    """e.g. '[STEAMING] t=30s moisture=0.78 temp=95.0 aroma=40.0 color=10.0'"""
    label = f"[{row.process}]".ljust(LABEL_WIDTH)
    return (f"{label}t={row.elapsed_seconds}s "
            f"moisture={row.moisture:.2f} "
            f"temp={row.temperature_c:.1f} "
            f"aroma={row.aroma:.1f} "
            f"color={row.color:.1f}")


class CsvFileSink(ISink, IAdapter):
    """
    Writes telemetry rows to a CSV file.
    Format:
    process,elapsedSeconds,moisture,temperatureC,aroma,color,qualityScore,qualityStatus
    """
    def __init__(self, file_path: str):
        self.file_path = file_path
        self._file: Optional[TextIO] = None
        self.header_written = False

    def connect(self):
        """Create/truncate the file and write the header once."""
        if self._file is not None:
            return
        try:
            # Ensure dir exists
            os.makedirs(os.path.dirname(os.path.abspath(self.file_path)), exist_ok=True)
            self._file = open(self.file_path, "w", newline="")
            self.header_written = False
            self.write_header()
        except OSError as e:
            logger.error(f"CSV sink open failed for {self.file_path}: {e}")
            self._file = None

    def disconnect(self):
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            logger.error(f"CSV sink close failed for {self.file_path}: {e}")
        finally:
            self._file = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def write_header(self) -> None:
        if self._file is None or self.header_written:
            return
        self._file.write(CSV_HEADER + "\n")
        self._file.flush()
        self.header_written = True

    def write(self, row: TelemetryRow) -> None:
        if self._file is None:
            self.connect()
            if self._file is None:
                return

        try:
            self._file.write(format_csv_row(row) + "\n")
            self._file.flush()
        except OSError as e:
            logger.error(f"CSV sink write failed for {self.file_path}: {e}")


class ConsoleSink(ISink):
    """Step log sink: one fixed-format line per row."""
    def __init__(self, stream: Optional[TextIO] = None, prefix: str = ""):
        self.stream = stream
        self.prefix = prefix

    def write(self, row: TelemetryRow) -> None:
        stream = self.stream or sys.stdout
        stream.write(f"{self.prefix}{format_log_line(row)}\n")
