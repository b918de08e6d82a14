from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TelemetryRow:
    """One reported tick of one batch."""
    process: str
    elapsed_seconds: int
    moisture: float
    temperature_c: float
    aroma: float
    color: float


class ISource(ABC):
    """
    Interface for telemetry sources (e.g. a running TeaBatch).
    """
    @abstractmethod
    def read(self) -> Optional[TelemetryRow]:
        """
        Reads the current state of the source.
        Returns None when nothing is available.
        """
        pass


class ISink(ABC):
    """
    Interface for telemetry sinks (e.g. CSV file, console log).
    """
    @abstractmethod
    def write(self, row: TelemetryRow) -> None:
        """
        Writes one row to the sink.
        """
        pass


class IAdapter(ABC):
    """
    Interface for sinks that hold an external resource (e.g. an open file).
    """
    @abstractmethod
    def connect(self) -> None:
        """Acquire the resource. Safe to call when already connected."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release the resource. Safe to call when not connected."""
