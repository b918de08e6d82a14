from .interfaces import ISource, ISink, IAdapter, TelemetryRow
from .engine import DataEngine

__all__ = ['ISource', 'ISink', 'IAdapter', 'TelemetryRow', 'DataEngine']
