"""
Data Gateway

Moves telemetry from batches to sinks:
    source (TeaBatch accessors) -> DataEngine (one row per reported tick) -> sinks

Sinks:
- CsvFileSink: fixed CSV header, score/status recomputed per row
- ConsoleSink: human-readable step log
"""
