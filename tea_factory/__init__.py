"""
Tea Factory Simulator

Simulates batches of green tea through steaming, rolling and drying.

- backend/simulation: stage laws and the time-stepping engine
- backend/config: settings
- backend/main.py: dashboard API (FastAPI)
- data_gateway: telemetry pipeline (CSV / console sinks)
- cli.py: command line driver
"""

__version__ = "0.1.0"
