"""
Tea factory backend: simulation core, configuration and the dashboard API.
"""
