"""Sensor management service for the IoT backend."""

__version__ = "0.1.0"
