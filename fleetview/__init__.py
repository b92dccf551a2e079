"""Live fleet telemetry viewer: polling sync layer over a read-only metrics API."""

__version__ = "0.1.0"
