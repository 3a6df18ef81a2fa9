"""Typed values, a file watcher interface, and subscription responses and statistics for gNMI-style telemetry."""

__version__ = "0.1.0"
__all__ = ["value", "watch", "stats", "subscribe"]