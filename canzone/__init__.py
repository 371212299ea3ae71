"""Playback configuration and sinks, metadata models and a zeroconf discovery endpoint."""

__version__ = "0.1.0"