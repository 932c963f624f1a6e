"""Modular audio synthesis graph with MIDI-driven components and editor nodes."""

__version__ = "0.1.0"
__all__ = ["types", "envelope", "components", "generators", "effects", "nodes"]