"""Shared audio sample buffers, pipe and shared-memory readers, and bar-graph outputs."""

__version__ = "0.1.0"