"""tracky - a terminal client for tracky notes."""

__version__ = "0.1.0"
