"""GPS round-state, shot detection and automatic scoring engine."""

__version__ = "0.1.0"
