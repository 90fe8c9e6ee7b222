"""Turn detection and turn-signal warnings for a live GPS stream."""

__version__ = "0.1.0"
