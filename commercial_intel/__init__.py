"""Commercial Intelligence Service - patterns, risk signals and proposal snapshots."""

__version__ = "1.0.0"
