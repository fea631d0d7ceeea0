"""Console crime tracking system: officer login, crime records, JSON persistence."""

__version__ = "0.1.0"
