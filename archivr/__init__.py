"""Archivr - multi-provider AI tagging for saved posts."""

__version__ = "0.1.0"
