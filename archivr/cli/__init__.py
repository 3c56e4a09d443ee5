"""Command-line interface for Archivr."""
