"""Utility module for Archivr."""

from archivr.utils.logging import get_logger, redact_secrets, setup_logging, setup_task_logging

__all__ = [
    "get_logger",
    "redact_secrets",
    "setup_logging",
    "setup_task_logging",
]
