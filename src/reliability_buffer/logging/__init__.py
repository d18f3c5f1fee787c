"""Logging utilities for reliability-buffer."""

from reliability_buffer.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
