"""Command line utilities for reliability-buffer."""

from reliability_buffer.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
