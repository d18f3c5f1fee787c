"""Top-level package for reliability-buffer.

A bounded reorder buffer that restores sequence order for items delivered
by an unordered, possibly duplicating transport, plus the per-session
receiver, configuration and logging helpers built around it.
"""

from ._version import __version__
from .buffer import DEFAULT_RELIABILITY_BUFFER_SIZE, InsertResult, ReliabilityBuffer
from .configuration import BufferSettings, load_cli_config, load_project_config
from .receiver import SequencedReceiver

__all__ = [
    "DEFAULT_RELIABILITY_BUFFER_SIZE",
    "InsertResult",
    "ReliabilityBuffer",
    "SequencedReceiver",
    "BufferSettings",
    "load_cli_config",
    "load_project_config",
    "__version__",
]
