"""
nicegrid: An accessible, keyboard-driven data grid for NiceGUI.

This package provides:
- GridEngine: headless grid state machine (sort, filter, selection,
  keyboard navigation, cell editing, pagination)
- GridView: NiceGUI rendering of a GridEngine
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from nicegrid.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library (imported by other applications), logging is
automatically handled by the parent application's configuration.
"""

import logging

from nicegrid.utils.logging import configure_logging, get_logger

from nicegrid.grid import (
    ColumnConfig,
    CommandResult,
    GridConfig,
    GridEngine,
    GridSnapshot,
    GridView,
)

# Ensure nicegrid logger has NullHandler so logs don't propagate to root
# when no application has configured logging. Applications/demos call
# configure_logging() to replace this with a real handler.
_logger = logging.getLogger("nicegrid")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ColumnConfig",
    "CommandResult",
    "GridConfig",
    "GridEngine",
    "GridSnapshot",
    "GridView",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
