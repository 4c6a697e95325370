"""Logging configuration for linkweave.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

The log level can be configured via the LINKWEAVE_LOG_LEVEL environment variable:
    - DEBUG: Alias collisions, unresolved links, missing math placeholders
    - INFO: Build progress (default)
    - WARNING: Documents whose source could not be read or parsed
    - ERROR: A document failed and was skipped
"""

import logging
import os
import sys


def configure_logging(quiet: bool = False) -> None:
    """Configure logging for the linkweave package.

    Call this once at application startup (the CLI does).
    Subsequent calls are no-ops.

    Args:
        quiet: Only show warnings and errors, regardless of LINKWEAVE_LOG_LEVEL.
    """
    root_logger = logging.getLogger("linkweave")

    if root_logger.handlers:
        return

    level_name = os.environ.get("LINKWEAVE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if quiet:
        level = max(level, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Avoid duplicate messages through the root logger
    root_logger.propagate = False
