"""
Logging helpers for md-i18n.

Progress messages and warnings go to stderr through the `md_i18n`
package logger, leaving stdout to the reports and JSON the CLI prints.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "md_i18n"

_FORMAT = "md-i18n: %(levelname)s: %(message)s"
_DEBUG_FORMAT = "md-i18n: %(levelname)s %(name)s: %(message)s"


class _CliHandler(logging.StreamHandler):
    """Handler installed by configure_logging; replaced on reconfiguration."""


def level_for(verbosity: int) -> int:
    """
    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """

    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.

    Calling this again swaps the previous handler instead of stacking
    another one. Debug output includes the logger name.
    """

    level = level_for(verbosity)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, _CliHandler):
            logger.removeHandler(handler)

    handler = _CliHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if level <= logging.DEBUG else _FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
