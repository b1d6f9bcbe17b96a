"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only installs the root handler and level.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level()),
        format=LOG_FORMAT,
    )
