"""JSON-line logging for workflow stages.

Every stage emits one JSON object per event (``split.completed``,
``train.completed`` ...) so a run can be replayed from its log. Events go to
stderr, keeping stdout free for the reports and paths the CLI prints.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any

LEVEL_ENV = 'LRW_LOG_LEVEL'
DEBUG_ENV = 'LRW_DEBUG'


def json_log(event: str, **fields: Any) -> str:
    """Serialize an event and its fields; numpy scalars and paths fall back to ``str``."""
    payload = {'ts': round(time.time(), 3), 'msg': event, **fields}
    return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level() -> int:
    """Pick the log level from ``LRW_LOG_LEVEL``, then ``LRW_DEBUG``, else INFO."""
    name = os.getenv(LEVEL_ENV, '').strip().upper()
    if name:
        level = logging.getLevelName(name)
        if isinstance(level, int):
            return level
    return logging.DEBUG if os.getenv(DEBUG_ENV) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.setLevel(resolve_level())
    return logger
