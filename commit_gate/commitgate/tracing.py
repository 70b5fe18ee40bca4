"""Lightweight timing spans for log-based tracing."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


@contextmanager
def trace_timer(operation: str, **metadata: object) -> Iterator[None]:
    """Log how long the enclosed block took, tagged with *metadata*.

    Usage:
        with trace_timer("Running commit validator", validator="change_id"):
            ...
    """
    started_at = time.perf_counter()
    try:
        yield
    finally:
        if logger.isEnabledFor(logging.DEBUG):
            duration_ms = (time.perf_counter() - started_at) * 1000
            tags = ", ".join(f"{k}={v}" for k, v in metadata.items())
            logger.debug("%s (%s) took %.3f ms", operation, tags, duration_ms)
