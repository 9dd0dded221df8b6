"""Retry-once helper for transient failures."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

__all__ = ["call_with_single_retry"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_single_retry(
    func: Callable[..., T],
    *args,
    description: str = "operation",
    retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    **kwargs,
) -> T:
    """Call ``func`` and, if it raises ``retry_on``, call it exactly once more.

    The exception from the second attempt propagates unchanged.
    """

    try:
        return func(*args, **kwargs)
    except retry_on as exc:
        logger.warning("First %s attempt failed, retrying once: %s", description, exc)

    return func(*args, **kwargs)
