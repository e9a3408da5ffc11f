# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resilient collection fetcher.

Fetches one upstream collection and normalizes its elements. Failures are
reported through FetchResult.degraded instead of raised, so one failing
collection cannot abort a screen that also shows others. The fetcher
never substitutes data of its own; deciding what to show for a degraded
fetch is the caller's job.

Example:
    >>> result = await fetch_collection(catalog.list_all, normalize_class, name="classes")
    >>> if result.degraded:
    ...     show_banner(result.error)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from enrollsync.core.errors import classify_error, describe_error
from enrollsync.models.enrollment import ErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    """Result of a collection fetch.

    Attributes:
        items: Normalized elements, in upstream order.
        degraded: True if the fetch failed or the payload was not a collection.
        dropped: Number of elements discarded by the normalizer.
        error: Failure kind when the source raised.
    """

    items: list[T] = field(default_factory=list)
    degraded: bool = False
    dropped: int = 0
    error: ErrorKind | None = None


def _is_collection(payload: Any) -> bool:
    return isinstance(payload, (list, tuple))


async def fetch_collection(
    source: Callable[[], Awaitable[Any]],
    normalize: Callable[[Any], T | None],
    *,
    name: str = "collection",
    timeout: float | None = None,
) -> FetchResult[T]:
    """Fetch and normalize one upstream collection.

    Args:
        source: Zero-argument coroutine function returning the raw payload.
            Called exactly once.
        normalize: Maps one raw element to T, or None to drop it.
        name: Collection name for log messages.
        timeout: Optional deadline in seconds.

    Returns:
        FetchResult with the normalized items.
    """
    try:
        if timeout is not None:
            payload = await asyncio.wait_for(source(), timeout=timeout)
        else:
            payload = await source()
    except Exception as e:
        kind = classify_error(e)
        logger.warning(
            "Fetching %s failed (%s): %s",
            name,
            kind.value,
            describe_error(e),
        )
        return FetchResult(degraded=True, error=kind)

    if not _is_collection(payload):
        logger.warning(
            "Expected a list for %s but got %s",
            name,
            type(payload).__name__,
        )
        return FetchResult(degraded=True)

    items: list[T] = []
    dropped = 0
    for raw in payload:
        item = normalize(raw)
        if item is None:
            dropped += 1
            continue
        items.append(item)

    if dropped:
        logger.warning("Dropped %d unusable %s records", dropped, name)

    logger.debug("Fetched %d %s records", len(items), name)
    return FetchResult(items=items, dropped=dropped)
