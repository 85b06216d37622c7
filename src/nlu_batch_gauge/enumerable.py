"""
Sequence helpers

batch() splits a sequence into fixed-size groups, and select_async() maps an
async selector over a sequence with bounded concurrency.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Iterator
from typing import TypeVar

from nlu_batch_gauge.domain.exceptions import ArgumentError

T = TypeVar("T")
R = TypeVar("R")


def batch(items: Iterable[T], batch_size: int) -> Iterator[list[T]]:
    """
    Split items into contiguous groups of batch_size.

    Every group but the last has exactly batch_size elements. The input is
    consumed lazily, so streaming sources are supported.

    Args:
        items: Items to split
        batch_size: Number of items per group

    Returns:
        Iterator over the groups

    Raises:
        ArgumentError: If items is None or batch_size is less than 1
    """
    if items is None:
        raise ArgumentError("items", "items must not be None.")
    if batch_size < 1:
        raise ArgumentError("batch_size", "batch_size must be at least 1.")

    return _batch(items, batch_size)


def _batch(items: Iterable[T], batch_size: int) -> Iterator[list[T]]:
    group: list[T] = []
    for item in items:
        group.append(item)
        if len(group) == batch_size:
            yield group
            group = []

    if group:
        yield group


def select_async(
    items: Iterable[T],
    selector: Callable[[T], Awaitable[R]],
    degree_of_parallelism: int,
) -> Awaitable[list[R]]:
    """
    Apply an async selector to each item with bounded concurrency.

    Results are returned in input order. Arguments are validated before any
    coroutine is created, so invalid calls fail without awaiting.

    Args:
        items: Items to transform
        selector: Async transform applied to each item
        degree_of_parallelism: Maximum number of selectors running at once

    Returns:
        Awaitable resolving to the list of results

    Raises:
        ArgumentError: If items or selector is None, or degree_of_parallelism is less than 1
    """
    if items is None:
        raise ArgumentError("items", "items must not be None.")
    if selector is None:
        raise ArgumentError("selector", "selector must not be None.")
    if degree_of_parallelism < 1:
        raise ArgumentError("degree_of_parallelism", "degree_of_parallelism must be at least 1.")

    return _select_async(items, selector, degree_of_parallelism)


async def _select_async(
    items: Iterable[T],
    selector: Callable[[T], Awaitable[R]],
    degree_of_parallelism: int,
) -> list[R]:
    indexed = list(enumerate(items))
    results: list = [None] * len(indexed)
    pending = iter(indexed)

    async def _worker() -> None:
        # Workers share one iterator, so each item is taken exactly once
        for index, item in pending:
            results[index] = await selector(item)

    workers = [
        asyncio.ensure_future(_worker())
        for _ in range(min(degree_of_parallelism, len(indexed)))
    ]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    return results
