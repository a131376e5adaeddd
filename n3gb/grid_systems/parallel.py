# n3gb/grid_systems/parallel.py
"""Order-preserving fan-out for CPU-bound grid work."""

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

from ..config import config

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

EXECUTOR_TYPES = {
    'process': ProcessPoolExecutor,
    'thread': ThreadPoolExecutor,
}


def _create_executor(kind: str, max_workers: Optional[int]) -> Executor:
    try:
        executor_class = EXECUTOR_TYPES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown executor type: {kind}. Available: {sorted(EXECUTOR_TYPES)}"
        )
    return executor_class(max_workers=max_workers)


def ordered_map(func: Callable[[T], R],
                items: Iterable[T],
                work_size: Optional[int] = None,
                executor: Optional[str] = None,
                max_workers: Optional[int] = None,
                threshold: Optional[int] = None) -> List[R]:
    """
    Apply ``func`` to every item and return the results in input order.

    Work smaller than the threshold, or with a single item, runs inline.
    Otherwise the items are dispatched with ``Executor.map``. ``func`` must be a
    module-level function (or a ``functools.partial`` of one) when the process
    executor is used.

    Args:
        func: Pure function applied to each item
        items: Work items
        work_size: Estimated cost used against the threshold (defaults to the
            number of items)
        executor: 'process' or 'thread' (defaults to ``grids.parallel.executor``)
        max_workers: Pool size (defaults to ``grids.parallel.max_workers``)
        threshold: Minimum work size for going parallel (defaults to
            ``grids.parallel.parallel_threshold``)

    Returns:
        List of results, one per item, in input order
    """
    items = list(items)
    if work_size is None:
        work_size = len(items)
    if threshold is None:
        threshold = config.get('grids.parallel.parallel_threshold', 200000)

    if len(items) <= 1 or work_size < threshold:
        return [func(item) for item in items]

    kind = executor or config.get('grids.parallel.executor', 'process')
    if max_workers is None:
        max_workers = config.get('grids.parallel.max_workers')

    logger.debug(f"Dispatching {len(items)} tasks ({work_size} units) to {kind} pool")
    with _create_executor(kind, max_workers) as pool:
        return list(pool.map(func, items))
