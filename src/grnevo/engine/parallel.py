"""Parallel evaluation helpers."""
from __future__ import annotations
from multiprocessing import Pool
from typing import Callable, Iterable, Any, List


def parallel_map(fn: Callable[[Any], Any], items: Iterable[Any], workers: int) -> List[Any]:
    """Order-preserving map; ``workers <= 1`` stays in-process."""
    items = list(items)
    if workers <= 1 or len(items) <= 1:
        return list(map(fn, items))
    chunksize = max(1, len(items) // (workers * 4))
    with Pool(processes=min(workers, len(items))) as pool:
        return pool.map(fn, items, chunksize=chunksize)
