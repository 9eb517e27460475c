"""Lightweight profiling helpers."""
import contextlib
import time
from typing import Iterator

from rich.console import Console


@contextlib.contextmanager
def timer(name: str, console: Console | None = None, enabled: bool = True) -> Iterator[dict]:
    """Time a block; the elapsed seconds end up in the yielded dict under ``elapsed``."""
    record: dict = {"name": name}
    start = time.perf_counter()
    try:
        yield record
    finally:
        record["elapsed"] = time.perf_counter() - start
        if enabled and console is not None:
            console.log(f"[PROFILE] {name}: {record['elapsed']:.4f}s")
