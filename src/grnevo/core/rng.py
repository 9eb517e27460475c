"""Central RNG helpers using PCG64DXSM."""
from __future__ import annotations

from numpy.random import Generator, PCG64DXSM


def make_rng(seed: int | None = None) -> Generator:
    return Generator(PCG64DXSM(seed))


def as_rng(seed_or_rng: int | Generator | None) -> Generator:
    """Accept either a seed or an existing generator; generators are passed through untouched."""
    if isinstance(seed_or_rng, Generator):
        return seed_or_rng
    return make_rng(seed_or_rng)
