"""Protocols (extension points) for grnevo.

The optimizer only relies on these structural interfaces, so any genome type
can be evolved without inheriting from grnevo classes.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from grnevo.evolution.individual import Individual

D = TypeVar("D", bound="Evolvable")


@runtime_checkable
class Evolvable(Protocol):
    """Capability set required from an evolvable unit.

    Example::

        class MyDNA:
            @classmethod
            def from_string(cls, text): ...
            def serialize(self): ...
            def reset(self): ...
            def mutate(self, rng): ...
            def crossover(self, other, rng): ...
    """

    @classmethod
    def from_string(cls: type[D], text: str) -> D: ...

    def serialize(self) -> str: ...

    def reset(self) -> None: ...

    def mutate(self, rng: np.random.Generator) -> None: ...

    def crossover(self: D, other: D, rng: np.random.Generator) -> D: ...


Evaluator = Callable[["Individual"], None]
"""Fills ``individual.fitnesses``; may drive the individual's DNA freely."""

DNAFactory = Callable[["np.random.Generator"], Evolvable]
"""Builds a fresh randomized DNA from the optimizer's generator."""
