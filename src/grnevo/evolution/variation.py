"""Offspring production from selected parents."""
from __future__ import annotations

import copy
from typing import Callable, List

import numpy as np

from .individual import Individual

Select = Callable[[], Individual]


def make_offspring(
    select: Select,
    rng: np.random.Generator,
    *,
    crossover_rate: float,
    mutation_rate: float,
) -> tuple[object, tuple[int, ...]]:
    """Return a child DNA and the ids of its parents.

    The child starts as a copy of one selected parent; with ``crossover_rate`` it
    is replaced by the crossover of two selected parents, then with
    ``mutation_rate`` it is mutated.
    """

    first = select()
    if rng.random() < crossover_rate:
        second = select()
        child = first.dna.crossover(second.dna, rng)
        parents: tuple[int, ...] = (first.id, second.id)
    else:
        child = copy.deepcopy(first.dna)
        parents = (first.id,)
    if rng.random() < mutation_rate:
        child.mutate(rng)
    return child, parents


def carry_over(population: List[Individual]) -> List[Individual]:
    """Deep copies of survivors, scores included."""
    return [copy.deepcopy(ind) for ind in population]
