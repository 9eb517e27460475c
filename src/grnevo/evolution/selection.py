"""Selection utilities: scalar scoring, ranking, elitism and tournaments."""
from __future__ import annotations

from typing import List, Optional

import numpy as np

from grnevo.errors import EvaluationError
from .individual import Individual


def score(ind: Individual, objective: Optional[str] = None) -> float:
    """Scalar fitness: one named objective, or the sum of all of them."""
    if objective is not None:
        if objective not in ind.fitnesses:
            raise EvaluationError(f"individual {ind.id} has no '{objective}' objective")
        return float(ind.fitnesses[objective])
    if not ind.fitnesses:
        raise EvaluationError(f"individual {ind.id} has not been evaluated")
    return float(sum(ind.fitnesses.values()))


def rank(population: List[Individual], *, objective: Optional[str] = None, maximize: bool = True) -> List[Individual]:
    """Best first. Ties keep population order."""
    return sorted(population, key=lambda ind: score(ind, objective), reverse=maximize)


def elites(population: List[Individual], k: int, *, objective: Optional[str] = None, maximize: bool = True) -> List[Individual]:
    return rank(population, objective=objective, maximize=maximize)[:k]


def tournament(
    population: List[Individual],
    rng: np.random.Generator,
    *,
    size: int = 3,
    objective: Optional[str] = None,
    maximize: bool = True,
) -> Individual:
    """Winner of ``size`` contestants drawn with replacement."""
    picks = rng.integers(0, len(population), size=size)
    contestants = [population[int(i)] for i in picks]
    scores = [score(ind, objective) for ind in contestants]
    best = int(np.argmax(scores) if maximize else np.argmin(scores))
    return contestants[best]
