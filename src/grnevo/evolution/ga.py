"""Generational genetic algorithm over any :class:`~grnevo.protocols.Evolvable` DNA."""
from __future__ import annotations

import copy
import logging
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any, Callable, List, Optional

import numpy as np
from rich.console import Console
from rich.table import Table

from grnevo.config.schema import EvolutionConfig
from grnevo.core.profiling import timer
from grnevo.core.rng import as_rng
from grnevo.engine.checkpointing import load_checkpoint, save_checkpoint
from grnevo.engine.parallel import parallel_map
from grnevo.errors import ConfigError, EvaluationError
from grnevo.protocols import DNAFactory, Evaluator
from .individual import Individual
from .selection import elites, rank, score, tournament
from .variation import carry_over, make_offspring

logger = logging.getLogger(__name__)


class GAState(str, Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    EVALUATED = "evaluated"
    REPRODUCED = "reproduced"


def _evaluate_detached(evaluator: Evaluator, ind: Individual) -> dict[str, float]:
    """Evaluate one individual and return its scores (the only thing a worker sends back)."""
    evaluator(ind)
    return dict(ind.fitnesses)


class GA:
    """Elitist tournament GA.

    Each generation resets every DNA, evaluates the whole population, records
    statistics, then refills the population: the ``elite_count`` best individuals
    survive unchanged and every other slot receives a child of tournament-selected
    parents (crossover with ``crossover_rate``, then mutation with
    ``mutation_rate``). The population size never changes.

    Example::

        ga = GA(EvolutionConfig(population=50), seed=1)
        ga.set_evaluator(my_eval, "tracking")
        ga.initialize_population(lambda rng: GRNDNA.random(rng))
        ga.step(100)
        print(ga.best.fitnesses)
    """

    def __init__(
        self,
        config: EvolutionConfig | None = None,
        *,
        seed: int | np.random.Generator | None = 0,
        console: Console | None = None,
    ):
        self.config = config or EvolutionConfig()
        self.rng = as_rng(seed)
        self.console = console or Console()
        self.population: List[Individual] = []
        self.generation = 0
        self.history: list[dict] = []
        self.best: Optional[Individual] = None
        self.evaluator: Optional[Evaluator] = None
        self.evaluator_name = ""
        self.state = GAState.CREATED
        self._pop_size = self.config.population
        self._next_id = 0

    # ----------------------------------------------------------------- setup

    @property
    def population_size(self) -> int:
        return self._pop_size

    def set_evaluator(self, fn: Evaluator, name: str = "") -> None:
        self.evaluator = fn
        self.evaluator_name = name or getattr(fn, "__name__", "evaluator")

    def initialize_population(self, factory: DNAFactory, size: int | None = None) -> None:
        size = self.config.population if size is None else size
        if size <= 0:
            raise ConfigError("population size must be > 0")
        self._pop_size = size
        self.population = [self._new_individual(factory(self.rng)) for _ in range(size)]
        self.generation = 0
        self.history = []
        self.best = None
        self.state = GAState.INITIALIZED
        if self.config.verbosity >= 1:
            self.console.log(f"initialized population of {size} ({self.evaluator_name or 'no evaluator yet'})")

    def _new_individual(self, dna: Any, parents: tuple[int, ...] = (), born: int = 0) -> Individual:
        ind = Individual(dna=dna, id=self._next_id, parents=parents, born=born)
        self._next_id += 1
        return ind

    # --------------------------------------------------------------- scoring

    def score(self, ind: Individual) -> float:
        return score(ind, self.config.objective)

    def is_better(self, a: float, b: float) -> bool:
        return a > b if self.config.maximize else a < b

    def ranked(self) -> List[Individual]:
        return rank(self.population, objective=self.config.objective, maximize=self.config.maximize)

    # ------------------------------------------------------------ generation

    def evaluate(self) -> None:
        """Reset and evaluate every individual; evaluator errors propagate as-is."""
        if self.evaluator is None:
            raise ConfigError("set_evaluator must be called before evaluation")
        for ind in self.population:
            ind.dna.reset()
            ind.fitnesses = {}
        if self.config.workers > 1:
            results = parallel_map(partial(_evaluate_detached, self.evaluator), self.population, self.config.workers)
            for ind, fitnesses in zip(self.population, results):
                ind.fitnesses = fitnesses
        else:
            for ind in self.population:
                _evaluate_detached(self.evaluator, ind)
        for ind in self.population:
            if not ind.evaluated:
                raise EvaluationError(f"evaluator '{self.evaluator_name}' left individual {ind.id} without fitness")
        self.state = GAState.EVALUATED

    def _record(self) -> dict:
        ranked = self.ranked()
        scores = np.array([self.score(ind) for ind in ranked], dtype=np.float64)
        leader = ranked[0]
        record: dict = {
            "generation": self.generation,
            "best": float(scores[0]),
            "mean": float(scores.mean()),
            "worst": float(scores[-1]),
            "std": float(scores.std()),
            "best_id": leader.id,
        }
        for key in sorted({k for ind in ranked for k in ind.fitnesses}):
            values = [ind.fitnesses[key] for ind in ranked if key in ind.fitnesses]
            record[f"{key}_mean"] = float(np.mean(values))
            if key in leader.fitnesses:
                record[f"best_{key}"] = float(leader.fitnesses[key])
        sizes = [getattr(ind.dna, "size", None) for ind in ranked]
        if all(isinstance(s, int) for s in sizes):
            record["genome_size_mean"] = float(np.mean(sizes))
        self.history.append(record)
        if self.best is None or self.is_better(float(scores[0]), self.score(self.best)):
            self.best = copy.deepcopy(leader)
        self._report(record, ranked)
        return record

    def _report(self, record: dict, ranked: List[Individual]) -> None:
        verbosity = self.config.verbosity
        if verbosity >= 1:
            self.console.log(
                f"gen {record['generation']} | best={record['best']:.4f} mean={record['mean']:.4f} "
                f"worst={record['worst']:.4f} | {self.evaluator_name}"
            )
        if verbosity >= 2:
            table = Table(title=f"Generation {record['generation']}: top individuals")
            table.add_column("id")
            table.add_column("parents")
            table.add_column("score")
            table.add_column("fitnesses")
            for ind in ranked[:5]:
                fits = ", ".join(f"{k}={v:.4f}" for k, v in ind.fitnesses.items())
                table.add_row(str(ind.id), ",".join(map(str, ind.parents)) or "-", f"{self.score(ind):.4f}", fits)
            self.console.print(table)
        logger.debug("generation %d recorded: %s", record["generation"], record)

    def _reproduce(self) -> None:
        size = self._pop_size
        n_elite = min(self.config.elite_count, size - 1) if size > 1 else 0
        survivors = elites(self.population, n_elite, objective=self.config.objective, maximize=self.config.maximize)
        next_pop = carry_over(survivors)

        def select() -> Individual:
            return tournament(
                self.population,
                self.rng,
                size=self.config.tournament_size,
                objective=self.config.objective,
                maximize=self.config.maximize,
            )

        while len(next_pop) < size:
            dna, parents = make_offspring(
                select,
                self.rng,
                crossover_rate=self.config.crossover_rate,
                mutation_rate=self.config.mutation_rate,
            )
            next_pop.append(self._new_individual(dna, parents, born=self.generation + 1))
        self.population = next_pop
        self.state = GAState.REPRODUCED

    def step(self, generations: int = 1) -> Optional[Individual]:
        """Run ``generations`` full evaluate/select/reproduce cycles; returns the best-so-far."""
        if generations < 0:
            raise ConfigError("generations must be >= 0")
        if not self.population:
            raise ConfigError("initialize_population must be called before step")
        if self.evaluator is None:
            raise ConfigError("set_evaluator must be called before step")
        for _ in range(generations):
            with timer(f"generation {self.generation}", self.console, enabled=self.config.verbosity >= 3):
                self.evaluate()
                self._record()
                self._reproduce()
                self.generation += 1
        return self.best

    # ----------------------------------------------------------- persistence

    def state_dict(self) -> dict:
        return {
            "generation": self.generation,
            "state": self.state.value,
            "population": [ind.to_dict() for ind in self.population],
            "best": self.best.to_dict() if self.best is not None else None,
            "history": self.history,
            "next_id": self._next_id,
            "rng_state": self.rng.bit_generator.state,
            "evaluator": self.evaluator_name,
            "config": self.config.model_dump(),
        }

    def save_checkpoint(self, path: Path) -> None:
        save_checkpoint(Path(path), self.state_dict())

    @classmethod
    def from_checkpoint(
        cls,
        path: Path,
        from_string: Callable[[str], Any],
        *,
        config: EvolutionConfig | None = None,
        console: Console | None = None,
        generation: int | None = None,
    ) -> "GA":
        """Rebuild an optimizer from a checkpoint; DNAs are decoded with ``from_string``.

        The evaluator is not persisted and must be set again before stepping.
        """
        state = load_checkpoint(Path(path), generation)
        ga = cls(config or EvolutionConfig(**state["config"]), console=console)
        ga.rng.bit_generator.state = state["rng_state"]

        def _restore(entry: dict) -> Individual:
            return Individual(
                dna=from_string(entry["dna"]),
                fitnesses={k: float(v) for k, v in entry["fitnesses"].items()},
                id=int(entry["id"]),
                parents=tuple(entry["parents"]),
                born=int(entry["born"]),
            )

        ga.population = [_restore(entry) for entry in state["population"]]
        ga._pop_size = len(ga.population)
        ga.best = _restore(state["best"]) if state["best"] is not None else None
        ga.history = list(state["history"])
        ga.generation = int(state["generation"])
        ga._next_id = int(state["next_id"])
        ga.evaluator_name = state.get("evaluator", "")
        ga.state = GAState(state["state"])
        return ga
