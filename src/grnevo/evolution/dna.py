"""DNA wrapper making a single GRN an evolvable unit."""
from __future__ import annotations

from typing import Iterable

import numpy as np

from grnevo.config.schema import GRNConfig
from grnevo.grn import GRN, ProteinType


class GRNDNA:
    """Evolvable unit wrapping exactly one :class:`GRN`."""

    def __init__(self, grn: GRN):
        self.grn = grn

    @classmethod
    def random(
        cls,
        rng: np.random.Generator,
        *,
        inputs: Iterable[str] = ("in0", "in1"),
        outputs: Iterable[str] = ("out",),
        regulators: int = 1,
        config: GRNConfig | None = None,
    ) -> "GRNDNA":
        grn = GRN(config)
        grn.randomize_params(rng)
        for name in inputs:
            grn.add_protein(ProteinType.INPUT, name, rng)
        for name in outputs:
            grn.add_protein(ProteinType.OUTPUT, name, rng)
        grn.randomize_regulators(regulators, rng)
        return cls(grn)

    @classmethod
    def from_string(cls, text: str, config: GRNConfig | None = None) -> "GRNDNA":
        return cls(GRN.deserialize(text, config))

    def serialize(self) -> str:
        return self.grn.serialize()

    def reset(self) -> None:
        self.grn.reset()

    def mutate(self, rng: np.random.Generator) -> None:
        self.grn.mutate(rng)

    def crossover(self, other: "GRNDNA", rng: np.random.Generator) -> "GRNDNA":
        return GRNDNA(self.grn.crossover(other.grn, rng))

    @property
    def size(self) -> int:
        return len(self.grn)

    def distance(self, other: "GRNDNA") -> float:
        return self.grn.distance(other.grn)

    def __repr__(self) -> str:
        return f"GRNDNA({self.grn!r})"
