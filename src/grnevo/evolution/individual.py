"""Population member: a DNA plus its objective scores."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Individual:
    dna: Any
    fitnesses: dict[str, float] = field(default_factory=dict)
    id: int = 0
    parents: tuple[int, ...] = ()
    born: int = 0

    @property
    def evaluated(self) -> bool:
        return bool(self.fitnesses)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parents": list(self.parents),
            "born": self.born,
            "fitnesses": dict(self.fitnesses),
            "dna": self.dna.serialize(),
        }
