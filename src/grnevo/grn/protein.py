"""Protein records and the per-network protein registry."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Collection, Iterator

import numpy as np

from grnevo.errors import DuplicateNameError, ProteinLookupError

COORD_DIMS = 3  # (identifier, enhancer, inhibitor)


class ProteinType(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    REGULATORY = "regulatory"

    @property
    def protected(self) -> bool:
        """Input and output proteins form the network interface and are never removed."""
        return self is not ProteinType.REGULATORY


@dataclass
class Protein:
    """One signal endpoint of a network.

    ``coords`` holds the identifier, enhancer and inhibitor sites in ``[0, 1]``;
    regulatory affinity between two proteins is computed from them.
    """

    pid: int
    name: str
    ptype: ProteinType
    coords: np.ndarray
    concentration: float = 0.0

    @property
    def identifier(self) -> float:
        return float(self.coords[0])

    @property
    def enhancer(self) -> float:
        return float(self.coords[1])

    @property
    def inhibitor(self) -> float:
        return float(self.coords[2])


def random_coords(rng: np.random.Generator) -> np.ndarray:
    return rng.uniform(0.0, 1.0, size=COORD_DIMS)


@dataclass
class ProteinRegistry:
    """Arena of proteins keyed by stable integer ids.

    Ids are never reused within a registry, so removing a regulator leaves every
    other id valid. Iteration follows insertion order.
    """

    _proteins: dict[int, Protein] = field(default_factory=dict)
    _by_name: dict[str, int] = field(default_factory=dict)
    _next_id: int = 0

    def __len__(self) -> int:
        return len(self._proteins)

    def __iter__(self) -> Iterator[Protein]:
        return iter(self._proteins.values())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def ids(self) -> list[int]:
        return list(self._proteins)

    def add(self, name: str, ptype: ProteinType, coords: np.ndarray, concentration: float = 0.0) -> Protein:
        if name in self._by_name:
            raise DuplicateNameError(f"protein '{name}' already exists")
        coords = np.asarray(coords, dtype=np.float64)
        if coords.shape != (COORD_DIMS,):
            raise ValueError(f"coords must have shape ({COORD_DIMS},), got {coords.shape}")
        protein = Protein(pid=self._next_id, name=name, ptype=ProteinType(ptype), coords=coords.copy(), concentration=float(concentration))
        self._proteins[protein.pid] = protein
        self._by_name[name] = protein.pid
        self._next_id += 1
        return protein

    def remove(self, pid: int) -> Protein:
        protein = self._proteins.pop(pid)
        del self._by_name[protein.name]
        return protein

    def get(self, pid: int) -> Protein:
        return self._proteins[pid]

    def find(self, name: str, ptype: ProteinType | None = None) -> Protein:
        pid = self._by_name.get(name)
        if pid is None:
            raise ProteinLookupError(f"no protein named '{name}'")
        protein = self._proteins[pid]
        if ptype is None:
            return protein
        try:
            wanted = ProteinType(ptype)
        except ValueError as exc:
            raise ProteinLookupError(f"unknown protein type {ptype!r}") from exc
        if protein.ptype is not wanted:
            raise ProteinLookupError(f"protein '{name}' is {protein.ptype.value}, not {wanted.value}")
        return protein

    def of_type(self, ptype: ProteinType) -> list[Protein]:
        return [p for p in self._proteins.values() if p.ptype is ptype]

    def fresh_name(self, prefix: str = "r", reserved: Collection[str] = ()) -> str:
        """Smallest unused ``{prefix}{n}`` name, avoiding ``reserved``.

        Depends only on the names present, so a decoded genome names new
        regulators exactly like the network it was serialized from.
        """
        n = 0
        while f"{prefix}{n}" in self._by_name or f"{prefix}{n}" in reserved:
            n += 1
        return f"{prefix}{n}"

    def interface(self) -> list[tuple[str, ProteinType]]:
        """Sorted (name, type) pairs of the protected proteins."""
        return sorted((p.name, p.ptype) for p in self._proteins.values() if p.ptype.protected)
