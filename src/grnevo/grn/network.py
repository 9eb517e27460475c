"""Gene regulatory network: protein dynamics plus the genetic operators acting on them."""
from __future__ import annotations

import copy
import json
import logging
import math
from typing import Any, Mapping

import numpy as np

from grnevo.config.schema import GRNConfig
from grnevo.errors import ConfigError, DuplicateNameError, ParseError
from .protein import COORD_DIMS, Protein, ProteinRegistry, ProteinType, random_coords

logger = logging.getLogger(__name__)

GENOME_FORMAT = "grn/1"
AFFINITY_SHARPNESS = 10.0


def affinity_matrix(coords: np.ndarray, sharpness: float = AFFINITY_SHARPNESS) -> np.ndarray:
    """Signed influence ``W[q, p]`` of protein ``q`` on protein ``p``.

    ``q``'s identifier is compared with ``p``'s enhancer and inhibitor sites; the
    closer site wins, so ``W`` lies in ``(-1, 1)`` and is zero when both sites
    are equidistant.
    """

    ident = coords[:, 0][:, None]
    enh = np.exp(-sharpness * np.abs(ident - coords[:, 1][None, :]))
    inh = np.exp(-sharpness * np.abs(ident - coords[:, 2][None, :]))
    return enh - inh


def _bounded_mutation(val: float, rng: np.random.Generator, *, bounds: tuple[float, float], sigma: float) -> float:
    lo, hi = bounds
    scale = (hi - lo) * sigma
    mutated = float(val + rng.normal(0.0, scale))
    return float(np.clip(mutated, lo, hi))


def _normalized_distance(a: float, b: float, *, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    scale = hi - lo
    if scale <= 0:
        return 0.0
    return (a - b) / scale


class GRN:
    """Discrete-time regulatory network over typed, positioned proteins.

    Input proteins are driven by the caller through :meth:`set_concentration`;
    every other protein relaxes toward ``clip(tanh(beta * drive), 0, 1)`` at rate
    ``delta`` on each micro-step, where ``drive`` is the affinity-weighted mean of
    all current concentrations.
    """

    def __init__(self, config: GRNConfig | None = None, *, beta: float | None = None, delta: float | None = None):
        self.config = config or GRNConfig()
        self.beta = float(beta) if beta is not None else float(np.mean(self.config.beta_range))
        self.delta = float(delta) if delta is not None else float(np.mean(self.config.delta_range))
        self.registry = ProteinRegistry()
        self._compiled: tuple[list[int], np.ndarray, np.ndarray] | None = None

    # ------------------------------------------------------------------ views

    def __len__(self) -> int:
        return len(self.registry)

    def __repr__(self) -> str:
        return (
            f"GRN(beta={self.beta:.3f}, delta={self.delta:.3f}, inputs={len(self.inputs)}, "
            f"outputs={len(self.outputs)}, regulators={len(self.regulators)})"
        )

    @property
    def proteins(self) -> list[Protein]:
        return list(self.registry)

    @property
    def inputs(self) -> list[Protein]:
        return self.registry.of_type(ProteinType.INPUT)

    @property
    def outputs(self) -> list[Protein]:
        return self.registry.of_type(ProteinType.OUTPUT)

    @property
    def regulators(self) -> list[Protein]:
        return self.registry.of_type(ProteinType.REGULATORY)

    def interface(self) -> list[tuple[str, ProteinType]]:
        return self.registry.interface()

    # ----------------------------------------------------------- construction

    def randomize_params(self, rng: np.random.Generator) -> None:
        self.beta = float(rng.uniform(*self.config.beta_range))
        self.delta = float(rng.uniform(*self.config.delta_range))

    def randomize_regulators(self, k: int, rng: np.random.Generator) -> None:
        if k < 0:
            raise ConfigError("regulator count must be >= 0")
        for _ in range(k):
            self.registry.add(self.registry.fresh_name(), ProteinType.REGULATORY, random_coords(rng))
        if k:
            self._invalidate()

    def add_protein(self, ptype: ProteinType | str, name: str, rng: np.random.Generator) -> Protein:
        protein = self.registry.add(name, ProteinType(ptype), random_coords(rng))
        self._invalidate()
        return protein

    # -------------------------------------------------------------- dynamics

    def set_concentration(self, name: str, ptype: ProteinType | str | None, value: float) -> None:
        if not math.isfinite(value):
            raise ValueError(f"concentration for '{name}' must be finite")
        self.registry.find(name, ptype).concentration = float(np.clip(value, 0.0, 1.0))

    def get_concentration(self, name: str, ptype: ProteinType | str | None = None) -> float:
        return self.registry.find(name, ptype).concentration

    def set_inputs(self, values: Mapping[str, float]) -> None:
        for name, value in values.items():
            self.set_concentration(name, ProteinType.INPUT, value)

    def get_outputs(self) -> dict[str, float]:
        return {p.name: p.concentration for p in self.outputs}

    def _invalidate(self) -> None:
        self._compiled = None

    def _compile(self) -> tuple[list[int], np.ndarray, np.ndarray]:
        if self._compiled is None:
            proteins = self.proteins
            order = [p.pid for p in proteins]
            coords = np.array([p.coords for p in proteins], dtype=np.float64).reshape(-1, COORD_DIMS)
            free = np.array([p.ptype is not ProteinType.INPUT for p in proteins], dtype=bool)
            self._compiled = (order, affinity_matrix(coords), free)
        return self._compiled

    def step(self, n: int = 1) -> None:
        """Advance ``n`` synchronous micro-steps (every update reads the pre-step snapshot)."""
        if n < 0:
            raise ConfigError("step count must be >= 0")
        if n == 0 or not len(self.registry):
            return
        order, weights, free = self._compile()
        proteins = [self.registry.get(pid) for pid in order]
        conc = np.array([p.concentration for p in proteins], dtype=np.float64)
        gain = self.beta / len(conc)
        for _ in range(n):
            target = np.clip(np.tanh(gain * (conc @ weights)), 0.0, 1.0)
            conc = np.where(free, conc + self.delta * (target - conc), conc)
        for protein, value in zip(proteins, conc):
            protein.concentration = float(value)

    def reset(self) -> None:
        for protein in self.registry:
            if protein.ptype is not ProteinType.INPUT:
                protein.concentration = 0.0

    # ------------------------------------------------------- genetic operators

    def mutate(self, rng: np.random.Generator) -> None:
        """Perturb coordinates and kinetics, and occasionally add or drop a regulator."""
        cfg = self.config
        for protein in self.registry:
            if rng.random() < cfg.coord_mutation_rate:
                protein.coords = np.clip(protein.coords + rng.normal(0.0, cfg.coord_sigma, size=COORD_DIMS), 0.0, 1.0)
        if rng.random() < cfg.param_mutation_rate:
            self.beta = _bounded_mutation(self.beta, rng, bounds=cfg.beta_range, sigma=cfg.param_sigma)
        if rng.random() < cfg.param_mutation_rate:
            self.delta = _bounded_mutation(self.delta, rng, bounds=cfg.delta_range, sigma=cfg.param_sigma)
        regulators = self.regulators
        if rng.random() < cfg.add_rate and len(regulators) < cfg.max_regulators:
            self.randomize_regulators(1, rng)
        if rng.random() < cfg.remove_rate and regulators:
            victim = regulators[int(rng.integers(len(regulators)))]
            self.registry.remove(victim.pid)
        self._invalidate()

    def _align_regulators(self, other: "GRN") -> dict[int, int]:
        """Greedy closest-first pairing of regulators whose coordinates lie within ``align_threshold``."""
        mine, theirs = self.regulators, other.regulators
        if not mine or not theirs:
            return {}
        a = np.array([p.coords for p in mine])
        b = np.array([p.coords for p in theirs])
        dist = np.linalg.norm(a[:, None, :] - b[None, :, :], axis=-1)
        pairs: dict[int, int] = {}
        taken: set[int] = set()
        for flat in np.argsort(dist, axis=None, kind="stable"):
            i, j = (int(k) for k in np.unravel_index(flat, dist.shape))
            if dist[i, j] > self.config.align_threshold:
                break
            if i in pairs or j in taken:
                continue
            pairs[i] = j
            taken.add(j)
        return pairs

    def crossover(self, other: "GRN", rng: np.random.Generator) -> "GRN":
        """Build a child that mixes both parents; the input/output interface must match."""
        if self.interface() != other.interface():
            raise ConfigError("crossover requires identical input/output interfaces")
        def pick(a, b):
            return a if rng.random() < 0.5 else b

        child = GRN(self.config, beta=pick(self.beta, other.beta), delta=pick(self.delta, other.delta))
        mine, theirs = self.regulators, other.regulators
        pairs = self._align_regulators(other)
        reg_index = {p.pid: i for i, p in enumerate(mine)}
        reserved = {name for name, _ in self.interface()}

        def _inherit(name: str, ptype: ProteinType, coords: np.ndarray) -> None:
            # regulators must not take a name an interface protein still needs
            if not ptype.protected and (name in child.registry or name in reserved):
                name = child.registry.fresh_name(reserved=reserved)
            child.registry.add(name, ptype, coords)

        for protein in self.registry:
            if protein.ptype.protected:
                donor = pick(protein, other.registry.find(protein.name, protein.ptype))
                _inherit(protein.name, protein.ptype, donor.coords)
                continue
            i = reg_index[protein.pid]
            if i in pairs:
                donor = pick(protein, theirs[pairs[i]])
                _inherit(protein.name, ProteinType.REGULATORY, donor.coords)
            elif rng.random() < 0.5:
                _inherit(protein.name, ProteinType.REGULATORY, protein.coords)
        matched = set(pairs.values())
        for j, protein in enumerate(theirs):
            if j in matched or len(child.regulators) >= self.config.max_regulators:
                continue
            if rng.random() < 0.5:
                _inherit(protein.name, ProteinType.REGULATORY, protein.coords)
        logger.debug("crossover: %d + %d regulators -> %d (%d aligned)", len(mine), len(theirs), len(child.regulators), len(pairs))
        return child

    def distance(self, other: "GRN") -> float:
        """Genome distance; ``inf`` when the interfaces differ."""
        if self.interface() != other.interface():
            return float("inf")
        dist = _normalized_distance(self.beta, other.beta, bounds=self.config.beta_range) ** 2
        dist += _normalized_distance(self.delta, other.delta, bounds=self.config.delta_range) ** 2
        for protein in self.registry:
            if protein.ptype.protected:
                twin = other.registry.find(protein.name, protein.ptype)
                dist += float(np.sum((protein.coords - twin.coords) ** 2))
        a = np.array([p.coords for p in self.regulators]).reshape(-1, COORD_DIMS)
        b = np.array([p.coords for p in other.regulators]).reshape(-1, COORD_DIMS)
        if len(a) and len(b):
            pair = np.linalg.norm(a[:, None, :] - b[None, :, :], axis=-1)
            dist += float(np.sum(pair.min(axis=1) ** 2) + np.sum(pair.min(axis=0) ** 2))
        else:
            dist += float(COORD_DIMS * (len(a) + len(b)))
        return float(np.sqrt(dist))

    def copy(self) -> "GRN":
        return copy.deepcopy(self)

    # ---------------------------------------------------------- serialization

    def to_dict(self) -> dict:
        return {
            "format": GENOME_FORMAT,
            "beta": self.beta,
            "delta": self.delta,
            "proteins": [
                {"name": p.name, "type": p.ptype.value, "coords": [float(c) for c in p.coords]}
                for p in self.registry
            ],
        }

    def serialize(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any, config: GRNConfig | None = None) -> "GRN":
        if not isinstance(data, dict):
            raise ParseError("genome must be a JSON object")
        if data.get("format") != GENOME_FORMAT:
            raise ParseError(f"unknown genome format: {data.get('format')!r}")
        beta = _positive_number(data, "beta")
        delta = _positive_number(data, "delta")
        if delta > 1.0:
            raise ParseError("delta must be within (0, 1]")
        proteins = data.get("proteins")
        if not isinstance(proteins, list):
            raise ParseError("'proteins' must be a list")
        grn = cls(config, beta=beta, delta=delta)
        for idx, entry in enumerate(proteins):
            if not isinstance(entry, dict):
                raise ParseError(f"protein #{idx} must be an object")
            name = entry.get("name")
            if not isinstance(name, str) or not name:
                raise ParseError(f"protein #{idx} has no name")
            try:
                ptype = ProteinType(entry.get("type"))
            except ValueError as exc:
                raise ParseError(f"protein '{name}' has unknown type {entry.get('type')!r}") from exc
            coords = entry.get("coords")
            if (
                not isinstance(coords, list)
                or len(coords) != COORD_DIMS
                or not all(_is_number(c) and 0.0 <= c <= 1.0 for c in coords)
            ):
                raise ParseError(f"protein '{name}' needs {COORD_DIMS} coordinates in [0, 1]")
            try:
                grn.registry.add(name, ptype, np.array(coords, dtype=np.float64))
            except DuplicateNameError as exc:
                raise ParseError(str(exc)) from exc
        return grn

    @classmethod
    def deserialize(cls, text: str, config: GRNConfig | None = None) -> "GRN":
        try:
            data = json.loads(text)
        except (TypeError, RecursionError, json.JSONDecodeError) as exc:
            raise ParseError(f"genome is not valid JSON: {exc}") from exc
        return cls.from_dict(data, config)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _positive_number(data: dict, key: str) -> float:
    value = data.get(key)
    if not _is_number(value) or value <= 0:
        raise ParseError(f"'{key}' must be a finite positive number")
    return float(value)
