"""Pydantic config schema and loader."""
from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from grnevo.errors import ConfigError


class GRNConfig(BaseModel):
    """Kinetic parameter ranges and mutation rates of a regulatory network.

    The config shapes how a network is randomized and varied; it is not part of
    the serialized genome.
    """

    beta_range: tuple[float, float] = (0.5, 8.0)
    delta_range: tuple[float, float] = (0.05, 1.0)
    coord_mutation_rate: float = 0.5
    coord_sigma: float = 0.1
    param_mutation_rate: float = 0.3
    param_sigma: float = 0.1
    add_rate: float = 0.1
    remove_rate: float = 0.1
    max_regulators: int = 16
    align_threshold: float = 0.2

    @field_validator("beta_range", "delta_range")
    @classmethod
    def validate_range(cls, v: tuple[float, float]) -> tuple[float, float]:
        lo, hi = v
        if lo <= 0 or hi < lo:
            raise ValueError("kinetic ranges must be (lo, hi) with hi>=lo>0")
        return v

    @field_validator("delta_range")
    @classmethod
    def validate_delta(cls, v: tuple[float, float]) -> tuple[float, float]:
        if v[1] > 1.0:
            raise ValueError("delta must stay within (0, 1]")
        return v

    @field_validator("coord_mutation_rate", "param_mutation_rate", "add_rate", "remove_rate")
    @classmethod
    def validate_probability(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("rates must be within [0, 1]")
        return v

    @field_validator("coord_sigma", "param_sigma", "align_threshold")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("scales must be non-negative")
        return v

    @field_validator("max_regulators")
    @classmethod
    def validate_max_regulators(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_regulators must be non-negative")
        return v


class EvolutionConfig(BaseModel):
    population: int = 200
    generations: int = 400
    mutation_rate: float = 0.8
    crossover_rate: float = 0.2
    maximize: bool = False
    objective: Optional[str] = None
    elite_count: int = 1
    tournament_size: int = 3
    workers: int = 1
    verbosity: int = 1
    checkpoint_interval: int = 50

    @model_validator(mode="after")
    def _validate_evolution(self) -> "EvolutionConfig":
        if self.population < 1:
            raise ConfigError("population must be >= 1")
        if self.generations < 0:
            raise ConfigError("generations must be >= 0")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigError("mutation_rate must be in [0.0, 1.0]")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ConfigError("crossover_rate must be in [0.0, 1.0]")
        if self.elite_count < 0:
            raise ConfigError("elite_count must be >= 0")
        if self.elite_count >= self.population and self.population > 1:
            raise ConfigError("elite_count must be < population")
        if self.tournament_size < 1:
            raise ConfigError("tournament_size must be >= 1")
        if self.workers < 1:
            raise ConfigError("workers must be >= 1")
        if not 0 <= self.verbosity <= 3:
            raise ConfigError("verbosity must be in [0, 3]")
        if self.checkpoint_interval < 0:
            raise ConfigError("checkpoint_interval must be >= 0")
        return self


class TaskConfig(BaseModel):
    """Sinusoid tracking task: follow the mean of two phase-shifted waves."""

    inputs: list[str] = Field(default_factory=lambda: ["in0", "in1"])
    outputs: list[str] = Field(default_factory=lambda: ["out"])
    initial_regulators: int = 1
    eval_steps: int = 400
    substeps: int = 10
    freq_a: float = 0.05
    freq_b: float = 0.03
    objective: str = "mean_error"

    @field_validator("inputs", "outputs")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one input and one output are required")
        if len(set(v)) != len(v):
            raise ValueError("protein names must be unique")
        return v

    @field_validator("eval_steps", "substeps")
    @classmethod
    def validate_steps(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("step counts must be positive")
        return v

    @field_validator("initial_regulators")
    @classmethod
    def validate_regulators(cls, v: int) -> int:
        if v < 0:
            raise ValueError("initial_regulators must be >= 0")
        return v

    @model_validator(mode="after")
    def _validate_interface(self) -> "TaskConfig":
        shared = set(self.inputs) & set(self.outputs)
        if shared:
            raise ValueError(f"names used as both input and output: {sorted(shared)}")
        return self


class OutputConfig(BaseModel):
    run_dir: Path = Path("runs")
    summarize: bool = True


class ConfigSchema(BaseModel):
    seed: int = 0
    grn: GRNConfig = Field(default_factory=GRNConfig)
    evolution: EvolutionConfig = Field(default_factory=EvolutionConfig)
    task: TaskConfig = Field(default_factory=TaskConfig)
    outputs: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: Path) -> ConfigSchema:
    data = yaml.safe_load(Path(path).read_text()) or {}
    return ConfigSchema(**data)
