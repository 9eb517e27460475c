"""
grnevo: evolve gene regulatory networks with a generational genetic algorithm.

The core is the :class:`~grnevo.grn.GRN` dynamical system and the generic
:class:`~grnevo.evolution.GA` optimizer; tasks, the run driver, analysis and the
CLI are thin layers on top.
"""

from grnevo.config import ConfigSchema, EvolutionConfig, GRNConfig, TaskConfig, load_config
from grnevo.errors import (
    ConfigError,
    DuplicateNameError,
    EvaluationError,
    GRNEvoError,
    ParseError,
    ProteinLookupError,
)
from grnevo.evolution import GA, GAState, GRNDNA, Individual
from grnevo.grn import GRN, Protein, ProteinRegistry, ProteinType
from grnevo.protocols import DNAFactory, Evaluator, Evolvable
from grnevo.tasks import SinusoidTask

__all__ = [
    # Configuration
    "ConfigSchema",
    "EvolutionConfig",
    "GRNConfig",
    "TaskConfig",
    "load_config",
    # Network
    "GRN",
    "Protein",
    "ProteinRegistry",
    "ProteinType",
    # Evolution
    "GA",
    "GAState",
    "GRNDNA",
    "Individual",
    "Evolvable",
    "Evaluator",
    "DNAFactory",
    # Tasks
    "SinusoidTask",
    # Errors
    "GRNEvoError",
    "DuplicateNameError",
    "ProteinLookupError",
    "ParseError",
    "ConfigError",
    "EvaluationError",
]

__version__ = "0.1.0"
