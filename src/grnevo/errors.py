"""Exception hierarchy for grnevo.

Every error raised by the package derives from :class:`GRNEvoError`, so callers
can catch that for a blanket handler or a subclass for finer control.
"""
from __future__ import annotations


class GRNEvoError(Exception):
    """Base exception for all grnevo errors."""


class DuplicateNameError(GRNEvoError):
    """Raised when a protein name is registered twice in one network."""


class ProteinLookupError(GRNEvoError, LookupError):
    """Raised when no protein matches a requested name and type."""


class ParseError(GRNEvoError, ValueError):
    """Raised when a genome text cannot be decoded.

    Trigger conditions:

    - Invalid JSON or an unknown ``format`` tag.
    - Missing fields, unknown protein types, coordinates of the wrong length.
    - Non-finite or non-positive kinetic parameters.
    - Duplicate protein names.
    """


class ConfigError(GRNEvoError):
    """Raised on invalid optimizer or network configuration.

    Trigger conditions:

    - ``population <= 0`` or probabilities outside ``[0, 1]``.
    - ``elite_count`` not smaller than the population size.
    - Crossover between networks with different input/output interfaces.
    - Stepping an optimizer that has no population or no evaluator.
    """


class EvaluationError(GRNEvoError):
    """Raised when an evaluator leaves an individual without any fitness."""
