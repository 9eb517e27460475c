"""Evolution engine: evolvable DNA, population members, selection and the GA loop."""
from .dna import GRNDNA
from .individual import Individual
from .selection import score, rank, elites, tournament
from .variation import make_offspring, carry_over
from .ga import GA, GAState

__all__ = [
    "GRNDNA",
    "Individual",
    "score",
    "rank",
    "elites",
    "tournament",
    "make_offspring",
    "carry_over",
    "GA",
    "GAState",
]
