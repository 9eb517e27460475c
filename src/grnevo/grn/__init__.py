"""Gene regulatory network substrate."""
from .protein import Protein, ProteinRegistry, ProteinType
from .network import GRN, GENOME_FORMAT, affinity_matrix

__all__ = ["GRN", "GENOME_FORMAT", "Protein", "ProteinRegistry", "ProteinType", "affinity_matrix"]
