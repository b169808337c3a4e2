"""
Seqcompare: side by side comparison of groups of aligned amino acid sequences.

Finds the consensus (master) sequence, marks residues that differ from it and
lays out per-position residue frequencies as rows of cells for a renderer.
"""

__version__ = "0.1.0"

from .compare import compare_sequences, main as compare_main
from .report import main as report_main

__all__ = ["compare_sequences", "compare_main", "report_main", "__version__"]
