"""Sumcheck prover, weighted-sum statements, query sampling and soundness parameters for WHIR proofs."""

__version__ = "0.1.0"
__all__ = ["parameters", "queries", "statement", "sumcheck_polynomial", "sumcheck_single", "utils"]