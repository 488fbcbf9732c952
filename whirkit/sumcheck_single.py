"""Prover side of the sumcheck protocol for one weighted sum of a multilinear polynomial."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Sequence
from typing import Any

from whirkit.statement import Statement
from whirkit.sumcheck_polynomial import SumcheckPolynomial
from whirkit.utils import is_power_of_two


class SumcheckTranscript:
    """A hash-chained Fiat-Shamir transcript for the sumcheck prover.

    Scalars written with :meth:`add_scalars` are absorbed into a SHA-256
    chain; challenges are squeezed from it and mapped into the field with
    ``to_field``.
    """

    def __init__(
        self,
        domain_separator: bytes = b"whirkit",
        to_field: Callable[[int], Any] = int,
        challenge_bits: int = 64,
    ) -> None:
        if challenge_bits <= 0:
            raise ValueError(f"challenge_bits must be positive, got {challenge_bits}")
        self._state = hashlib.sha256(domain_separator).digest()
        self._to_field = to_field
        self._challenge_bits = challenge_bits
        self.scalars: list[Any] = []
        self.challenges: list[Any] = []
        self.nonces: list[int] = []

    def _absorb(self, data: bytes) -> None:
        self._state = hashlib.sha256(self._state + len(data).to_bytes(8, "big") + data).digest()

    def add_scalars(self, scalars: Sequence[Any]) -> None:
        """Write prover messages into the transcript."""
        for scalar in scalars:
            self._absorb(repr(scalar).encode())
            self.scalars.append(scalar)

    def challenge_scalar(self) -> Any:
        """Squeeze one field challenge from the transcript."""
        self._absorb(b"challenge")
        value = int.from_bytes(self._state, "big") % (1 << self._challenge_bits)
        challenge = self._to_field(value)
        self.challenges.append(challenge)
        return challenge

    def challenge_pow(self, bits: float) -> int:
        """Find and absorb a nonce proving ``bits`` bits of work; returns the nonce."""
        if bits < 0:
            raise ValueError(f"proof-of-work bits must be non-negative, got {bits}")
        threshold = 2.0 ** (64 - bits)
        nonce = 0
        while True:
            digest = hashlib.sha256(self._state + b"pow" + nonce.to_bytes(8, "big")).digest()
            if int.from_bytes(digest[:8], "big") < threshold:
                break
            nonce += 1
        self._absorb(b"pow" + nonce.to_bytes(8, "big"))
        self.nonces.append(nonce)
        return nonce


def _coefficients_to_evaluations(coeffs: Sequence[Any]) -> list[Any]:
    """Values on the hypercube of the multilinear polynomial with these coefficients."""
    evals = list(coeffs)
    size = len(evals)
    step = 1
    while step < size:
        for index in range(size):
            if index & step:
                evals[index] = evals[index] + evals[index ^ step]
        step <<= 1
    return evals


def _eq_table(point: Sequence[Any], scalar: Any) -> list[Any]:
    """``scalar * eq(point, x)`` for every corner ``x``, in big-endian order."""
    table = [scalar]
    for x in point:
        next_table = []
        for value in table:
            high = value * x
            next_table.append(value - high)
            next_table.append(high)
        table = next_table
    return table


def _fold_pairs(values: Sequence[Any], randomness: Any) -> list[Any]:
    return [
        (values[k + 1] - values[k]) * randomness + values[k]
        for k in range(0, len(values), 2)
    ]


class SumcheckSingle:
    """Sumcheck prover state for ``sum_x p(x) * w(x)`` over the boolean hypercube.

    ``evaluations`` holds ``p`` and ``weights`` holds ``w`` on the hypercube,
    both in big-endian corner order; ``claimed_sum`` is the current claim.
    """

    def __init__(self, coeffs: Sequence[Any]) -> None:
        coeffs = list(coeffs)
        if not is_power_of_two(len(coeffs)):
            raise ValueError(f"number of coefficients {len(coeffs)} is not a power of two")
        self.evaluations: list[Any] = _coefficients_to_evaluations(coeffs)
        self.weights: list[Any] = [0] * len(coeffs)
        self.claimed_sum: Any = 0

    @property
    def num_variables(self) -> int:
        return len(self.evaluations).bit_length() - 1

    def add_weighted_sum(self, statement: Statement, combination_randomness_gen: Any) -> None:
        """Replace the weights and claim by the random combination of ``statement``."""
        if statement.num_variables != self.num_variables:
            raise ValueError(
                f"statement has {statement.num_variables} variables, "
                f"prover has {self.num_variables}"
            )
        self.weights, self.claimed_sum = statement.combine(combination_randomness_gen)

    def compute_sumcheck_polynomial(self) -> SumcheckPolynomial:
        """The univariate round polynomial in the last variable, as values at 0, 1, 2."""
        if self.num_variables < 1:
            raise ValueError("no variables left to run sumcheck on")
        c0: Any = 0
        c2: Any = 0
        for k in range(0, len(self.evaluations), 2):
            p0, p1 = self.evaluations[k], self.evaluations[k + 1]
            w0, w1 = self.weights[k], self.weights[k + 1]
            c0 = c0 + p0 * w0
            c2 = c2 + (p1 - p0) * (w1 - w0)
        # claimed_sum = q(0) + q(1) = 2*c0 + c1 + c2
        c1 = self.claimed_sum - c0 - c0 - c2
        eval_0 = c0
        eval_1 = c0 + c1 + c2
        eval_2 = eval_1 + c1 + c2 + c2 + c2
        return SumcheckPolynomial([eval_0, eval_1, eval_2], 1)

    def compute_sumcheck_polynomials(
        self, transcript: SumcheckTranscript, folding_factor: int, pow_bits: float
    ) -> list[Any]:
        """Run ``folding_factor`` rounds and return the folding point, big-endian."""
        randomness = []
        for _ in range(folding_factor):
            sumcheck_poly = self.compute_sumcheck_polynomial()
            transcript.add_scalars(sumcheck_poly.evaluations)
            folding_randomness = transcript.challenge_scalar()
            randomness.append(folding_randomness)
            if pow_bits > 0:
                transcript.challenge_pow(pow_bits)
            self.compress(1, [folding_randomness], sumcheck_poly)
        randomness.reverse()
        return randomness

    def add_new_equality(
        self,
        points: Sequence[Sequence[Any]],
        evaluations: Sequence[Any],
        combination_randomness: Sequence[Any],
    ) -> None:
        """Add ``sum_i r_i * eq(points[i], x)`` to the weights and ``sum_i r_i * evaluations[i]`` to the claim."""
        if not len(combination_randomness) == len(points) == len(evaluations):
            raise ValueError(
                f"got {len(points)} points, {len(evaluations)} evaluations and "
                f"{len(combination_randomness)} randomness values"
            )
        for point, rand in zip(points, combination_randomness):
            point = tuple(point)
            if len(point) != self.num_variables:
                raise ValueError(
                    f"point has {len(point)} variables, prover has {self.num_variables}"
                )
            table = _eq_table(point, rand)
            self.weights = [w + t for w, t in zip(self.weights, table)]
        for rand, evaluation in zip(combination_randomness, evaluations):
            self.claimed_sum = self.claimed_sum + rand * evaluation

    def compress(
        self,
        combination_randomness: Any,
        folding_randomness: Sequence[Any],
        sumcheck_poly: SumcheckPolynomial,
    ) -> None:
        """Fix the last variable to the folding randomness and update the claim."""
        folding_randomness = tuple(folding_randomness)
        if len(folding_randomness) != 1:
            raise ValueError(
                f"folding randomness must have one variable, got {len(folding_randomness)}"
            )
        if self.num_variables < 1:
            raise ValueError("no variables left to compress")
        randomness = folding_randomness[0]
        self.evaluations = _fold_pairs(self.evaluations, randomness)
        self.weights = _fold_pairs(self.weights, randomness)
        self.claimed_sum = combination_randomness * sumcheck_poly.evaluate_at_point(
            folding_randomness
        )