"""Weighted-sum constraints over multilinear polynomials."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from whirkit.utils import is_power_of_two, to_binary


def _eq(left: Sequence[Any], right: Sequence[Any]) -> Any:
    if len(left) != len(right):
        raise ValueError(f"points have {len(left)} and {len(right)} variables")
    acc: Any = 1
    for a, b in zip(left, right):
        acc = acc * (a * b + (1 - a) * (1 - b))
    return acc


def _eval_multilinear(evals: Sequence[Any], point: Sequence[Any]) -> Any:
    if not point:
        return evals[0]
    x, rest = point[0], point[1:]
    half = len(evals) // 2
    low = _eval_multilinear(evals[:half], rest)
    high = _eval_multilinear(evals[half:], rest)
    return low + x * (high - low)


def _corner_point(corner: int, num_variables: int) -> tuple[int, ...]:
    return tuple(1 if bit else 0 for bit in to_binary(corner, num_variables))


class Weights(ABC):
    """A weight polynomial ``w`` for a constraint ``sum_x w(x) p(x) = total``."""

    num_variables: int

    @abstractmethod
    def evaluate_mle(self, point: Sequence[Any]) -> Any:
        """Evaluate the weight's multilinear extension at ``point``."""

    @abstractmethod
    def compute(self, folding_randomness: Sequence[Any]) -> Any:
        """The verifier's value of this weight at the folding randomness."""

    def evaluate_cube(self, corner: int) -> Any:
        """Value at the hypercube corner whose big-endian bits are ``corner``."""
        return self.evaluate_mle(_corner_point(corner, self.num_variables))

    def _check_table(self, table: Sequence[Any]) -> None:
        if len(table) != 1 << self.num_variables:
            raise ValueError(
                f"table of {len(table)} values does not match "
                f"{self.num_variables} variables"
            )

    def accumulate(self, accumulator: Sequence[Any], factor: Any) -> list[Any]:
        """Return ``accumulator`` plus ``factor`` times this weight on the hypercube."""
        self._check_table(accumulator)
        return [
            acc + factor * self.evaluate_cube(corner)
            for corner, acc in enumerate(accumulator)
        ]

    def weighted_sum(self, poly: Sequence[Any]) -> Any:
        """Sum over the hypercube of the weight times the evaluations ``poly``."""
        self._check_table(poly)
        total: Any = 0
        for corner, value in enumerate(poly):
            total = total + self.evaluate_cube(corner) * value
        return total


@dataclass(frozen=True)
class EvaluationWeights(Weights):
    """The equality polynomial at ``point``: the constraint is ``p(point) = total``."""

    point: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", tuple(self.point))

    @property
    def num_variables(self) -> int:  # type: ignore[override]
        return len(self.point)

    def evaluate_mle(self, point: Sequence[Any]) -> Any:
        if len(point) != len(self.point):
            raise ValueError(
                f"point has {len(point)} variables, weight has {len(self.point)}"
            )
        acc: Any = 1
        for left, right in zip(self.point, point):
            if acc == 0:
                return 0
            acc = acc * (left * right + (1 - left) * (1 - right))
        return acc

    def compute(self, folding_randomness: Sequence[Any]) -> Any:
        return _eq(self.point, folding_randomness)


@dataclass(frozen=True)
class LinearWeights(Weights):
    """An arbitrary weight given by its values on the hypercube."""

    weight: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "weight", tuple(self.weight))
        if not is_power_of_two(len(self.weight)):
            raise ValueError(f"weight length {len(self.weight)} is not a power of two")

    @property
    def num_variables(self) -> int:  # type: ignore[override]
        return len(self.weight).bit_length() - 1

    def evaluate_mle(self, point: Sequence[Any]) -> Any:
        if len(point) != self.num_variables:
            raise ValueError(
                f"point has {len(point)} variables, weight has {self.num_variables}"
            )
        return _eval_multilinear(self.weight, tuple(point))

    def compute(self, folding_randomness: Sequence[Any]) -> Any:
        return 0


@dataclass(frozen=True)
class LinearVerifierWeights(Weights):
    """The verifier's view of a linear weight: only its value at the final point."""

    num_variables: int
    term: Any

    def evaluate_mle(self, point: Sequence[Any]) -> Any:
        return self.term

    def weighted_sum(self, poly: Sequence[Any]) -> Any:
        return self.term

    def compute(self, folding_randomness: Sequence[Any]) -> Any:
        return self.term


@dataclass
class Statement:
    """An ordered list of ``(weights, total)`` constraints on one polynomial."""

    num_variables: int
    constraints: list[tuple[Weights, Any]] = field(default_factory=list)

    def _check(self, weights: Weights) -> None:
        if weights.num_variables != self.num_variables:
            raise ValueError(
                f"weights have {weights.num_variables} variables, "
                f"statement has {self.num_variables}"
            )

    def add_constraint(self, weights: Weights, total: Any) -> None:
        self._check(weights)
        self.constraints.append((weights, total))

    def add_constraint_in_front(self, weights: Weights, total: Any) -> None:
        self._check(weights)
        self.constraints.insert(0, (weights, total))

    def add_constraints_in_front(self, constraints: Iterable[tuple[Weights, Any]]) -> None:
        new = list(constraints)
        for weights, _ in new:
            self._check(weights)
        self.constraints[0:0] = new

    def combine(self, challenge: Any) -> tuple[list[Any], Any]:
        """Fold all constraints into one using powers of ``challenge``.

        Returns the combined weight table on the hypercube and the combined total.
        """
        combined: list[Any] = [0] * (1 << self.num_variables)
        combined_total: Any = 0
        power: Any = 1
        for weights, total in self.constraints:
            combined = weights.accumulate(combined, power)
            combined_total = combined_total + total * power
            power = power * challenge
        return combined, combined_total


@dataclass
class StatementVerifier:
    """The verifier's constraints: an optional term and the claimed total."""

    num_variables: int
    constraints: list[tuple[Optional[Any], Any]] = field(default_factory=list)

    def add_constraint(self, term: Optional[Any], total: Any) -> None:
        self.constraints.append((term, total))