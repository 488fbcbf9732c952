"""Low-degree sumcheck round polynomials in evaluation form."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from whirkit.utils import base_decomposition


def _lagrange3(x: Any, node: int) -> Any:
    """Lagrange basis polynomial on the nodes {0, 1, 2} evaluated at ``x``."""
    if node == 0:
        return (x - 1) * (x - 2) / 2
    if node == 1:
        return x * (2 - x)
    return x * (x - 1) / 2


def _eq_poly3(point: Sequence[Any], index: int) -> Any:
    digits = base_decomposition(index, 3, len(point))
    acc: Any = 1
    for x, digit in zip(point, digits):
        acc = acc * _lagrange3(x, digit)
    return acc


@dataclass
class SumcheckPolynomial:
    """A polynomial of degree below 3 in each variable, stored by its values on {0,1,2}^n.

    ``evaluations[i]`` is the value at the big-endian ternary digits of ``i``,
    i.e. the points are in lexicographic order. Field elements must support
    exact division by 2.
    """

    evaluations: list[Any]
    n_variables: int

    def __post_init__(self) -> None:
        self.evaluations = list(self.evaluations)
        expected = 3**self.n_variables
        if len(self.evaluations) != expected:
            raise ValueError(
                f"expected {expected} evaluations for {self.n_variables} variables, "
                f"got {len(self.evaluations)}"
            )

    def sum_over_hypercube(self) -> Any:
        """Sum of the values over the boolean hypercube {0,1}^n."""
        total: Any = 0
        for index, value in enumerate(self.evaluations):
            if all(d in (0, 1) for d in base_decomposition(index, 3, self.n_variables)):
                total = total + value
        return total

    def evaluate_at_point(self, point: Sequence[Any]) -> Any:
        """Evaluate the polynomial at an arbitrary point."""
        point = tuple(point)
        if len(point) != self.n_variables:
            raise ValueError(
                f"point has {len(point)} variables, polynomial has {self.n_variables}"
            )
        total: Any = 0
        for index, value in enumerate(self.evaluations):
            total = total + value * _eq_poly3(point, index)
        return total