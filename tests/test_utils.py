from hypothesis import given
from hypothesis import strategies as st

import pytest

from whirkit.utils import (
    base_decomposition,
    dedup,
    expand_randomness,
    is_power_of_two,
    stack_evaluations,
    to_binary,
)


def test_evaluations_stack():
    num = 256
    folding_factor = 3
    fold_size = 1 << folding_factor
    evals = list(range(num))

    stacked = stack_evaluations(evals, folding_factor)
    assert len(stacked) == num

    folds = [stacked[k:k + fold_size] for k in range(0, num, fold_size)]
    for i, fold in enumerate(folds):
        assert len(fold) == fold_size
        for j, value in enumerate(fold):
            assert value == i + j * num // fold_size


def test_stack_rejects_uneven_length():
    with pytest.raises(ValueError):
        stack_evaluations(list(range(6)), 2)


@given(st.lists(st.integers(), min_size=0, max_size=64), st.integers(0, 3))
def test_stack_is_a_permutation(values, folding_factor):
    fold = 1 << folding_factor
    values = values[: len(values) - len(values) % fold]
    stacked = stack_evaluations(values, folding_factor)
    assert sorted(stacked) == sorted(values)


def test_to_binary():
    assert to_binary(0b10111, 5) == [True, False, True, True, True]
    assert to_binary(0b11001, 2) == [False, True]
    assert to_binary(1, 0) == []
    assert to_binary(0, 0) == []


def test_to_binary_rejects_too_many_bits():
    with pytest.raises(ValueError):
        to_binary(1, 65)


def test_is_power_of_two():
    assert not is_power_of_two(0)
    assert is_power_of_two(1)
    assert is_power_of_two(2)
    assert not is_power_of_two(3)
    assert not is_power_of_two(2**64 - 1)


def test_base_decomposition():
    assert base_decomposition(0b1011, 2, 6) == [0, 0, 1, 0, 1, 1]
    assert base_decomposition(15, 3, 3) == [1, 2, 0]
    assert base_decomposition(15 + 81, 3, 3) == [1, 2, 0]


@given(st.integers(0, 10**6), st.integers(2, 10), st.integers(0, 8))
def test_base_decomposition_reconstructs_modulo(value, base, n_digits):
    digits = base_decomposition(value, base, n_digits)
    assert len(digits) == n_digits
    assert all(0 <= d < base for d in digits)
    rebuilt = 0
    for d in digits:
        rebuilt = rebuilt * base + d
    assert rebuilt == value % base**n_digits


def test_expand_randomness():
    assert expand_randomness(3, 4) == [1, 3, 9, 27]
    assert expand_randomness(7, 0) == []


def test_dedup_sorts_and_removes_duplicates():
    assert dedup([5, 1, 5, 3, 1]) == [1, 3, 5]
    assert dedup(iter([])) == []