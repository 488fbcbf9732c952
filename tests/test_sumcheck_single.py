from fractions import Fraction as F

import pytest

from whirkit.statement import EvaluationWeights, Statement
from whirkit.sumcheck_single import SumcheckSingle, SumcheckTranscript

COEFFS = [F(1), F(5), F(10), F(14)]
EVAL_POINT = (F(10), F(11))
# 1 + 5*x1 + 10*x0 + 14*x0*x1 at (10, 11)
CLAIMED = F(1696)


def _eval_coeffs(coeffs, point):
    """Evaluate a multilinear polynomial from big-endian monomial coefficients."""
    n = len(point)
    total = F(0)
    for index, c in enumerate(coeffs):
        term = c
        for j in range(n):
            if (index >> (n - 1 - j)) & 1:
                term *= point[j]
        total += term
    return total


def _eq(a, b):
    acc = F(1)
    for x, y in zip(a, b):
        acc *= x * y + (1 - x) * (1 - y)
    return acc


def test_weighted_table_sums_to_pinned_claim():
    prover = SumcheckSingle(COEFFS)
    prover.add_new_equality([EVAL_POINT], [CLAIMED], [F(1)])
    weighted = sum(e * w for e, w in zip(prover.evaluations, prover.weights))
    assert weighted == CLAIMED
    assert prover.claimed_sum == CLAIMED
    assert _eval_coeffs(COEFFS, EVAL_POINT) == CLAIMED


def test_sumcheck_folding_factor_1():
    prover = SumcheckSingle(COEFFS)
    prover.add_new_equality([EVAL_POINT], [CLAIMED], [F(1)])

    poly_1 = prover.compute_sumcheck_polynomial()
    assert poly_1.sum_over_hypercube() == CLAIMED

    combination_randomness = F(100101)
    folding_randomness = [F(4999)]
    prover.compress(combination_randomness, folding_randomness, poly_1)

    poly_2 = prover.compute_sumcheck_polynomial()
    assert poly_2.sum_over_hypercube() == combination_randomness * poly_1.evaluate_at_point(
        folding_randomness
    )


def test_sumcheck_weighted_folding_factor_1():
    prover = SumcheckSingle(COEFFS)
    statement = Statement(2)
    statement.add_constraint(EvaluationWeights(EVAL_POINT), CLAIMED)
    prover.add_weighted_sum(statement, F(1))

    poly_1 = prover.compute_sumcheck_polynomial()
    assert poly_1.sum_over_hypercube() == CLAIMED

    combination_randomness = F(100101)
    folding_randomness = [F(4999)]
    prover.compress(combination_randomness, folding_randomness, poly_1)

    poly_2 = prover.compute_sumcheck_polynomial()
    assert poly_2.sum_over_hypercube() == combination_randomness * poly_1.evaluate_at_point(
        folding_randomness
    )


def test_eval_eq_table():
    prover = SumcheckSingle(COEFFS)
    prover.add_new_equality([(F(3), F(5))], [F(0)], [F(1)])
    assert prover.weights == [F(8), F(-10), F(-12), F(15)]
    assert prover.claimed_sum == 0


def test_initial_evaluations_on_hypercube():
    prover = SumcheckSingle(COEFFS)
    assert prover.evaluations == [F(1), F(6), F(11), F(30)]
    assert prover.num_variables == 2


def test_compress_reduces_variables():
    prover = SumcheckSingle(COEFFS)
    prover.add_new_equality([EVAL_POINT], [CLAIMED], [F(1)])
    poly = prover.compute_sumcheck_polynomial()
    prover.compress(F(1), [F(7)], poly)
    assert prover.num_variables == 1
    assert len(prover.weights) == 2


def test_full_sumcheck_end_to_end():
    coeffs = [F(k) for k in range(8)]
    point = (F(42), F(97), F(3))
    claim = _eval_coeffs(coeffs, point)
    prover = SumcheckSingle(coeffs)
    statement = Statement(3)
    statement.add_constraint(EvaluationWeights(point), claim)
    prover.add_weighted_sum(statement, F(1))

    transcript = SumcheckTranscript(to_field=F, challenge_bits=16)
    randomness = prover.compute_sumcheck_polynomials(transcript, 3, 0)

    assert len(randomness) == 3
    assert randomness == list(reversed(transcript.challenges))
    assert prover.num_variables == 0
    assert prover.evaluations == [_eval_coeffs(coeffs, randomness)]
    assert prover.claimed_sum == _eval_coeffs(coeffs, randomness) * _eq(point, randomness)


def test_rounds_are_consistent():
    coeffs = [F(k * k + 1) for k in range(4)]
    point = (F(5), F(9))
    claim = _eval_coeffs(coeffs, point)
    prover = SumcheckSingle(coeffs)
    prover.add_new_equality([point], [claim], [F(1)])
    transcript = SumcheckTranscript(to_field=F, challenge_bits=16)
    prover.compute_sumcheck_polynomials(transcript, 2, 0)

    first = transcript.scalars[:3]
    second = transcript.scalars[3:]
    r1 = transcript.challenges[0]
    assert first[0] + first[1] == claim
    # quadratic through (0,first[0]), (1,first[1]), (2,first[2]) evaluated at r1
    q_r1 = (
        first[0] * (r1 - 1) * (r1 - 2) / 2
        - first[1] * r1 * (r1 - 2)
        + first[2] * r1 * (r1 - 1) / 2
    )
    assert second[0] + second[1] == q_r1


def test_transcript_is_deterministic():
    a = SumcheckTranscript(to_field=F)
    b = SumcheckTranscript(to_field=F)
    a.add_scalars([F(1), F(2)])
    b.add_scalars([F(1), F(2)])
    assert a.challenge_scalar() == b.challenge_scalar()
    c = SumcheckTranscript(to_field=F)
    c.add_scalars([F(1), F(3)])
    assert c.challenge_scalar() != a.challenges[0]


def test_pow_changes_later_challenges_deterministically():
    a = SumcheckTranscript()
    b = SumcheckTranscript()
    plain = SumcheckTranscript()
    nonce_a = a.challenge_pow(4)
    nonce_b = b.challenge_pow(4)
    assert nonce_a == nonce_b
    assert a.challenge_scalar() == b.challenge_scalar()
    assert a.challenges[0] != plain.challenge_scalar()


def test_pow_is_recorded_during_sumcheck():
    prover = SumcheckSingle(COEFFS)
    prover.add_new_equality([EVAL_POINT], [CLAIMED], [F(1)])
    transcript = SumcheckTranscript(to_field=F, challenge_bits=16)
    prover.compute_sumcheck_polynomials(transcript, 2, 3.0)
    assert len(transcript.nonces) == 2


def test_negative_pow_bits_rejected():
    with pytest.raises(ValueError):
        SumcheckTranscript().challenge_pow(-1)


def test_no_variables_left_rejected():
    prover = SumcheckSingle([F(3)])
    with pytest.raises(ValueError):
        prover.compute_sumcheck_polynomial()


def test_mismatched_lengths_rejected():
    prover = SumcheckSingle(COEFFS)
    with pytest.raises(ValueError):
        prover.add_new_equality([EVAL_POINT], [CLAIMED], [F(1), F(2)])


def test_point_dimension_mismatch_rejected():
    prover = SumcheckSingle(COEFFS)
    with pytest.raises(ValueError):
        prover.add_new_equality([(F(1),)], [F(0)], [F(1)])


def test_statement_dimension_mismatch_rejected():
    prover = SumcheckSingle(COEFFS)
    with pytest.raises(ValueError):
        prover.add_weighted_sum(Statement(3), F(1))


def test_non_power_of_two_coefficients_rejected():
    with pytest.raises(ValueError):
        SumcheckSingle([F(1), F(2), F(3)])


def test_compress_requires_single_variable_randomness():
    prover = SumcheckSingle(COEFFS)
    poly = prover.compute_sumcheck_polynomial()
    with pytest.raises(ValueError):
        prover.compress(F(1), [F(1), F(2)], poly)