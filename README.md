# whirkit

Pure-Python building blocks for the WHIR proximity proof system. There are no
runtime dependencies.

Field elements are ordinary Python objects. Any type with `+`, `-` and `*`
works, and it must also support exact division by 2 wherever a
`SumcheckPolynomial` is evaluated at a point. Good choices are
`fractions.Fraction` or your own prime-field class. Plain `int` values turn
into floats when they are divided.

## Modules

- `whirkit.utils` holds the helpers:
  - `is_power_of_two(n)`
  - `to_binary(value, n_bits)`: big-endian bits. `n_bits` may be at most 64.
  - `base_decomposition(value, base, n_bits)`: big-endian digits of
    `value mod base**n_bits`.
  - `expand_randomness(base, length)`: returns `[1, base, base**2, ...]`.
  - `dedup(values)`: sorted, with duplicates removed.
  - `stack_evaluations(evals, folding_factor)`: transposes the
    `2**folding_factor`-row matrix so that each coset forms one block.
- `whirkit.sumcheck_polynomial.SumcheckPolynomial(evaluations, n_variables)`
  is stored as its values over `{0,1,2}^n` in lexicographic order. It offers
  `sum_over_hypercube()` and `evaluate_at_point(point)`.
- `whirkit.statement` holds the weighted-sum constraints:
  - The abstract `Weights` class, with `evaluate_mle`, `evaluate_cube`,
    `accumulate`, `weighted_sum` and `compute`.
  - Three concrete kinds: `EvaluationWeights(point)`, `LinearWeights(weight)`
    and `LinearVerifierWeights(num_variables, term)`.
  - `Statement(num_variables)`, with `add_constraint`,
    `add_constraint_in_front` and `add_constraints_in_front`. Its `combine`
    method merges all constraints with powers of a challenge.
  - `StatementVerifier(num_variables)`, which holds `(term, total)` pairs.
- `whirkit.sumcheck_single` holds the sumcheck prover:
  - `SumcheckSingle(coeffs)` is the prover for `sum_x p(x) * w(x)`. It
    offers `add_weighted_sum`, `add_new_equality`,
    `compute_sumcheck_polynomial`, `compress` and
    `compute_sumcheck_polynomials(transcript, folding_factor, pow_bits)`.
  - `SumcheckTranscript` is a SHA-256 hash-chain transcript, with
    `add_scalars`, `challenge_scalar` and `challenge_pow`. Its `to_field`
    argument maps the squeezed integers into your field type.
- `whirkit.queries.get_challenge_stir_queries(domain_size, folding_factor,
  num_queries, transcript)` draws query indices into the folded domain. The
  transcript must provide a `challenge_bytes(count)` method. The indices come
  back sorted, with duplicates removed.
- `whirkit.parameters` derives the protocol parameters:
  - `SoundnessType` and `FoldType` are the option enums.
  - The soundness formulas are plain functions: `log_eta`, `queries`,
    `ood_samples`, `folding_pow_bits`, `rbr_queries` and related ones.
  - `WhirConfig` derives the parameters for each round (`RoundConfig`) from a
    security target. `str(config)` prints a round-by-round soundness report.

## Installation

```
pip install .
```

To also install what the tests need:

```
pip install ".[test]"
```

## Examples

Deriving the parameters:

```python
from whirkit.parameters import FoldType, SoundnessType, WhirConfig

config = WhirConfig(
    num_variables=12,
    folding_factor=4,
    security_level=100,
    pow_bits=20,
    soundness_type=SoundnessType.CONJECTURE_LIST,
    starting_log_inv_rate=1,
    field_size_bits=192,
    initial_statement=True,
    fold_optimisation=FoldType.PROVER_HELPS,
)
print(config.n_rounds(), config.check_pow_bits())
print(config)
```

Running one sumcheck round over the rationals:

```python
from fractions import Fraction

from whirkit.statement import EvaluationWeights, Statement
from whirkit.sumcheck_single import SumcheckSingle

coeffs = [Fraction(c) for c in (1, 5, 10, 14)]
prover = SumcheckSingle(coeffs)

weights = EvaluationWeights((Fraction(10), Fraction(11)))
value = weights.weighted_sum(prover.evaluations)

statement = Statement(2)
statement.add_constraint(weights, value)
prover.add_weighted_sum(statement, Fraction(1))

round_poly = prover.compute_sumcheck_polynomial()
assert round_poly.sum_over_hypercube() == value
```

## What it does not do

The package has no Merkle-tree commitment, no polynomial commitment step and
no end-to-end WHIR prover or verifier. It provides no field implementation
and no Fourier transform over a domain. `WhirConfig` records only the size of
the starting evaluation domain. The package has no command-line tool.

## Tests

```
pytest
```