"""Parameter selection and round-by-round soundness analysis for the WHIR protocol."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

LOG2_10 = math.log2(10)

_USIZE_MAX = (1 << 64) - 1
_MAX_OOD_SAMPLES = 64


class SoundnessType(Enum):
    """Which proximity regime the soundness analysis assumes."""

    UNIQUE_DECODING = "UniqueDecoding"
    PROVABLE_LIST = "ProvableList"
    CONJECTURE_LIST = "ConjectureList"

    def __str__(self) -> str:
        return self.value


class FoldType(Enum):
    """How the verifier evaluates folds at queried cosets."""

    NAIVE = "Naive"
    PROVER_HELPS = "ProverHelps"

    def __str__(self) -> str:
        return self.value


def _divide(numerator: float, denominator: float) -> float:
    """Floating-point division that yields inf or nan instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        sign = math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
        return math.copysign(math.inf, sign)
    return numerator / denominator


def _log2(value: float) -> float:
    """Base-2 logarithm that yields -inf at zero instead of raising."""
    if value == 0:
        return -math.inf
    return math.log2(value)


def _ceil_to_count(value: float) -> int:
    """Round up to a non-negative machine-sized count, saturating at the bounds."""
    if math.isnan(value) or value <= 0:
        return 0
    if math.isinf(value):
        return _USIZE_MAX
    return min(math.ceil(value), _USIZE_MAX)


def _fmt(value: float) -> str:
    """Shortest plain rendering of a float; whole numbers have no fraction."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == int(value) and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def log_eta(soundness_type: SoundnessType, log_inv_rate: int) -> float:
    """Logarithm of the proximity slack used by the list-decoding bounds."""
    if soundness_type is SoundnessType.PROVABLE_LIST:
        return -(0.5 * log_inv_rate + LOG2_10 + 1.0)
    if soundness_type is SoundnessType.UNIQUE_DECODING:
        return 0.0
    return -(log_inv_rate + 1.0)


def list_size_bits(
    soundness_type: SoundnessType, num_variables: int, log_inv_rate: int, log_eta: float
) -> float:
    """Logarithm of the list size in the chosen decoding regime."""
    if soundness_type is SoundnessType.CONJECTURE_LIST:
        return float(num_variables + log_inv_rate) - log_eta
    if soundness_type is SoundnessType.PROVABLE_LIST:
        log_inv_sqrt_rate = log_inv_rate / 2.0
        return log_inv_sqrt_rate - (1.0 + log_eta)
    return 0.0


def rbr_ood_sample(
    soundness_type: SoundnessType,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
    field_size_bits: int,
    ood_samples: int,
) -> float:
    """Bits of security of the out-of-domain sampling step."""
    list_size = list_size_bits(soundness_type, num_variables, log_inv_rate, log_eta)
    error = 2.0 * list_size + float(num_variables * ood_samples)
    return float(ood_samples * field_size_bits) + 1.0 - error


def ood_samples(
    security_level: int,
    soundness_type: SoundnessType,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
    field_size_bits: int,
) -> int:
    """Smallest number of out-of-domain samples that reaches ``security_level``."""
    if soundness_type is SoundnessType.UNIQUE_DECODING:
        return 0
    for samples in range(1, _MAX_OOD_SAMPLES):
        bits = rbr_ood_sample(
            soundness_type, num_variables, log_inv_rate, log_eta, field_size_bits, samples
        )
        if bits >= security_level:
            return samples
    raise ValueError("Could not find an appropriate number of OOD samples")


def rbr_soundness_fold_prox_gaps(
    soundness_type: SoundnessType,
    field_size_bits: int,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
) -> float:
    """Bits of security from the proximity-gaps term of a fold."""
    if soundness_type is SoundnessType.CONJECTURE_LIST:
        error = float(num_variables + log_inv_rate) - log_eta
    elif soundness_type is SoundnessType.PROVABLE_LIST:
        error = LOG2_10 + 3.5 * log_inv_rate + 2.0 * num_variables
    else:
        error = float(num_variables + log_inv_rate)
    return field_size_bits - error


def rbr_soundness_fold_sumcheck(
    soundness_type: SoundnessType,
    field_size_bits: int,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
) -> float:
    """Bits of security from the sumcheck term of a fold."""
    list_size = list_size_bits(soundness_type, num_variables, log_inv_rate, log_eta)
    return field_size_bits - (list_size + 1.0)


def folding_pow_bits(
    security_level: int,
    soundness_type: SoundnessType,
    field_size_bits: int,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
) -> float:
    """Proof-of-work bits needed to lift a fold to ``security_level``."""
    prox_gaps_error = rbr_soundness_fold_prox_gaps(
        soundness_type, field_size_bits, num_variables, log_inv_rate, log_eta
    )
    sumcheck_error = rbr_soundness_fold_sumcheck(
        soundness_type, field_size_bits, num_variables, log_inv_rate, log_eta
    )
    return max(0.0, security_level - min(prox_gaps_error, sumcheck_error))


def queries(
    soundness_type: SoundnessType, protocol_security_level: int, log_inv_rate: int
) -> int:
    """Number of queries needed for ``protocol_security_level`` bits."""
    if soundness_type is SoundnessType.UNIQUE_DECODING:
        rate = 1.0 / float(1 << log_inv_rate)
        denom = math.log2(0.5 * (1.0 + rate))
        num_queries = _divide(-float(protocol_security_level), denom)
    elif soundness_type is SoundnessType.PROVABLE_LIST:
        num_queries = _divide(float(2 * protocol_security_level), float(log_inv_rate))
    else:
        num_queries = _divide(float(protocol_security_level), float(log_inv_rate))
    return _ceil_to_count(num_queries)


def rbr_queries(soundness_type: SoundnessType, log_inv_rate: int, num_queries: int) -> float:
    """Bits of security of a query step with ``num_queries`` queries."""
    count = float(num_queries)
    if soundness_type is SoundnessType.UNIQUE_DECODING:
        rate = 1.0 / float(1 << log_inv_rate)
        denom = -math.log2(0.5 * (1.0 + rate))
        return count * denom
    if soundness_type is SoundnessType.PROVABLE_LIST:
        return count * 0.5 * log_inv_rate
    return count * log_inv_rate


def rbr_soundness_queries_combination(
    soundness_type: SoundnessType,
    field_size_bits: int,
    num_variables: int,
    log_inv_rate: int,
    log_eta: float,
    ood_samples: int,
    num_queries: int,
) -> float:
    """Bits of security of combining the out-of-domain and query constraints."""
    list_size = list_size_bits(soundness_type, num_variables, log_inv_rate, log_eta)
    log_combination = _log2(float(ood_samples + num_queries))
    return field_size_bits - (log_combination + list_size + 1.0)


@dataclass
class RoundConfig:
    """Parameters of one intermediate WHIR round."""

    pow_bits: float
    folding_pow_bits: float
    num_queries: int
    ood_samples: int
    log_inv_rate: int

    def __str__(self) -> str:
        return (
            f"Num_queries: {self.num_queries}, rate: 2^-{self.log_inv_rate}, "
            f"pow_bits: {_fmt(self.pow_bits)}, ood_samples: {self.ood_samples}, "
            f"folding_pow: {_fmt(self.folding_pow_bits)}\n"
        )


class WhirConfig:
    """Concrete protocol parameters derived from a security target."""

    def __init__(
        self,
        num_variables: int,
        folding_factor: int,
        security_level: int,
        pow_bits: int,
        soundness_type: SoundnessType,
        starting_log_inv_rate: int,
        field_size_bits: int,
        initial_statement: bool = True,
        fold_optimisation: FoldType = FoldType.PROVER_HELPS,
    ) -> None:
        if folding_factor <= 0:
            raise ValueError("folding factor should be non zero")
        if num_variables < folding_factor:
            raise ValueError(
                f"number of variables {num_variables} is smaller than "
                f"folding factor {folding_factor}"
            )

        protocol_security_level = max(0, security_level - pow_bits)

        self.num_variables = num_variables
        self.folding_factor = folding_factor
        self.security_level = security_level
        self.max_pow_bits = pow_bits
        self.soundness_type = soundness_type
        self.starting_log_inv_rate = starting_log_inv_rate
        self.field_size_bits = field_size_bits
        self.initial_statement = initial_statement
        self.fold_optimisation = fold_optimisation
        self.starting_domain_size = 1 << (num_variables + starting_log_inv_rate)

        self.final_sumcheck_rounds = num_variables % folding_factor
        num_rounds = (num_variables - self.final_sumcheck_rounds) // folding_factor - 1

        starting_eta = log_eta(soundness_type, starting_log_inv_rate)
        if initial_statement:
            self.committment_ood_samples = ood_samples(
                security_level,
                soundness_type,
                num_variables,
                starting_log_inv_rate,
                starting_eta,
                field_size_bits,
            )
            self.starting_folding_pow_bits = folding_pow_bits(
                security_level,
                soundness_type,
                field_size_bits,
                num_variables,
                starting_log_inv_rate,
                starting_eta,
            )
        else:
            self.committment_ood_samples = 0
            prox_gaps_error = rbr_soundness_fold_prox_gaps(
                soundness_type,
                field_size_bits,
                num_variables,
                starting_log_inv_rate,
                starting_eta,
            ) + math.log2(folding_factor)
            self.starting_folding_pow_bits = max(0.0, security_level - prox_gaps_error)

        self.round_parameters: list[RoundConfig] = []
        round_variables = num_variables - folding_factor
        log_inv_rate = starting_log_inv_rate
        for _ in range(num_rounds):
            # Queries use the old rate, everything else the new one.
            next_rate = log_inv_rate + (folding_factor - 1)
            log_next_eta = log_eta(soundness_type, next_rate)
            num_queries = queries(soundness_type, protocol_security_level, log_inv_rate)
            round_ood = ood_samples(
                security_level,
                soundness_type,
                round_variables,
                next_rate,
                log_next_eta,
                field_size_bits,
            )
            query_error = rbr_queries(soundness_type, log_inv_rate, num_queries)
            combination_error = rbr_soundness_queries_combination(
                soundness_type,
                field_size_bits,
                round_variables,
                next_rate,
                log_next_eta,
                round_ood,
                num_queries,
            )
            round_pow = max(0.0, security_level - min(query_error, combination_error))
            round_folding_pow = folding_pow_bits(
                security_level,
                soundness_type,
                field_size_bits,
                round_variables,
                next_rate,
                log_next_eta,
            )
            self.round_parameters.append(
                RoundConfig(
                    pow_bits=round_pow,
                    folding_pow_bits=round_folding_pow,
                    num_queries=num_queries,
                    ood_samples=round_ood,
                    log_inv_rate=log_inv_rate,
                )
            )
            round_variables -= folding_factor
            log_inv_rate = next_rate

        self.final_queries = queries(soundness_type, protocol_security_level, log_inv_rate)
        self.final_pow_bits = max(
            0.0,
            security_level - rbr_queries(soundness_type, log_inv_rate, self.final_queries),
        )
        self.final_folding_pow_bits = max(0.0, float(security_level - (field_size_bits - 1)))
        self.final_log_inv_rate = log_inv_rate

    def n_rounds(self) -> int:
        """Number of intermediate rounds."""
        return len(self.round_parameters)

    def check_pow_bits(self) -> bool:
        """True when no step needs more proof-of-work than the configured maximum."""
        limit = float(self.max_pow_bits)
        fixed = (
            self.starting_folding_pow_bits,
            self.final_pow_bits,
            self.final_folding_pow_bits,
        )
        return all(bits <= limit for bits in fixed) and all(
            r.pow_bits <= limit and r.folding_pow_bits <= limit
            for r in self.round_parameters
        )

    def __str__(self) -> str:
        st = self.soundness_type
        fsb = self.field_size_bits
        lines = [
            f"Number of variables: {self.num_variables}, "
            f"folding factor: {self.folding_factor}\n",
            f"Security level: {self.security_level} bits using {st} security "
            f"and {self.max_pow_bits} bits of PoW\n",
            f"initial_folding_pow_bits: {_fmt(self.starting_folding_pow_bits)}\n",
        ]
        lines.extend(str(r) for r in self.round_parameters)
        lines.append(
            f"final_queries: {self.final_queries}, final_rate: 2^-{self.final_log_inv_rate}, "
            f"final_pow_bits: {_fmt(self.final_pow_bits)}, "
            f"final_folding_pow_bits: {_fmt(self.final_folding_pow_bits)}\n"
        )
        lines.append("------------------------------------\n")
        lines.append("Round by round soundness analysis:\n")
        lines.append("------------------------------------\n")

        eta = log_eta(st, self.starting_log_inv_rate)
        num_variables = self.num_variables

        if self.committment_ood_samples > 0:
            bits = rbr_ood_sample(
                st,
                num_variables,
                self.starting_log_inv_rate,
                eta,
                fsb,
                self.committment_ood_samples,
            )
            lines.append(f"{bits:.1f} bits -- OOD commitment\n")

        prox_gaps_error = rbr_soundness_fold_prox_gaps(
            st, fsb, num_variables, self.starting_log_inv_rate, eta
        )
        sumcheck_error = rbr_soundness_fold_sumcheck(
            st, fsb, num_variables, self.starting_log_inv_rate, eta
        )
        lines.append(
            f"{min(prox_gaps_error, sumcheck_error) + self.starting_folding_pow_bits:.1f} "
            f"bits -- (x{self.folding_factor}) prox gaps: {prox_gaps_error:.1f}, "
            f"sumcheck: {sumcheck_error:.1f}, pow: {self.starting_folding_pow_bits:.1f}\n"
        )
        num_variables -= self.folding_factor

        for r in self.round_parameters:
            next_rate = r.log_inv_rate + (self.folding_factor - 1)
            eta = log_eta(st, next_rate)
            if r.ood_samples > 0:
                bits = rbr_ood_sample(st, num_variables, next_rate, eta, fsb, r.ood_samples)
                lines.append(f"{bits:.1f} bits -- OOD sample\n")

            query_error = rbr_queries(st, r.log_inv_rate, r.num_queries)
            combination_error = rbr_soundness_queries_combination(
                st, fsb, num_variables, next_rate, eta, r.ood_samples, r.num_queries
            )
            lines.append(
                f"{min(query_error, combination_error) + r.pow_bits:.1f} bits -- "
                f"query error: {query_error:.1f}, combination: {combination_error:.1f}, "
                f"pow: {r.pow_bits:.1f}\n"
            )

            prox_gaps_error = rbr_soundness_fold_prox_gaps(st, fsb, num_variables, next_rate, eta)
            sumcheck_error = rbr_soundness_fold_sumcheck(st, fsb, num_variables, next_rate, eta)
            lines.append(
                f"{min(prox_gaps_error, sumcheck_error) + r.folding_pow_bits:.1f} bits -- "
                f"(x{self.folding_factor}) prox gaps: {prox_gaps_error:.1f}, "
                f"sumcheck: {sumcheck_error:.1f}, pow: {r.folding_pow_bits:.1f}\n"
            )
            num_variables -= self.folding_factor

        query_error = rbr_queries(st, self.final_log_inv_rate, self.final_queries)
        lines.append(
            f"{query_error + self.final_pow_bits:.1f} bits -- query error: "
            f"{query_error:.1f}, pow: {self.final_pow_bits:.1f}\n"
        )

        if self.final_sumcheck_rounds > 0:
            combination_error = fsb - 1.0
            lines.append(
                f"{combination_error + self.final_pow_bits:.1f} bits -- "
                f"(x{self.final_sumcheck_rounds}) combination: {combination_error:.1f}, "
                f"pow: {self.final_folding_pow_bits:.1f}\n"
            )

        return "".join(lines)