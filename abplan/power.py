"""
abplan/power.py

Sample size and duration planning for conversion-rate experiments:
  - standard normal CDF and quantile (Acklam rational approximation)
  - z critical values for alpha and power
  - two-proportion sample size per group
  - calendar duration for a given traffic split

Degenerate inputs (zero effect, an arm with no traffic) are not rejected here.
They produce inf/nan, which callers are expected to render as-is.
"""

from __future__ import annotations

import math
from typing import Union

Number = Union[int, float]


class ProbabilityDomainError(ValueError):
    """Raised when the quantile function is called outside (0, 1)."""


# -------------------------
# Normal distribution
# -------------------------

# Acklam's coefficients: central region numerator (A) / denominator (B),
# tail regions numerator (C) / denominator (D).
_A = (
    -39.6968302866538,
    220.946098424521,
    -275.928510446969,
    138.357751867269,
    -30.6647980661472,
    2.50662827745924,
)
_B = (
    -54.4760987982241,
    161.585836858041,
    -155.698979859887,
    66.8013118877197,
    -13.2806815528857,
)
_C = (
    -0.00778489400243029,
    -0.322396458041136,
    -2.40075827716184,
    -2.54973253934373,
    4.37466414146497,
    2.93816398269878,
)
_D = (
    0.00778469570904146,
    0.32246712907004,
    2.445134137143,
    3.75440866190742,
)

P_LOW = 0.02425
P_HIGH = 1.0 - P_LOW


def norm_cdf(x: float) -> float:
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def _tail(q: float) -> float:
    c, d = _C, _D
    return (((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / (
        (((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1.0
    )


def norm_ppf(p: float) -> float:
    """
    Inverse CDF of the standard normal distribution.

    Plain Acklam approximation, no refinement step: relative error is about
    1.15e-9 in the central region and somewhat larger far out in the tails.
    """
    if not (0.0 < p < 1.0):
        raise ProbabilityDomainError(f"p must be in (0,1), got {p!r}")

    if p < P_LOW:
        return _tail(math.sqrt(-2.0 * math.log(p)))

    if p > P_HIGH:
        return -_tail(math.sqrt(-2.0 * math.log(1.0 - p)))

    a, b = _A, _B
    q = p - 0.5
    r = q * q
    return ((((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q) / (
        ((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1.0
    )


def z_alpha(alpha: float, two_sided: bool = True) -> float:
    a = alpha / 2.0 if two_sided else alpha
    return norm_ppf(1.0 - a)


def z_beta(power: float) -> float:
    return norm_ppf(power)


# -------------------------
# Sample size / duration
# -------------------------

def _ratio(num: float, den: float) -> float:
    # IEEE semantics for the degenerate cases instead of ZeroDivisionError.
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num)
    return num / den


def _ceil(x: float) -> Number:
    """Round up to a whole unit; non-finite values pass through unchanged."""
    if not math.isfinite(x):
        return x
    return int(math.ceil(x))


def expected_variant_rate(baseline_rate: float, uplift: float) -> float:
    """Variant conversion rate implied by a relative uplift over the baseline."""
    return baseline_rate * (1.0 + uplift)


def sample_size_proportions(
    baseline_rate: float,
    uplift: float,
    za: float,
    zb: float,
) -> Number:
    """
    Users needed in each group for a two-sided two-proportion z-test.

    baseline_rate is the control rate p1, uplift the relative lift (0.1 = +10%),
    za/zb the critical values from z_alpha/z_beta. Pooled variance on the
    alpha side, unpooled on the power side:

        n = (za*sqrt(2*pbar*(1-pbar)) + zb*sqrt(p1*(1-p1) + p2*(1-p2)))^2 / (p2-p1)^2

    The caller guarantees p2 < 1. If p2 == p1 the result is inf and is
    returned unrounded.
    """
    p1 = baseline_rate
    p2 = expected_variant_rate(p1, uplift)

    pooled = (p1 + p2) / 2.0
    diff = abs(p2 - p1)

    numerator = za * math.sqrt(2.0 * pooled * (1.0 - pooled)) + zb * math.sqrt(
        p1 * (1.0 - p1) + p2 * (1.0 - p2)
    )
    return _ceil(_ratio(numerator * numerator, diff * diff))


def duration_days(n_per_group: Number, daily_visitors: Number, variant_traffic: float) -> Number:
    """
    Days until both arms reach n_per_group.

    The arm with less daily traffic decides. There is no cap: a lopsided split
    gives a very long duration, and an arm with zero traffic gives inf.
    """
    control_daily = daily_visitors * (1.0 - variant_traffic)
    variant_daily = daily_visitors * variant_traffic

    days_control = _ratio(n_per_group, control_daily)
    days_variant = _ratio(n_per_group, variant_daily)
    if math.isnan(days_control) or math.isnan(days_variant):
        return math.nan
    return _ceil(max(days_control, days_variant))
