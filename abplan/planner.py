"""
abplan/planner.py

Entry point for hosts (CLI, web form, notebooks):

  compute(raw)  -> PlanOutcome     validate, then plan
  plan(parsed)  -> CalculationResult
  sweep(raw, field, values) -> DataFrame, one plan per value of a single field

Results are immutable. Hosts keep their own current RawInputs and replace
the whole PlanOutcome on every change.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .power import (
    Number,
    duration_days,
    expected_variant_rate,
    sample_size_proportions,
    z_alpha,
    z_beta,
)
from .validation import ParsedInputs, RawInputs, validate_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationResult:
    sample_size_per_group: Number
    total_sample_size: Number
    duration_days: Number
    expected_variant_rate: float

    @property
    def is_finite(self) -> bool:
        return all(
            math.isfinite(v)
            for v in (self.sample_size_per_group, self.total_sample_size, self.duration_days)
        )


@dataclass(frozen=True)
class PlanOutcome:
    errors: Mapping[str, str]
    global_error: str
    result: Optional[CalculationResult] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    def messages(self) -> List[str]:
        """Non-empty error messages, field errors first."""
        out = [m for m in self.errors.values() if m]
        if self.global_error:
            out.append(self.global_error)
        return out


def plan(parsed: ParsedInputs, two_sided: bool = True) -> CalculationResult:
    """
    Sample size and duration for already-validated inputs.

    Raises ProbabilityDomainError if significance or power fall outside what
    validate_inputs allows; that is a caller bug, not a user error.
    """
    za = z_alpha(parsed.significance, two_sided=two_sided)
    zb = z_beta(parsed.power)

    n = sample_size_proportions(parsed.baseline_rate, parsed.uplift, za, zb)
    days = duration_days(n, parsed.daily_visitors, parsed.variant_traffic)

    return CalculationResult(
        sample_size_per_group=n,
        total_sample_size=n * 2,
        duration_days=days,
        expected_variant_rate=expected_variant_rate(parsed.baseline_rate, parsed.uplift),
    )


def compute(raw: RawInputs) -> PlanOutcome:
    """Validate raw form values and, if they pass, plan the experiment."""
    checked = validate_inputs(raw)
    # read-only copy, not shared with the ValidationResult
    errors = MappingProxyType(dict(checked.errors))
    if not checked.ok:
        outcome = PlanOutcome(errors=errors, global_error=checked.global_error)
        logger.debug("Inputs rejected: %s", outcome.messages())
        return outcome

    result = plan(checked.parsed)
    if not result.is_finite:
        logger.warning(
            "Non-finite plan for %s: n=%s, days=%s", raw, result.sample_size_per_group, result.duration_days
        )
    else:
        logger.debug("Planned %s users per group over %s day(s)", result.sample_size_per_group, result.duration_days)
    return PlanOutcome(errors=errors, global_error=checked.global_error, result=result)


# -------------------------
# Scenario sweep
# -------------------------

SWEEP_COLUMNS = [
    "sample_size_per_group",
    "total_sample_size",
    "duration_days",
    "expected_variant_rate",
]


def sweep(raw: RawInputs, field: str, values: Iterable[Union[str, float]]) -> pd.DataFrame:
    """
    Re-plan with one field replaced by each of `values` (same units as the form).

    Returns one row per value. Rows that fail validation carry the first error
    message in `error` and NaN in the result columns.
    """
    if field not in RawInputs.field_names():
        raise ValueError(f"Unknown field {field!r}; expected one of {list(RawInputs.field_names())}")

    rows = []
    for v in values:
        outcome = compute(replace(raw, **{field: str(v)}))
        row = {field: v}
        if outcome.ok:
            r = outcome.result
            row.update({c: getattr(r, c) for c in SWEEP_COLUMNS})
            row["error"] = ""
        else:
            row.update({c: np.nan for c in SWEEP_COLUMNS})
            row["error"] = outcome.messages()[0]
        rows.append(row)

    return pd.DataFrame(rows, columns=[field] + SWEEP_COLUMNS + ["error"])
