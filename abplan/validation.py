"""
abplan/validation.py

Input validation for the planner form:
  - raw (string) inputs and their parsed, unit-normalized form
  - per-field range rules
  - cross-field check on the implied variant rate

Nothing here raises on bad user input. Every problem comes back as a message
so the caller can show it next to the field and let the user fix it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from typing import Dict, NamedTuple, Optional, Tuple, Union

from .power import expected_variant_rate


# -------------------------
# Records
# -------------------------

# Attribute name -> key used on the wire (query string, JSON).
QUERY_KEYS: Dict[str, str] = {
    "baseline_rate": "baselineRate",
    "min_detectable_uplift": "minDetectableUplift",
    "significance": "significance",
    "power": "power",
    "daily_visitors": "dailyVisitors",
    "variant_traffic": "variantTraffic",
}

DEFAULT_VALUES: Dict[str, str] = {
    "baseline_rate": "8",
    "min_detectable_uplift": "10",
    "significance": "5",
    "power": "80",
    "daily_visitors": "12000",
    "variant_traffic": "50",
}

GLOBAL_RATE_ERROR = "Expected variant conversion rate reaches or exceeds 100%. Lower baseline or uplift."


@dataclass(frozen=True)
class RawInputs:
    """The six form values exactly as typed (percentages except daily_visitors)."""

    baseline_rate: str
    min_detectable_uplift: str
    significance: str
    power: str
    daily_visitors: str
    variant_traffic: str

    @classmethod
    def defaults(cls) -> "RawInputs":
        return cls(**DEFAULT_VALUES)

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def as_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in self.field_names()}


@dataclass(frozen=True)
class ParsedInputs:
    baseline_rate: float
    uplift: float
    significance: float
    power: float
    daily_visitors: Union[int, float]
    variant_traffic: float


@dataclass(frozen=True)
class ValidationResult:
    errors: Dict[str, str]
    global_error: str
    parsed: ParsedInputs

    @property
    def has_field_errors(self) -> bool:
        return any(self.errors.values())

    @property
    def ok(self) -> bool:
        return not self.has_field_errors and not self.global_error


# -------------------------
# Field rules
# -------------------------

class FieldRule(NamedTuple):
    lower: Optional[float]
    upper: Optional[float]
    lower_inclusive: bool
    upper_inclusive: bool
    integer: bool
    message: str

    def accepts(self, x: float) -> bool:
        if not math.isfinite(x):
            return False
        if self.integer and not float(x).is_integer():
            return False
        if self.lower is not None:
            if x < self.lower or (x == self.lower and not self.lower_inclusive):
                return False
        if self.upper is not None:
            if x > self.upper or (x == self.upper and not self.upper_inclusive):
                return False
        return True


FIELD_RULES: Dict[str, FieldRule] = {
    "baseline_rate": FieldRule(0.0, 100.0, False, False, False,
                               "Enter a value between 0 and 100 (exclusive)."),
    "min_detectable_uplift": FieldRule(0.0, 500.0, False, True, False,
                                       "Enter uplift between 0 and 500%."),
    "significance": FieldRule(0.0, 50.0, False, False, False,
                              "Enter significance between 0 and 50 (exclusive)."),
    "power": FieldRule(50.0, 99.9, False, False, False,
                       "Enter power between 50 and 99.9 (exclusive)."),
    "daily_visitors": FieldRule(1.0, None, True, False, True,
                                "Enter an integer >= 1."),
    "variant_traffic": FieldRule(0.0, 100.0, False, False, False,
                                 "Enter a value between 0 and 100 (exclusive)."),
}


# -------------------------
# Parsing / validation
# -------------------------

# Plain ASCII decimal literals only: float() would also take "12_000",
# non-ASCII digits and "inf"/"nan" spellings.
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_number(text: Optional[str]) -> float:
    """
    Parse a form value to float. Blank or unparsable text gives nan,
    so the range check reports it like any other bad value.
    """
    if text is None:
        return math.nan
    s = str(text).strip()
    if not _DECIMAL_RE.fullmatch(s):
        return math.nan
    return float(s)


def _as_count(x: float) -> Union[int, float]:
    return int(x) if math.isfinite(x) and float(x).is_integer() else x


def validate_inputs(raw: RawInputs) -> ValidationResult:
    """
    Check every field against FIELD_RULES and the implied variant rate.

    parsed is always filled in, even when there are errors; only trust it when
    result.ok is True.
    """
    values = {name: parse_number(getattr(raw, name)) for name in RawInputs.field_names()}

    errors: Dict[str, str] = {}
    for name, rule in FIELD_RULES.items():
        errors[name] = "" if rule.accepts(values[name]) else rule.message

    # Evaluated even when the fields above failed; the caller rejects on those first.
    variant_rate = expected_variant_rate(values["baseline_rate"] / 100.0,
                                         values["min_detectable_uplift"] / 100.0)
    global_error = GLOBAL_RATE_ERROR if math.isfinite(variant_rate) and variant_rate >= 1.0 else ""

    parsed = ParsedInputs(
        baseline_rate=values["baseline_rate"] / 100.0,
        uplift=values["min_detectable_uplift"] / 100.0,
        significance=values["significance"] / 100.0,
        power=values["power"] / 100.0,
        daily_visitors=_as_count(values["daily_visitors"]),
        variant_traffic=values["variant_traffic"] / 100.0,
    )
    return ValidationResult(errors=errors, global_error=global_error, parsed=parsed)
