"""
abplan/utils.py

Presentation helpers shared by hosts:
  - number formatting for reports
  - PresentationConfig (labels/copy of one planner variant)
  - plain-text and dict renderings of a PlanOutcome
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Dict, List, Optional

from .planner import PlanOutcome
from .validation import QUERY_KEYS, RawInputs


# -------------------------
# Formatting
# -------------------------

def _non_finite(x: float) -> Optional[str]:
    if math.isnan(x):
        return "n/a"
    if math.isinf(x):
        return "infinite" if x > 0 else "-infinite"
    return None


def fmt_pct(x: float, digits: int = 2) -> str:
    """Fraction -> percent string, 0.088 -> '8.80%'."""
    return _non_finite(x) or f"{100.0 * x:.{digits}f}%"

def fmt_count(x: float) -> str:
    return _non_finite(x) or f"{x:,.0f}"

def fmt_days(x: float) -> str:
    return f"{fmt_count(x)} day(s)"


# -------------------------
# Presentation config
# -------------------------

def _default_field_labels() -> Dict[str, str]:
    return {
        "baseline_rate": "Current conversion rate (%)",
        "min_detectable_uplift": "Expected improvement (%)",
        "significance": "Confidence strictness (%)",
        "power": "Chance to detect real lift (%)",
        "daily_visitors": "Users per day",
        "variant_traffic": "Traffic to version B (%)",
    }


@dataclass(frozen=True)
class PresentationConfig:
    """Copy for one variant of the planner page; the numbers behind it are shared."""

    title: str = "A/B Test Planner"
    field_labels: Dict[str, str] = field(default_factory=_default_field_labels)
    sample_size_label: str = "Sample size per variant"
    total_label: str = "Total sample size"
    duration_label: str = "Estimated duration"
    variant_rate_label: str = "Expected conversion rate (variant B)"
    empty_message: str = (
        "Enter your assumptions and calculate to see required sample size and estimated run time."
    )
    disclaimer: str = "Estimate only. Use it as planning guidance before running the live test."


# -------------------------
# Reporting
# -------------------------

def as_report_dict(obj) -> Dict:
    """
    Convert a PlanOutcome (or any dataclass / dict) to plain JSON-friendly data.
    Field errors are keyed by their query-string names.
    """
    if isinstance(obj, PlanOutcome):
        return {
            "errors": {QUERY_KEYS[k]: v for k, v in obj.errors.items()},
            "globalError": obj.global_error,
            "result": None if obj.result is None else _json_safe(asdict(obj.result)),
        }
    if is_dataclass(obj):
        return _json_safe(asdict(obj))
    if isinstance(obj, dict):
        return obj
    raise TypeError("Expected dataclass or dict.")


def _json_safe(d: Dict) -> Dict:
    # JSON has no inf/nan
    return {k: (None if isinstance(v, float) and not math.isfinite(v) else v) for k, v in d.items()}


def render_report(
    outcome: PlanOutcome,
    raw: Optional[RawInputs] = None,
    config: Optional[PresentationConfig] = None,
) -> str:
    config = config or PresentationConfig()
    lines: List[str] = [config.title, "=" * len(config.title)]

    if raw is not None:
        for name, value in raw.as_dict().items():
            lines.append(f"{config.field_labels.get(name, name)}: {value}")
        lines.append("")

    if outcome.result is None:
        for name, msg in outcome.errors.items():
            if msg:
                lines.append(f"! {config.field_labels.get(name, name)}: {msg}")
        if outcome.global_error:
            lines.append(f"! {outcome.global_error}")
        if not outcome.messages():
            lines.append(config.empty_message)
        return "\n".join(lines)

    r = outcome.result
    lines += [
        f"{config.sample_size_label}: {fmt_count(r.sample_size_per_group)} users",
        f"{config.total_label}: {fmt_count(r.total_sample_size)} users",
        f"{config.duration_label}: {fmt_days(r.duration_days)}",
        f"{config.variant_rate_label}: {fmt_pct(r.expected_variant_rate)}",
        "",
        config.disclaimer,
    ]
    return "\n".join(lines)
