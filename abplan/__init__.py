"""
abplan: A/B test planning (sample size, duration) and a feature-toggle list editor.

Public API is re-exported here for convenience.
"""

from importlib.metadata import PackageNotFoundError, version as _version

# ---- Version ----
try:
    __version__ = _version("abplan")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# ---- Re-exports ----
# Planner
from .planner import (  # noqa: F401
    CalculationResult,
    PlanOutcome,
    compute,
    plan,
    sweep,
)

# Power / sample size
from .power import (  # noqa: F401
    ProbabilityDomainError,
    duration_days,
    norm_cdf,
    norm_ppf,
    sample_size_proportions,
)

# Inputs
from .validation import (  # noqa: F401
    ParsedInputs,
    RawInputs,
    ValidationResult,
    validate_inputs,
)
from .share import from_query, share_url, to_query  # noqa: F401

# Toggles
from .toggles import (  # noqa: F401
    FeatureToggle,
    add_toggle,
    flip_toggle,
    remove_toggle,
    set_enabled,
    set_rollout,
    update_toggle,
)

__all__ = [
    "__version__",
    # planner
    "compute",
    "plan",
    "sweep",
    "CalculationResult",
    "PlanOutcome",
    # power
    "norm_cdf",
    "norm_ppf",
    "sample_size_proportions",
    "duration_days",
    "ProbabilityDomainError",
    # inputs
    "RawInputs",
    "ParsedInputs",
    "ValidationResult",
    "validate_inputs",
    "to_query",
    "from_query",
    "share_url",
    # toggles
    "FeatureToggle",
    "add_toggle",
    "remove_toggle",
    "update_toggle",
    "set_enabled",
    "flip_toggle",
    "set_rollout",
]
