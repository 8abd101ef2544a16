"""
abplan/toggles.py

A small feature-toggle list editor, independent of the planner.

Every operation takes the current tuple of toggles and returns a new one;
inputs are never modified, so a host can keep the previous list around
(undo, diffing) without copying.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Tuple


@dataclass(frozen=True)
class FeatureToggle:
    id: str
    name: str
    enabled: bool
    rollout: int
    description: str
    created_at: datetime


Toggles = Tuple[FeatureToggle, ...]

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_EDITABLE = {"name", "enabled", "rollout", "description"}


def slugify(name: str) -> str:
    slug = _SLUG_RE.sub("-", name.lower()).strip("-")
    return slug or "toggle"


def make_toggle_id(name: str, created_at: datetime) -> str:
    """<slug>-<creation time in epoch milliseconds>"""
    return f"{slugify(name)}-{int(created_at.timestamp() * 1000)}"


def validate_rollout(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"rollout must be an integer, got {value!r}")
    if not (0 <= value <= 100):
        raise ValueError(f"rollout must be between 0 and 100, got {value}")
    return value


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Toggle name must not be empty.")
    return name


def _index(toggles: Iterable[FeatureToggle], toggle_id: str) -> int:
    for i, t in enumerate(toggles):
        if t.id == toggle_id:
            return i
    raise KeyError(toggle_id)


def add_toggle(
    toggles: Iterable[FeatureToggle],
    name: str,
    *,
    description: Optional[str] = "",
    enabled: bool = False,
    rollout: int = 0,
    now: Optional[datetime] = None,
) -> Toggles:
    current = tuple(toggles)
    created_at = now or datetime.now(timezone.utc)
    name = _clean_name(name)

    toggle = FeatureToggle(
        id=make_toggle_id(name, created_at),
        name=name,
        enabled=bool(enabled),
        rollout=validate_rollout(rollout),
        description=(description or "").strip(),
        created_at=created_at,
    )
    if any(t.id == toggle.id for t in current):
        raise ValueError(f"Duplicate toggle id {toggle.id!r}")
    return current + (toggle,)


def remove_toggle(toggles: Iterable[FeatureToggle], toggle_id: str) -> Toggles:
    current = tuple(toggles)
    i = _index(current, toggle_id)
    return current[:i] + current[i + 1:]


def update_toggle(toggles: Iterable[FeatureToggle], toggle_id: str, **changes: Any) -> Toggles:
    """
    Replace fields of one toggle. id and created_at are fixed at creation;
    the id does not follow later renames.
    """
    unknown = set(changes) - _EDITABLE
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
    if "rollout" in changes:
        changes["rollout"] = validate_rollout(changes["rollout"])
    if "enabled" in changes:
        changes["enabled"] = bool(changes["enabled"])
    if "description" in changes:
        changes["description"] = (changes["description"] or "").strip()

    current = tuple(toggles)
    i = _index(current, toggle_id)
    return current[:i] + (replace(current[i], **changes),) + current[i + 1:]


def set_enabled(toggles: Iterable[FeatureToggle], toggle_id: str, enabled: bool) -> Toggles:
    return update_toggle(toggles, toggle_id, enabled=enabled)


def flip_toggle(toggles: Iterable[FeatureToggle], toggle_id: str) -> Toggles:
    current = tuple(toggles)
    return set_enabled(current, toggle_id, not current[_index(current, toggle_id)].enabled)


def set_rollout(toggles: Iterable[FeatureToggle], toggle_id: str, rollout: int) -> Toggles:
    return update_toggle(toggles, toggle_id, rollout=rollout)
