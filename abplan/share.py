"""
abplan/share.py

Share planner inputs through the URL query string.

Raw values go in verbatim under their camelCase keys (baselineRate=8&...),
so a shared link reproduces exactly what was typed, including values that
do not validate.
"""

from __future__ import annotations

from typing import Dict
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from .validation import DEFAULT_VALUES, QUERY_KEYS, RawInputs


def to_query(raw: RawInputs) -> str:
    return urlencode([(QUERY_KEYS[name], value) for name, value in raw.as_dict().items()])


def _query_part(query: str) -> str:
    # Accept a bare query, "?a=b", or a full URL.
    if "://" in query or query.startswith("/"):
        return urlsplit(query).query
    return query[1:] if query.startswith("?") else query


def from_query(query: str) -> RawInputs:
    """
    Rebuild inputs from a query string. Missing or blank parameters take the
    default value; unknown parameters are ignored.
    """
    params = parse_qs(_query_part(query), keep_blank_values=True)

    values: Dict[str, str] = {}
    for name, key in QUERY_KEYS.items():
        given = params.get(key, [""])[0]
        values[name] = given if given.strip() else DEFAULT_VALUES[name]
    return RawInputs(**values)


def share_url(base_url: str, raw: RawInputs) -> str:
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, to_query(raw), parts.fragment))
