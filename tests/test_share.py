from urllib.parse import parse_qs, urlsplit

from abplan.share import from_query, share_url, to_query
from abplan.validation import RawInputs


def test_to_query_uses_wire_keys_and_raw_values():
    raw = RawInputs("8", "10", "5", "80", "12000", "50")
    assert to_query(raw) == (
        "baselineRate=8&minDetectableUplift=10&significance=5"
        "&power=80&dailyVisitors=12000&variantTraffic=50"
    )


def test_values_are_kept_verbatim():
    # no numeric re-encoding, even for values that fail validation
    raw = RawInputs("8.50", "1e1", "abc", "80", "12.5", " 50")
    assert from_query(to_query(raw)) == raw


def test_missing_and_blank_params_fall_back_to_defaults():
    raw = from_query("?baselineRate=3&power=&dailyVisitors=%20")
    defaults = RawInputs.defaults()
    assert raw.baseline_rate == "3"
    assert raw.power == defaults.power
    assert raw.daily_visitors == defaults.daily_visitors
    assert raw.significance == defaults.significance


def test_empty_query_gives_defaults():
    assert from_query("") == RawInputs.defaults()


def test_unknown_keys_ignored_and_first_repeat_wins():
    raw = from_query("utm_source=x&power=90&power=95")
    assert raw.power == "90"


def test_from_full_url():
    raw = from_query("https://example.com/planner?variantTraffic=20#results")
    assert raw.variant_traffic == "20"


def test_share_url_replaces_existing_query():
    raw = RawInputs.defaults()
    url = share_url("https://example.com/planner?old=1#top", raw)
    parts = urlsplit(url)
    assert parts.path == "/planner"
    assert parts.fragment == "top"
    assert "old" not in parse_qs(parts.query)
    assert from_query(url) == raw
