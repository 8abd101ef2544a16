import math

import pytest

from abplan.validation import (
    FIELD_RULES,
    GLOBAL_RATE_ERROR,
    RawInputs,
    parse_number,
    validate_inputs,
)


def _raw(**overrides):
    values = RawInputs.defaults().as_dict()
    values.update(overrides)
    return RawInputs(**values)


def test_defaults_are_valid_and_normalized():
    res = validate_inputs(RawInputs.defaults())
    assert res.ok
    assert set(res.errors) == set(RawInputs.field_names())
    assert all(msg == "" for msg in res.errors.values())
    assert res.global_error == ""

    p = res.parsed
    assert p.baseline_rate == pytest.approx(0.08)
    assert p.uplift == pytest.approx(0.10)
    assert p.significance == pytest.approx(0.05)
    assert p.power == pytest.approx(0.80)
    assert p.daily_visitors == 12000
    assert isinstance(p.daily_visitors, int)
    assert p.variant_traffic == pytest.approx(0.50)


@pytest.mark.parametrize("field,value", [
    ("baseline_rate", "0"),
    ("baseline_rate", "100"),
    ("baseline_rate", "-3"),
    ("min_detectable_uplift", "0"),
    ("min_detectable_uplift", "500.01"),
    ("significance", "0"),
    ("significance", "50"),
    ("power", "50"),
    ("power", "99.9"),
    ("daily_visitors", "0"),
    ("daily_visitors", "12.5"),
    ("variant_traffic", "0"),
    ("variant_traffic", "100"),
])
def test_out_of_range_values_flag_only_that_field(field, value):
    res = validate_inputs(_raw(**{field: value}))
    assert res.errors[field] == FIELD_RULES[field].message
    assert not res.ok
    others = [msg for name, msg in res.errors.items() if name != field]
    assert others == [""] * 5


@pytest.mark.parametrize("field,value", [
    ("min_detectable_uplift", "500"),
    ("power", "99.89"),
    ("power", "50.01"),
    ("daily_visitors", "1"),
    ("daily_visitors", "12000.0"),
    ("significance", "49.99"),
])
def test_boundary_values_that_pass(field, value):
    res = validate_inputs(_raw(**{field: value, "baseline_rate": "1"}))
    assert res.errors[field] == ""


@pytest.mark.parametrize("text", ["", "   ", "abc", "nan", "inf", "-inf", "1e400", "12_000", "١٢", "0x10"])
def test_non_numeric_or_non_finite_is_a_field_error(text):
    res = validate_inputs(_raw(significance=text))
    assert res.errors["significance"] != ""
    assert not res.ok


def test_parse_number():
    assert parse_number(" 12 ") == 12.0
    assert parse_number("1e3") == 1000.0
    assert math.isnan(parse_number(""))
    assert math.isnan(parse_number(None))
    assert math.isnan(parse_number("12%"))
    assert math.isnan(parse_number("12_000"))
    assert math.isnan(parse_number("١٢"))
    assert parse_number(".5") == 0.5
    assert parse_number("5.") == 5.0
    assert parse_number("-2E-1") == -0.2


def test_global_error_when_variant_rate_reaches_100_percent():
    res = validate_inputs(_raw(baseline_rate="60", min_detectable_uplift="100"))
    assert res.global_error == GLOBAL_RATE_ERROR
    assert not any(res.errors.values())
    assert not res.ok


def test_global_error_at_exactly_100_percent():
    res = validate_inputs(_raw(baseline_rate="50", min_detectable_uplift="100"))
    assert res.global_error == GLOBAL_RATE_ERROR


def test_global_check_runs_even_with_field_errors():
    # power is invalid, but the cross-field rule is still evaluated
    res = validate_inputs(_raw(baseline_rate="60", min_detectable_uplift="100", power="10"))
    assert res.errors["power"] != ""
    assert res.global_error == GLOBAL_RATE_ERROR


def test_no_global_error_when_rate_is_not_finite():
    res = validate_inputs(_raw(baseline_rate="abc"))
    assert res.global_error == ""
    assert res.errors["baseline_rate"] != ""


def test_parsed_is_filled_even_when_invalid():
    res = validate_inputs(_raw(daily_visitors="12.5", power="120"))
    assert res.parsed.daily_visitors == pytest.approx(12.5)
    assert res.parsed.power == pytest.approx(1.2)
