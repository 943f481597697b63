import pytest

from vehicle_expenses.config import NormalizationPolicy
from vehicle_expenses.fields import (
    AMOUNT_KEYS,
    coerce_number,
    first_populated,
    is_empty_row,
    reconcile_record,
    resolve_category,
    resolve_description,
)

# ---- Lookup ------------------------------------------------------------------


def test_first_populated_respects_priority_order():
    row = {"Price": "7", "Amount": "5"}
    assert first_populated(row, AMOUNT_KEYS) == "5"


def test_first_populated_skips_blank_candidates():
    row = {"Amount": "   ", "Price": "7"}
    assert first_populated(row, AMOUNT_KEYS) == "7"


def test_first_populated_ignores_case_and_padding_of_headers():
    row = {" AMOUNT ": "12"}
    assert first_populated(row, AMOUNT_KEYS) == "12"


def test_first_populated_prefers_exact_key_over_folded_match():
    # "price" is a lower-priority candidate but matches exactly; the folded
    # pass only runs when no candidate matches as written.
    row = {"AMOUNT": "1", "price": "2"}
    assert first_populated(row, AMOUNT_KEYS) == "2"


def test_first_populated_returns_none_when_nothing_matches():
    assert first_populated({"Cost": "3"}, AMOUNT_KEYS) is None


@pytest.mark.parametrize(
    "row, expected",
    [
        ({}, True),
        ({"Date": "", "Amount": None}, True),
        ({"note": "   "}, True),
        ({"Amount": 0}, False),
        ({"Date": "1 Jan"}, False),
    ],
)
def test_is_empty_row(row, expected):
    assert is_empty_row(row) is expected


# ---- Numeric coercion --------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,234.50", 1234.50),
        ("₹ 1,200.50", 1200.50),
        ("$-3", -3.0),
        ("  42 ", 42.0),
        (5, 5.0),
        (2.5, 2.5),
    ],
)
def test_coerce_number_parses(raw, expected):
    assert coerce_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "nan", "inf", True, ","])
def test_coerce_number_rejects(raw):
    assert coerce_number(raw) is None


# ---- Category / description --------------------------------------------------


@pytest.mark.parametrize("label", ["fuel", "FUEL", "Fuel - Shell", "diesel fuel top-up"])
def test_category_containing_fuel_is_canonical(label):
    assert resolve_category(label, NormalizationPolicy()) == "Fuel"


def test_category_defaults_to_other():
    assert resolve_category(None, NormalizationPolicy()) == "Other"


def test_blank_category_is_fuel_policy():
    policy = NormalizationPolicy(blank_category_is_fuel=True)
    assert resolve_category(None, policy) == "Fuel"
    # An explicit label always wins over the fallback.
    assert resolve_category("Insurance", policy) == "Insurance"


def test_description_fallbacks():
    assert resolve_description("Oil change", "Service") == "Oil change"
    assert resolve_description(None, "Fuel") == "Fuel"
    assert resolve_description(None, "Insurance") == "Insurance"


# ---- Row mapping -------------------------------------------------------------


def test_reconcile_fuel_row():
    row = {
        "date": "15 Jan",
        "comment": "fuel",
        "Price": "1,000",
        "odometer reading": "10000",
        "volume in ltr": "10",
    }
    rec = reconcile_record(row, current_year=2024)

    assert rec.date == "15 Jan 2024"
    assert rec.category == "Fuel"
    assert rec.description == "fuel"
    assert rec.amount == 1000.0
    assert rec.odometer == 10000.0
    assert rec.volume == 10.0
    assert rec.rate == pytest.approx(100.0)
    assert rec.efficiency is None


def test_reconcile_service_row_with_missing_and_malformed_fields():
    row = {"Date": "3 Mar 2024", "Category": "Service", "Amount": "n/a", "Odometer": ""}
    rec = reconcile_record(row, current_year=2024)

    assert rec.category == "Service"
    assert rec.description == "Service"
    assert rec.amount == 0.0
    assert rec.odometer is None
    assert rec.volume is None
    assert rec.rate is None


def test_reconcile_explicit_rate_is_kept():
    row = {"Amount": "500", "Volume": "5", "Rate": "98.5"}
    rec = reconcile_record(row, current_year=2024)
    assert rec.rate == 98.5


def test_reconcile_blank_category_with_policy():
    row = {"Date": "1 Feb 2024", "Amount": "900", "Volume": "9"}
    default = reconcile_record(row, current_year=2024)
    fuel = reconcile_record(
        row, current_year=2024, policy=NormalizationPolicy(blank_category_is_fuel=True)
    )

    assert (default.category, default.description) == ("Other", "Other")
    assert (fuel.category, fuel.description) == ("Fuel", "Fuel")


def test_reconcile_numeric_cells():
    row = {"Timestamp": "2024-04-02", "type": "Insurance", "price": 12000, "Note": "Annual"}
    rec = reconcile_record(row, current_year=2024)

    assert rec.date == "2 Apr 2024"
    assert rec.category == "Insurance"
    assert rec.description == "Annual"
    assert rec.amount == 12000.0
