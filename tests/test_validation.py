# tests/test_validation.py
import pytest

from fincalc import config
from fincalc.validation import (
    REQUIRED_MESSAGE,
    FieldRule,
    make_number_parser,
    parse_and_validate,
    parse_interest_rate,
    parse_non_negative_number,
    parse_percentage,
    parse_positive_number,
    validate_emi_inputs,
    validate_fd_inputs,
    validate_field,
    validate_investment_inputs,
    validate_loan_inputs,
    validate_lumpsum_inputs,
    validate_mortgage_inputs,
    validate_ppf_inputs,
    validate_rd_inputs,
    validate_record,
    validate_safe_number,
    validate_simple_interest_inputs,
    validate_sip_inputs,
)


# -------- Single values --------
def test_safe_number_in_range():
    result = validate_safe_number("₹5,00,000")
    assert result.is_valid
    assert result.number == 500_000
    assert result.error is None


def test_safe_number_too_large_keeps_parsed_value():
    result = validate_safe_number(1e16)
    assert not result.is_valid
    assert result.number == 1e16
    assert result.error == "Number is too large. Maximum supported value is 1000.00T"


def test_safe_number_too_small():
    result = validate_safe_number("-20000000000000000")
    assert not result.is_valid
    assert result.error == "Number is too small. Minimum supported value is -1000.00T"


def test_safe_number_limit_is_inclusive():
    assert validate_safe_number(config.MAX_SAFE_CALCULATION_VALUE).is_valid
    assert validate_safe_number(config.MIN_SAFE_CALCULATION_VALUE).is_valid


def test_safe_number_garbage_is_zero():
    result = validate_safe_number("not a number")
    assert result.is_valid
    assert result.number == 0.0


@pytest.mark.parametrize(
    "kwargs, value, error",
    [
        ({"allow_zero": False}, "0", "Zero is not allowed"),
        ({"allow_negative": False}, -5, "Negative numbers are not allowed"),
        ({"min_value": 10}, 5, "Value must be at least 10.00"),
        ({"max_value": 100}, 5000, "Value cannot exceed 100.00"),
        ({"max_value": 1e6}, "2,500,000", "Value cannot exceed 1.00M"),
    ],
)
def test_parse_and_validate_errors(kwargs, value, error):
    result = parse_and_validate(value, **kwargs)
    assert not result.is_valid
    assert result.error == error


def test_zero_check_runs_before_range_check():
    result = parse_and_validate(0, min_value=10, allow_zero=False)
    assert result.error == "Zero is not allowed"


def test_parse_and_validate_rounds():
    result = parse_and_validate("3.14159265358979", decimals=2)
    assert result.is_valid
    assert result.value == 3.14
    assert parse_and_validate(1 / 3).value == 0.3333333333


def test_presets():
    assert parse_positive_number("250").is_valid
    assert parse_positive_number(0).error == "Zero is not allowed"
    assert parse_positive_number(0.001).error == "Value must be at least 0.01"
    assert parse_non_negative_number(0).is_valid
    assert not parse_non_negative_number(-1).is_valid
    assert parse_percentage("100%").is_valid
    assert not parse_percentage(101).is_valid
    assert parse_interest_rate(7.5).value == 7.5
    assert parse_interest_rate(60).error == "Value cannot exceed 50.00"


# -------- Fields and records --------
def test_validate_field():
    required = FieldRule(parse_non_negative_number)
    optional = FieldRule(parse_non_negative_number, required=False, default=0.0)
    choice = FieldRule(required=False, default="a", choices=("a", "b"))
    assert validate_field(required, None) == (None, REQUIRED_MESSAGE)
    assert validate_field(required, "  ") == (None, REQUIRED_MESSAGE)
    assert validate_field(optional, None) == (0.0, None)
    assert validate_field(choice, " B ") == ("b", None)
    assert validate_field(choice, "c") == (None, "Must be one of: a, b")
    assert validate_field(FieldRule(whole=True), "2.5") == (None, "Must be a whole number")


def test_validate_record_collects_every_error():
    rules = {
        "amount": FieldRule(make_number_parser(min_value=1)),
        "count": FieldRule(whole=True),
        "note": FieldRule(required=False, default="none", choices=("none", "some")),
    }
    outcome = validate_record({"amount": "0.5", "count": "3", "ignored": "x"}, rules)
    assert not outcome.is_valid
    assert outcome.errors == {"amount": "Value must be at least 1.00"}
    assert outcome.values == {"count": 3.0, "note": "none"}


def test_loan_form_valid():
    outcome = validate_loan_inputs(
        {"principal": "₹5,00,000", "annual_rate_percent": "8.5", "term_years": "20"}
    )
    assert outcome.is_valid
    assert outcome.values == {
        "principal": 500_000,
        "annual_rate_percent": 8.5,
        "term_years": 20,
        "extra_monthly_payment": 0.0,
    }


def test_loan_form_missing_fields():
    outcome = validate_loan_inputs({})
    assert outcome.errors == {
        "principal": REQUIRED_MESSAGE,
        "annual_rate_percent": REQUIRED_MESSAGE,
        "term_years": REQUIRED_MESSAGE,
    }


def test_loan_form_rules():
    outcome = validate_loan_inputs(
        {"principal": 50, "annual_rate_percent": 55, "term_years": "20.5", "extra_monthly_payment": -1}
    )
    assert outcome.errors == {
        "principal": "Value must be at least 100.00",
        "annual_rate_percent": "Value cannot exceed 50.00",
        "term_years": "Must be a whole number",
        "extra_monthly_payment": "Negative numbers are not allowed",
    }


def test_mortgage_down_payment_cannot_exceed_price():
    outcome = validate_mortgage_inputs(
        {"home_price": "300000", "down_payment": "400000", "annual_rate_percent": 4, "term_years": 30}
    )
    assert outcome.errors == {"down_payment": "Down payment cannot exceed the home price"}
    assert "down_payment" not in outcome.values


def test_mortgage_form_defaults():
    outcome = validate_mortgage_inputs({"home_price": 300_000, "annual_rate_percent": 4, "term_years": 30})
    assert outcome.is_valid
    assert outcome.values["down_payment"] == 0.0
    assert outcome.values["annual_pmi"] == 0.0


def test_investment_form():
    outcome = validate_investment_inputs(
        {"initial_amount": "10000", "periodic_contribution": 0, "annual_rate_percent": -20, "term_years": 5}
    )
    assert outcome.is_valid
    assert outcome.values["compounding_frequency"] == "monthly"

    outcome = validate_investment_inputs(
        {
            "initial_amount": 0,
            "periodic_contribution": 0,
            "annual_rate_percent": 60,
            "term_years": 101,
            "compounding_frequency": "weekly",
        }
    )
    assert outcome.errors == {
        "annual_rate_percent": "Value cannot exceed 50.00",
        "term_years": "Value cannot exceed 100.00",
        "compounding_frequency": "Must be one of: annually, semiannually, quarterly, monthly, daily",
    }


def test_emi_form_normalizes_choices():
    outcome = validate_emi_inputs(
        {"loan_amount": 100_000, "annual_rate_percent": 5, "tenure": 120, "tenure_type": "Months"}
    )
    assert outcome.is_valid
    assert outcome.values["tenure_type"] == "months"
    assert outcome.values["prepayment_frequency"] == "none"


def test_simple_interest_form():
    assert validate_simple_interest_inputs({"principal": 1000, "annual_rate_percent": 5, "years": 2}).is_valid
    outcome = validate_simple_interest_inputs({"principal": -1, "annual_rate_percent": 5, "years": 2})
    assert outcome.errors == {"principal": "Negative numbers are not allowed"}


def test_sip_and_lumpsum_forms():
    assert validate_sip_inputs({"monthly_investment": 500, "annual_return_percent": 12, "years": 10}).is_valid
    outcome = validate_sip_inputs({"monthly_investment": 50, "annual_return_percent": 0.5, "years": 60})
    assert outcome.errors == {
        "monthly_investment": "Value must be at least 100.00",
        "annual_return_percent": "Value must be at least 1.00",
        "years": "Value cannot exceed 50.00",
    }
    outcome = validate_lumpsum_inputs({"principal": 200_000_000, "annual_return_percent": 8, "years": 5})
    assert outcome.errors == {"principal": "Value cannot exceed 100.00M"}


def test_fd_form_accepts_fractional_years():
    outcome = validate_fd_inputs({"principal": 10_000, "annual_rate_percent": 7, "years": "0.25"})
    assert outcome.is_valid
    assert outcome.values["years"] == 0.25
    assert outcome.values["compounding_frequency"] == "yearly"
    outcome = validate_fd_inputs(
        {"principal": 10_000, "annual_rate_percent": 7, "years": 1, "compounding_frequency": "daily"}
    )
    assert outcome.errors == {"compounding_frequency": "Must be one of: monthly, quarterly, yearly"}


def test_rd_form_term_is_whole_years():
    outcome = validate_rd_inputs({"monthly_deposit": 1000, "annual_rate_percent": 6, "years": "2.5"})
    assert outcome.errors == {"years": "Must be a whole number"}


def test_ppf_form_defaults_the_rate():
    outcome = validate_ppf_inputs({"yearly_investment": 150_000, "years": 15})
    assert outcome.is_valid
    assert outcome.values["annual_rate_percent"] == 7.1
    outcome = validate_ppf_inputs({"yearly_investment": 100, "years": 10})
    assert outcome.errors == {
        "yearly_investment": "Value must be at least 500.00",
        "years": "Value must be at least 15.00",
    }
