# tests/test_savings.py
import pytest

from fincalc import config
from fincalc.growth import (
    PPF_RATE_PERCENT,
    calculate_fd,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_sip,
)


# -------- SIP --------
def test_sip_invests_at_the_start_of_each_month():
    result = calculate_sip(1000, 12, 1)
    assert result.error is None
    assert result.total_invested == 12_000
    # annuity due: 1000 * ((1.01^12 - 1) / 0.01) * 1.01
    assert result.maturity_amount == pytest.approx(12_809.33, abs=0.01)
    assert result.total_gains == pytest.approx(809.33, abs=0.01)


def test_sip_breakdown_agrees_with_maturity():
    result = calculate_sip(5000, 10, 10)
    assert len(result.breakdown) == 10
    for year in result.breakdown:
        assert year.contributions == 60_000
    last = result.breakdown[-1]
    assert last.cumulative_contributions == result.total_invested
    assert last.closing_balance == pytest.approx(result.maturity_amount, abs=0.05)


def test_sip_zero_return_is_plain_saving():
    result = calculate_sip(1000, 0, 2)
    assert result.maturity_amount == 24_000
    assert result.total_gains == 0.0
    assert result.effective_yield == 0.0


def test_sip_horizon_is_capped(monkeypatch):
    monkeypatch.setattr(config, "MAX_SCHEDULE_PERIODS", 24)
    result = calculate_sip(100, 0, 50)
    assert result.total_invested == 2400
    assert len(result.breakdown) == 2


# -------- Lump sum --------
def test_lumpsum_compounds_yearly():
    result = calculate_lumpsum(10_000, 8, 5)
    assert result.total_invested == 10_000
    assert result.maturity_amount == 14693.28
    assert result.total_gains == pytest.approx(4693.28, abs=0.005)
    assert result.effective_yield == pytest.approx(46.93, abs=0.005)
    assert len(result.breakdown) == 5
    assert result.breakdown[0].closing_balance == pytest.approx(10_800, abs=0.01)
    assert result.breakdown[-1].closing_balance == pytest.approx(14693.28, abs=0.01)


def test_lumpsum_zero_term_returns_principal():
    result = calculate_lumpsum(1000, 8, 0)
    assert result.maturity_amount == 1000
    assert result.total_gains == 0.0
    assert result.breakdown == []


def test_raw_inputs_are_normalized():
    assert calculate_lumpsum("₹10,000", "8%", "5").maturity_amount == 14693.28


# -------- Fixed deposit --------
def test_fd_compounded_yearly():
    result = calculate_fd(100_000, 7, 5)
    assert result.maturity_amount == pytest.approx(140_255.17, abs=0.005)
    assert result.total_gains == pytest.approx(40_255.17, abs=0.005)
    assert result.effective_yield == pytest.approx(40.26, abs=0.005)


def test_fd_more_frequent_compounding_earns_more():
    yearly = calculate_fd(100_000, 7, 5, "yearly")
    quarterly = calculate_fd(100_000, 7, 5, "Quarterly")
    monthly = calculate_fd(100_000, 7, 5, "monthly")
    assert yearly.maturity_amount < quarterly.maturity_amount < monthly.maturity_amount
    assert monthly.breakdown[-1].closing_balance == pytest.approx(monthly.maturity_amount, abs=0.05)


def test_fd_unknown_frequency_compounds_yearly():
    assert calculate_fd(100_000, 7, 5, "weekly").maturity_amount == calculate_fd(100_000, 7, 5).maturity_amount
    assert calculate_fd(100_000, 7, 5, None).maturity_amount == calculate_fd(100_000, 7, 5).maturity_amount


def test_fd_quarter_year_term():
    result = calculate_fd(100_000, 8, 0.25, "quarterly")
    assert result.maturity_amount == pytest.approx(102_000, abs=0.005)
    assert len(result.breakdown) == 1


# -------- Recurring deposit --------
def test_rd_deposits_at_the_end_of_each_month():
    result = calculate_rd(1000, 12, 1)
    assert result.total_invested == 12_000
    # ordinary annuity: 1000 * (1.01^12 - 1) / 0.01
    assert result.maturity_amount == pytest.approx(12_682.50, abs=0.01)
    assert result.breakdown[-1].closing_balance == pytest.approx(result.maturity_amount, abs=0.01)


def test_rd_earns_less_than_sip_on_the_same_terms():
    assert calculate_rd(1000, 12, 5).maturity_amount < calculate_sip(1000, 12, 5).maturity_amount


def test_rd_zero_rate():
    result = calculate_rd(1000, 0, 2)
    assert result.maturity_amount == 24_000
    assert result.total_gains == 0.0


# -------- PPF --------
def test_ppf_credits_interest_yearly_on_deposit_and_balance():
    result = calculate_ppf(1000, 2, 10)
    assert result.total_invested == 2000
    # (1000 * 1.1 + 1000) * 1.1
    assert result.maturity_amount == pytest.approx(2310.0, abs=0.005)
    first, second = result.breakdown
    assert first.contributions == 1000
    assert first.closing_balance == pytest.approx(1100.0, abs=0.01)
    assert second.opening_balance == first.closing_balance
    assert second.closing_balance == pytest.approx(2310.0, abs=0.01)


def test_ppf_uses_the_standard_rate_by_default():
    result = calculate_ppf(150_000, 15)
    assert result.total_invested == 2_250_000
    assert result.maturity_amount == pytest.approx(4_068_190, rel=1e-3)
    assert calculate_ppf(150_000, 15, None).maturity_amount == result.maturity_amount
    assert calculate_ppf(150_000, 15, PPF_RATE_PERCENT).maturity_amount == result.maturity_amount


def test_ppf_years_are_whole():
    assert len(calculate_ppf(1000, 15.4).breakdown) == 15


# -------- Errors --------
@pytest.mark.parametrize(
    "calculate, args, message",
    [
        (calculate_sip, (-1, 12, 1), "Monthly investment cannot be negative."),
        (calculate_lumpsum, (-1, 8, 5), "Principal amount cannot be negative."),
        (calculate_fd, (1000, -1, 1), "Interest rate cannot be negative."),
        (calculate_rd, (1000, 5, -1), "Time period cannot be negative."),
        (calculate_ppf, (-1, 15), "Yearly investment cannot be negative."),
    ],
)
def test_negative_inputs_are_reported(calculate, args, message):
    result = calculate(*args)
    assert result.error == message
    assert result.maturity_amount == 0.0
    assert result.breakdown == []
