# tests/test_cli.py
import csv
import json

import pytest

from fincalc.data_models import LoanResult, Termination
from fincalc.formatter import print_loan_summary
from fincalc.main import cli, parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("500k", 500_000.0),
        ("1.5M", 1_500_000.0),
        ("₹10,00,000", 1_000_000.0),
        ("$1,200", 1200.0),
        ("abc", 0.0),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_amount_keeps_missing_values():
    assert parse_amount(None) is None


def test_loan_summary_and_schedule(runner):
    result = runner.invoke(cli, ["loan", "-p", "100k", "-r", "5", "-y", "10"])
    assert result.exit_code == 0, result.output
    assert "Monthly payment    : 1060.66" in result.output
    assert "Payments made      : 120" in result.output
    assert "Period\tPayment" in result.output
    assert "Schedule has" not in result.output


def test_long_schedule_is_truncated_on_screen(runner):
    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "30"])
    assert result.exit_code == 0, result.output
    assert "Schedule has 360 rows; showing first 120 rows." in result.output

    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "30", "--all"])
    assert "Schedule has" not in result.output
    assert "\n360\t" in result.output


def test_extra_payment_reports_savings(runner):
    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "10", "-e", "1k"])
    assert result.exit_code == 0, result.output
    assert "Interest saved" in result.output


def test_invalid_input_is_a_usage_error(runner):
    result = runner.invoke(cli, ["loan", "-p", "50", "-r", "5", "-y", "10"])
    assert result.exit_code == 2
    assert "principal: Value must be at least 100.00" in result.output


def test_no_validate_falls_back_to_zeroed_result(runner):
    result = runner.invoke(cli, ["loan", "-p", "abc", "-r", "5", "-y", "10", "--no-validate"])
    assert result.exit_code == 0, result.output
    assert "Payments made      : 0" in result.output


def test_export_json(runner, tmp_path):
    path = tmp_path / "loan.json"
    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "10", "-o", str(path)])
    assert result.exit_code == 0, result.output
    assert f"Results exported to {path}" in result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["periodic_payment"] == 1060.66
    assert data["termination"] == "paid_off"
    assert len(data["schedule"]) == 120


def test_export_csv(runner, tmp_path):
    path = tmp_path / "schedule.csv"
    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "30", "-o", str(path)])
    assert result.exit_code == 0, result.output
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "period_index"
    assert "ending_balance" in rows[0]
    # exports are never truncated
    assert len(rows) == 361


def test_unsupported_export_format(runner, tmp_path):
    path = tmp_path / "loan.txt"
    result = runner.invoke(cli, ["loan", "-p", "100000", "-r", "5", "-y", "10", "-o", str(path)])
    assert result.exit_code == 2
    assert not path.exists()


def test_mortgage_command(runner):
    result = runner.invoke(
        cli,
        [
            "mortgage",
            "--price", "300000",
            "--down-payment", "60000",
            "-r", "4.5",
            "-y", "30",
            "--property-tax", "3600",
            "--insurance", "1200",
            "--pmi", "1800",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Monthly payment    : 1766.04" in result.output
    assert "Loan-to-value      : 80.00%" in result.output


def test_mortgage_down_payment_over_price_rejected(runner):
    result = runner.invoke(cli, ["mortgage", "-p", "300000", "-d", "400000", "-r", "4", "-y", "30"])
    assert result.exit_code == 2
    assert "down_payment" in result.output


def test_invest_command(runner):
    result = runner.invoke(cli, ["invest", "-i", "10000", "-r", "8", "-y", "5", "-c", "annually"])
    assert result.exit_code == 0, result.output
    assert "Final amount       : 14693.28" in result.output
    assert "Year\tOpening" in result.output


def test_emi_command(runner):
    result = runner.invoke(cli, ["emi", "-a", "100000", "-r", "5", "-t", "120", "--tenure-type", "months"])
    assert result.exit_code == 0, result.output
    assert "Monthly EMI        : 1060.66" in result.output


def test_emi_yearly_prepayment(runner):
    result = runner.invoke(
        cli,
        ["emi", "-a", "100000", "-r", "5", "-t", "10", "--prepayment", "10k", "--prepayment-frequency", "yearly"],
    )
    assert result.exit_code == 0, result.output
    assert "Total prepayment" in result.output


def test_simple_interest_command(runner):
    result = runner.invoke(cli, ["simple-interest", "-p", "10000", "-r", "5", "-y", "3"])
    assert result.exit_code == 0, result.output
    assert "Simple interest    : 1500.00" in result.output
    assert "Total amount       : 11500.00" in result.output


def test_verbose_flag(runner):
    result = runner.invoke(cli, ["--verbose", "simple-interest", "-p", "1000", "-r", "5", "-y", "1"])
    assert result.exit_code == 0, result.output


def test_sip_command(runner):
    result = runner.invoke(cli, ["sip", "-m", "1000", "-r", "12", "-y", "1"])
    assert result.exit_code == 0, result.output
    assert "Total invested     : 12000.00" in result.output
    assert "Maturity amount    : 12809.33" in result.output
    assert "Year\tOpening" in result.output


def test_lumpsum_command(runner):
    result = runner.invoke(cli, ["lumpsum", "-p", "10k", "-r", "8", "-y", "5"])
    assert result.exit_code == 0, result.output
    assert "Maturity amount    : 14693.28" in result.output


def test_fd_command(runner):
    result = runner.invoke(cli, ["fd", "-p", "100000", "-r", "7", "-y", "5"])
    assert result.exit_code == 0, result.output
    assert "Maturity amount    : 140255.17" in result.output
    assert "Effective yield    : 40.26%" in result.output


def test_fd_rate_outside_form_range(runner):
    result = runner.invoke(cli, ["fd", "-p", "100000", "-r", "25", "-y", "5", "-c", "monthly"])
    assert result.exit_code == 2
    assert "annual_rate_percent: Value cannot exceed 20.00" in result.output


def test_rd_command(runner):
    result = runner.invoke(cli, ["rd", "-m", "1000", "-r", "12", "-y", "1"])
    assert result.exit_code == 0, result.output
    assert "Maturity amount    : 12682.50" in result.output


def test_ppf_command_uses_default_rate(runner, tmp_path):
    path = tmp_path / "ppf.json"
    result = runner.invoke(cli, ["ppf", "-a", "150000", "-y", "15", "-o", str(path)])
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["total_invested"] == 2_250_000
    assert len(data["breakdown"]) == 15
    assert data["error"] is None


def test_ppf_term_below_minimum(runner):
    result = runner.invoke(cli, ["ppf", "-a", "150000", "-y", "10"])
    assert result.exit_code == 2
    assert "years: Value must be at least 15.00" in result.output


def test_underpaid_schedule_prints_a_warning(capsys):
    print_loan_summary(
        LoanResult(
            periodic_payment=5.0,
            total_paid=60.0,
            total_interest=120.0,
            payoff_periods=12,
            interest_saved=0.0,
            schedule=[],
            principal=1000.0,
            termination=Termination.UNDERPAID,
        )
    )
    assert "payment does not amortize the loan" in capsys.readouterr().out
