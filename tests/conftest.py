# tests/conftest.py
from __future__ import annotations

import pytest
from click.testing import CliRunner

from fincalc.engine import calculate_loan
from fincalc_web.app import app


# -------- Engine fixtures --------
@pytest.fixture
def standard_loan():
    # 100k at 5% over 10 years, the textbook example
    return calculate_loan(100_000, 5, 10, 0)


# -------- Interface fixtures --------
@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    with app.test_client() as test_client:
        yield test_client
