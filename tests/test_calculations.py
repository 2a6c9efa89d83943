"""
Unit tests for calculation utilities.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tb_analysis.utils.calculations import (
    calculate_variance_amount, calculate_variance_percentage, is_finite_number, parse_amount
)


class TestVarianceCalculations:

    def test_variance_amount(self):
        assert calculate_variance_amount(120000, 100000) == 20000
        assert calculate_variance_amount(-50, 25) == -75

    def test_variance_percentage(self):
        assert calculate_variance_percentage(150000, 100000) == pytest.approx(50.0)
        assert calculate_variance_percentage(80, 100) == pytest.approx(-20.0)

    @pytest.mark.parametrize("current, expected", [(100000, 100.0), (-1, -100.0), (0, 0.0)])
    def test_variance_percentage_zero_prior(self, current, expected):
        assert calculate_variance_percentage(current, 0) == expected


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        (1500, 1500.0),
        (np.int64(7), 7.0),
        (12.5, 12.5),
        ("1,234.56", 1234.56),
        ("  -42 ", -42.0),
        ("(1,000)", -1000.0),
        ("$2,500", 2500.0),
        ("₹ 10,000", 10000.0),
        ("300-", -300.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [
        None, "", "abc", "nan", "inf", float('nan'), float('inf'), True,
        "1.234,56", "(1.000,00)", "€ 12.500,75",
    ])
    def test_rejects(self, raw):
        assert parse_amount(raw) is None

    def test_is_finite_number(self):
        assert is_finite_number(3)
        assert is_finite_number(np.float64(2.5))
        assert not is_finite_number(float('nan'))
        assert not is_finite_number("3")
        assert not is_finite_number(False)
