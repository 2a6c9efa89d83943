"""
Unit tests for summary statistics and rankings.
"""

import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tb_analysis.analysis.summary import (
    calculate_summary_stats, filter_by_flag, get_flagged_records, get_top_variances, search_records
)
from tb_analysis.analysis.variance_engine import classify, ingest
from tb_analysis.data.models import ThresholdConfig, VarianceFlag


class TestSummary:
    """Test cases for summary helpers."""

    @pytest.fixture
    def records(self):
        rows = [
            ('1000', 'Cash at Bank', 120000, 100000),           # 20% moderate
            ('1100', 'Accounts Receivable', 150000, 100000),    # 50% significant
            ('2000', 'Accounts Payable', 105000, 100000),       # 5% none
            ('3000', 'Term Loan', 900000, 0),                   # zero prior, significant
            ('4000', 'Prepaid Expenses', 1000, 2000),           # -50% significant
        ]
        return classify(ingest([
            {'account_code': c, 'account_description': d,
             'current_year_balance': cy, 'prior_year_balance': py}
            for c, d, cy, py in rows
        ]), ThresholdConfig())

    def test_totals(self, records):
        stats = calculate_summary_stats(records)

        assert stats.total_accounts == 5
        assert stats.total_current_year_balance == 1276000
        assert stats.total_prior_year_balance == 302000
        assert stats.total_variance == 974000

    def test_flag_counts(self, records):
        stats = calculate_summary_stats(records)

        assert stats.flagged_items == 4
        assert stats.significant_items == 3
        assert stats.moderate_items == 1

    def test_explanation_completion_counts_flagged_notes_only(self, records):
        notes = {'1000': 'Timing', '1100': '  ', '2000': 'Not flagged anyway'}

        stats = calculate_summary_stats(records, notes)

        assert stats.explained_items == 1
        assert stats.explanation_completion == 25

    def test_explanation_completion_without_flags(self):
        stats = calculate_summary_stats([])

        assert stats.total_accounts == 0
        assert stats.explanation_completion == 0

    def test_top_variances_by_amount(self, records):
        top = get_top_variances(records, n=3, by='amount')

        assert [r.account_code for r in top] == ['3000', '1100', '1000']

    def test_top_variances_by_percent_skips_zero_prior(self, records):
        top = get_top_variances(records, n=5, by='percent')

        assert '3000' not in [r.account_code for r in top]
        assert abs(top[0].variance_percentage) >= abs(top[1].variance_percentage)

    def test_top_variances_invalid_ranking(self, records):
        with pytest.raises(ValueError):
            get_top_variances(records, by='flag')

    def test_filters(self, records):
        assert [r.account_code for r in filter_by_flag(records, VarianceFlag.MODERATE)] == ['1000']
        assert len(get_flagged_records(records)) == 4

    def test_search_by_code_and_description(self, records):
        assert [r.account_code for r in search_records(records, '11')] == ['1100']
        assert [r.account_code for r in search_records(records, 'ACCOUNTS')] == ['1100', '2000']
        assert len(search_records(records, '')) == 5
        assert search_records(records, 'inventory') == []
