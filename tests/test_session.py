"""
Unit tests for AnalysisSession.
"""

import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tb_analysis.analysis.session import AnalysisSession
from tb_analysis.data.models import ThresholdConfig, VarianceFlag


class TestAnalysisSession:
    """Test cases for AnalysisSession."""

    @pytest.fixture
    def rows(self):
        return [
            {'account_code': '1000', 'account_description': 'Cash',
             'current_year_balance': 120000, 'prior_year_balance': 100000},
            {'account_code': '1100', 'account_description': 'Receivables',
             'current_year_balance': 150000, 'prior_year_balance': 100000},
            {'account_code': '2000', 'account_description': 'Payables',
             'current_year_balance': 105000, 'prior_year_balance': 100000},
        ]

    @pytest.fixture
    def session(self, rows):
        session = AnalysisSession()
        session.load_rows(rows)
        return session

    def test_new_session_is_empty(self):
        session = AnalysisSession()

        assert session.is_empty
        assert session.records == []
        assert session.summary().total_accounts == 0

    def test_load_classifies(self, session):
        flags = [r.flag for r in session.records]
        assert flags == [VarianceFlag.MODERATE, VarianceFlag.SIGNIFICANT, VarianceFlag.NONE]

    @pytest.mark.parametrize("thresholds", [
        ThresholdConfig(float('nan'), float('nan')),
        ThresholdConfig(10.0, float('inf')),
        ThresholdConfig('10', 25.0),
    ])
    def test_constructor_rejects_non_finite_thresholds(self, thresholds):
        with pytest.raises(ValueError, match="finite number"):
            AnalysisSession(thresholds)

    def test_default_thresholds(self, session):
        assert session.thresholds == ThresholdConfig(10.0, 25.0)

    def test_materiality_change_reclassifies(self, session):
        before = session.records[0]

        session.set_materiality_threshold(30)
        after = session.records[0]

        assert after.flag == VarianceFlag.NONE
        assert after.variance == before.variance
        assert after.variance_percentage == before.variance_percentage

    def test_significant_change_reclassifies(self, session):
        session.set_significant_threshold(60)

        assert session.records[1].flag == VarianceFlag.MODERATE

    def test_same_thresholds_twice_is_stable(self, session):
        first = session.set_materiality_threshold(15)
        second = session.set_materiality_threshold(15)

        assert first == second

    @pytest.mark.parametrize("value", [float('nan'), float('inf'), 'ten', None])
    def test_invalid_threshold_rejected(self, session, value):
        with pytest.raises(ValueError):
            session.set_materiality_threshold(value)

        assert session.thresholds.materiality_threshold == 10.0

    def test_inverted_thresholds_accepted(self, session):
        session.update_thresholds(ThresholdConfig(materiality_threshold=30, significant_threshold=15))

        assert session.records[0].flag == VarianceFlag.SIGNIFICANT
        assert session.thresholds.is_inverted

    def test_records_property_is_a_copy(self, session):
        session.records.clear()
        assert len(session.records) == 3

    def test_notes_and_summary(self, session):
        session.set_note('1000', 'New customer deposits')

        summary = session.summary()

        assert session.notes == {'1000': 'New customer deposits'}
        assert summary.flagged_items == 2
        assert summary.explained_items == 1
        assert summary.explanation_completion == 50

    def test_blank_note_removes(self, session):
        session.set_note('1000', 'Explained')
        session.set_note('1000', '   ')

        assert session.notes == {}

    def test_toggle_follow_up(self, session):
        assert session.toggle_follow_up('1100') is True
        assert session.follow_ups == {'1100': True}
        assert session.toggle_follow_up('1100') is False

    def test_unknown_account_raises(self, session):
        with pytest.raises(KeyError):
            session.set_note('9999', 'x')
        with pytest.raises(KeyError):
            session.toggle_follow_up('9999')

    def test_reload_drops_stale_annotations(self, session):
        session.set_note('1000', 'Explained')
        session.set_note('2000', 'Within tolerance')
        session.toggle_follow_up('1100')

        session.load_rows([
            {'account_code': '2000', 'account_description': 'Payables',
             'current_year_balance': 1, 'prior_year_balance': 1},
        ])

        assert session.notes == {'2000': 'Within tolerance'}
        assert session.follow_ups == {}

    def test_load_empty(self, session):
        session.load([])

        assert session.is_empty
        assert session.notes == {}
