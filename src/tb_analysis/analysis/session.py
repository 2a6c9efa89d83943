"""
Analysis session holding one uploaded trial balance and its thresholds.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from tb_analysis.analysis.summary import calculate_summary_stats
from tb_analysis.analysis.variance_engine import classify, ingest, reclassify_on_threshold_change
from tb_analysis.data.models import SummaryStats, ThresholdConfig, TrialBalanceRecord
from tb_analysis.utils.calculations import is_finite_number


class AnalysisSession:
    """
    Owns the records of one analysis run.

    Records are classified as soon as they are loaded and re-classified on
    every threshold change. Notes and follow-up marks are kept per account
    code and only for accounts present in the current record set.
    """

    def __init__(self, thresholds: Optional[ThresholdConfig] = None):
        self.logger = logging.getLogger(__name__)
        self._thresholds = self._checked(thresholds or ThresholdConfig())
        self._records: List[TrialBalanceRecord] = []
        self._notes: Dict[str, str] = {}
        self._follow_ups: Dict[str, bool] = {}

    @property
    def records(self) -> List[TrialBalanceRecord]:
        return list(self._records)

    @property
    def thresholds(self) -> ThresholdConfig:
        return replace(self._thresholds)

    @property
    def notes(self) -> Dict[str, str]:
        return dict(self._notes)

    @property
    def follow_ups(self) -> Dict[str, bool]:
        return dict(self._follow_ups)

    @property
    def is_empty(self) -> bool:
        return not self._records

    def load(self, records: Sequence[TrialBalanceRecord]) -> List[TrialBalanceRecord]:
        """Replace the held records and classify them."""
        self._records = classify(records, self._thresholds)

        codes = {r.account_code for r in self._records}
        self._notes = {k: v for k, v in self._notes.items() if k in codes}
        self._follow_ups = {k: v for k, v in self._follow_ups.items() if k in codes}

        if self.is_empty:
            self.logger.info("No trial balance data loaded")
        else:
            self.logger.info(f"Loaded {len(self._records)} records into analysis session")
        return self.records

    def load_rows(self, rows: Iterable[Mapping[str, Any]]) -> List[TrialBalanceRecord]:
        """Ingest parsed rows, then load them."""
        return self.load(ingest(rows))

    def set_materiality_threshold(self, value: float) -> List[TrialBalanceRecord]:
        return self.update_thresholds(replace(self._thresholds, materiality_threshold=value))

    def set_significant_threshold(self, value: float) -> List[TrialBalanceRecord]:
        return self.update_thresholds(replace(self._thresholds, significant_threshold=value))

    def update_thresholds(self, thresholds: ThresholdConfig) -> List[TrialBalanceRecord]:
        """Swap the threshold pair and re-classify the held records."""
        self._thresholds = self._checked(thresholds)
        self._records = reclassify_on_threshold_change(self._records, self._thresholds)
        return self.records

    def _checked(self, thresholds: ThresholdConfig) -> ThresholdConfig:
        for name in ('materiality_threshold', 'significant_threshold'):
            value = getattr(thresholds, name)
            if not is_finite_number(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")

        if thresholds.is_inverted:
            self.logger.warning(
                f"Significant threshold ({thresholds.significant_threshold}) is below "
                f"materiality threshold ({thresholds.materiality_threshold})"
            )
        return replace(thresholds)

    def set_note(self, account_code: str, note: str) -> None:
        """Attach an explanation to an account; a blank note removes it."""
        self._require_account(account_code)
        if note and note.strip():
            self._notes[account_code] = note
        else:
            self._notes.pop(account_code, None)

    def toggle_follow_up(self, account_code: str) -> bool:
        """Flip the follow-up mark of an account and return the new state."""
        self._require_account(account_code)
        state = not self._follow_ups.get(account_code, False)
        self._follow_ups[account_code] = state
        return state

    def summary(self) -> SummaryStats:
        return calculate_summary_stats(self._records, self._notes)

    def _require_account(self, account_code: str) -> None:
        if not any(r.account_code == account_code for r in self._records):
            raise KeyError(f"Unknown account code: {account_code}")
