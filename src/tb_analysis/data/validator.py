"""
Data validation for trial balance records.
"""

import logging
import math
from collections import Counter
from typing import List, Sequence

from tb_analysis.config.settings import Settings
from tb_analysis.data.models import ThresholdConfig, TrialBalanceRecord


class RecordValidator:
    """Trial balance record validator."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def validate(self, records: Sequence[TrialBalanceRecord], thresholds: ThresholdConfig) -> bool:
        """
        Validate records and thresholds before classification.

        Args:
            records: Ingested records
            thresholds: Threshold pair that will be applied

        Returns:
            True if validation passes, False otherwise
        """
        self.logger.info("Starting data validation")

        if not records:
            self.logger.info("No records to validate")
            return True

        validation_results = [
            self._validate_numeric_data(records),
            self._validate_account_codes(records),
            self._validate_descriptions(records),
            self._validate_thresholds(thresholds),
        ]

        all_passed = all(validation_results)

        if all_passed:
            self.logger.info("Data validation passed")
        else:
            self.logger.error("Data validation failed")

        return all_passed

    def _validate_numeric_data(self, records: Sequence[TrialBalanceRecord]) -> bool:
        """Derived values must be finite; huge balances are only reported."""
        passed = True
        limit = self.settings.large_balance_limit

        for record in records:
            values = [record.current_year_balance, record.prior_year_balance,
                      record.variance, record.variance_percentage]
            if not all(math.isfinite(v) for v in values):
                self.logger.error(f"Account {record.account_code} has non-finite values")
                passed = False
                continue

            if abs(record.current_year_balance) > limit or abs(record.prior_year_balance) > limit:
                self.logger.warning(f"Account {record.account_code} has an extremely large balance")

        return passed

    def _validate_account_codes(self, records: Sequence[TrialBalanceRecord]) -> bool:
        """Account codes should be unique within one run."""
        duplicates = self.find_duplicate_codes(records)
        if duplicates:
            self.logger.warning(f"{len(duplicates)} duplicate account codes: {duplicates[:5]}")
        return True

    def _validate_descriptions(self, records: Sequence[TrialBalanceRecord]) -> bool:
        empty = sum(1 for r in records if not r.account_description.strip())
        if empty:
            self.logger.warning(f"{empty} accounts have no description")
        return True

    def _validate_thresholds(self, thresholds: ThresholdConfig) -> bool:
        if thresholds.is_inverted:
            self.logger.warning(
                f"Significant threshold {thresholds.significant_threshold}% is below "
                f"materiality threshold {thresholds.materiality_threshold}%"
            )
        return True

    @staticmethod
    def find_duplicate_codes(records: Sequence[TrialBalanceRecord]) -> List[str]:
        counts = Counter(r.account_code for r in records)
        return [code for code, count in counts.items() if count > 1]
