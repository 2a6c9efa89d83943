"""
Variance engine: derives per-account variances and flags them against thresholds.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Sequence

from tb_analysis.data.models import ThresholdConfig, TrialBalanceRecord, VarianceFlag
from tb_analysis.utils.calculations import (
    calculate_variance_amount, calculate_variance_percentage, parse_amount
)

logger = logging.getLogger(__name__)


def build_record(account_code: Any, account_description: Any,
                 current_year_balance: Any, prior_year_balance: Any) -> TrialBalanceRecord:
    """
    Create an unclassified record with its variance fields derived.

    Balances that are missing or not finite numbers are zero-filled.

    Args:
        account_code: Ledger account identifier
        account_description: Display label
        current_year_balance: Current year balance
        prior_year_balance: Prior year balance

    Returns:
        TrialBalanceRecord flagged NONE
    """
    current = parse_amount(current_year_balance)
    prior = parse_amount(prior_year_balance)
    if current is None or prior is None:
        logger.warning(f"Account {account_code}: unparseable balance treated as 0")

    current = current if current is not None else 0.0
    prior = prior if prior is not None else 0.0

    return TrialBalanceRecord(
        account_code=_as_text(account_code),
        account_description=_as_text(account_description),
        current_year_balance=current,
        prior_year_balance=prior,
        variance=calculate_variance_amount(current, prior),
        variance_percentage=calculate_variance_percentage(current, prior),
    )


def ingest(rows: Iterable[Mapping[str, Any]]) -> List[TrialBalanceRecord]:
    """
    Turn parsed rows into unclassified records, preserving order.

    Each row needs ``account_code``, ``account_description``,
    ``current_year_balance`` and ``prior_year_balance`` keys.
    """
    records = [
        build_record(
            row.get('account_code'),
            row.get('account_description'),
            row.get('current_year_balance'),
            row.get('prior_year_balance'),
        )
        for row in rows
    ]
    logger.info(f"Ingested {len(records)} trial balance records")
    return records


def classify_variance(variance_percentage: float, thresholds: ThresholdConfig) -> VarianceFlag:
    """
    Bucket a variance percentage.

    Thresholds are inclusive lower bounds and the significant bound is checked
    first, so an inverted configuration still yields exactly one bucket.
    A percentage that is not finite is always significant.
    """
    if not math.isfinite(variance_percentage):
        return VarianceFlag.SIGNIFICANT

    magnitude = abs(variance_percentage)
    if magnitude >= thresholds.significant_threshold:
        return VarianceFlag.SIGNIFICANT
    if magnitude >= thresholds.materiality_threshold:
        return VarianceFlag.MODERATE
    return VarianceFlag.NONE


def classify(records: Sequence[TrialBalanceRecord],
             thresholds: ThresholdConfig) -> List[TrialBalanceRecord]:
    """
    Flag every record against the thresholds.

    Args:
        records: Records with variance_percentage already derived
        thresholds: Materiality and significant thresholds

    Returns:
        New records in the same order with only ``flag`` replaced
    """
    classified = [
        replace(record, flag=classify_variance(record.variance_percentage, thresholds))
        for record in records
    ]
    logger.debug(
        f"Classified {len(classified)} records "
        f"(materiality={thresholds.materiality_threshold}, "
        f"significant={thresholds.significant_threshold})"
    )
    return classified


def reclassify_on_threshold_change(records: Sequence[TrialBalanceRecord],
                                   new_thresholds: ThresholdConfig) -> List[TrialBalanceRecord]:
    """Re-bucket already ingested records; variance fields are left untouched."""
    return classify(records, new_thresholds)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        # Codes read from spreadsheets often arrive as 1000.0
        if value.is_integer():
            return str(int(value))
    return str(value).strip()
