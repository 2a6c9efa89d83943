"""
Summary statistics, rankings and filters over classified records.
"""

from typing import Dict, List, Optional, Sequence

from tb_analysis.data.models import SummaryStats, TrialBalanceRecord, VarianceFlag


def calculate_summary_stats(records: Sequence[TrialBalanceRecord],
                            notes: Optional[Dict[str, str]] = None) -> SummaryStats:
    """
    Calculate the totals and flag counts for a record set.

    Explanation completion is the share of flagged accounts carrying a
    non-empty note, rounded to a whole percent.

    Args:
        records: Classified records
        notes: Explanations keyed by account code

    Returns:
        SummaryStats for the record set
    """
    notes = notes or {}

    flagged = [r for r in records if r.flag != VarianceFlag.NONE]
    explained = sum(1 for r in flagged if notes.get(r.account_code, '').strip())

    completion = round(explained / len(flagged) * 100) if flagged else 0

    return SummaryStats(
        total_accounts=len(records),
        total_current_year_balance=sum(r.current_year_balance for r in records),
        total_prior_year_balance=sum(r.prior_year_balance for r in records),
        total_variance=sum(r.variance for r in records),
        flagged_items=len(flagged),
        significant_items=sum(1 for r in flagged if r.flag == VarianceFlag.SIGNIFICANT),
        moderate_items=sum(1 for r in flagged if r.flag == VarianceFlag.MODERATE),
        explained_items=explained,
        explanation_completion=int(completion),
    )


def get_top_variances(records: Sequence[TrialBalanceRecord], n: int = 5,
                      by: str = 'amount') -> List[TrialBalanceRecord]:
    """
    Get top N variances by amount or percentage.

    Ranking by percentage skips accounts with a zero prior-year balance,
    whose percentage is only a placeholder.

    Args:
        records: Classified records
        n: Number of top results to return
        by: Sort by 'amount' or 'percent'

    Returns:
        Top N records, largest absolute value first
    """
    if by == 'amount':
        ranked = sorted(records, key=lambda r: abs(r.variance), reverse=True)
    elif by == 'percent':
        ranked = sorted(
            (r for r in records if r.prior_year_balance != 0),
            key=lambda r: abs(r.variance_percentage),
            reverse=True,
        )
    else:
        raise ValueError(f"Unknown ranking: {by!r} (expected 'amount' or 'percent')")

    return ranked[:n]


def filter_by_flag(records: Sequence[TrialBalanceRecord],
                   flag: VarianceFlag) -> List[TrialBalanceRecord]:
    """Filter records to a single flag."""
    return [r for r in records if r.flag == flag]


def get_flagged_records(records: Sequence[TrialBalanceRecord]) -> List[TrialBalanceRecord]:
    """Records flagged moderate or significant."""
    return [r for r in records if r.flag != VarianceFlag.NONE]


def search_records(records: Sequence[TrialBalanceRecord], term: str) -> List[TrialBalanceRecord]:
    """Case-insensitive match on account code or description."""
    needle = (term or '').strip().lower()
    if not needle:
        return list(records)
    return [
        r for r in records
        if needle in r.account_code.lower() or needle in r.account_description.lower()
    ]
