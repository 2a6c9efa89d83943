"""
Data models for trial balance variance analysis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class VarianceFlag(Enum):
    """Severity classification of an account's variance."""
    NONE = "none"
    MODERATE = "moderate"        # at or above the materiality threshold
    SIGNIFICANT = "significant"  # at or above the significant threshold


@dataclass
class ThresholdConfig:
    """Percentage thresholds used to flag variances."""
    materiality_threshold: float = 10.0
    significant_threshold: float = 25.0

    @property
    def is_inverted(self) -> bool:
        """True when the significant bound sits below the materiality bound."""
        return self.significant_threshold < self.materiality_threshold


@dataclass
class TrialBalanceRecord:
    """One ledger account of a trial balance with its derived variance."""
    account_code: str
    account_description: str
    current_year_balance: float
    prior_year_balance: float
    variance: float
    variance_percentage: float
    flag: VarianceFlag = VarianceFlag.NONE

    def to_dict(self) -> Dict[str, object]:
        return {
            'account_code': self.account_code,
            'account_description': self.account_description,
            'current_year_balance': self.current_year_balance,
            'prior_year_balance': self.prior_year_balance,
            'variance': self.variance,
            'variance_percentage': self.variance_percentage,
            'flag': self.flag.value,
        }


@dataclass
class ColumnMapping:
    """Source column names for the four trial balance fields."""
    account_code: Optional[str] = None
    account_description: Optional[str] = None
    current_year_balance: Optional[str] = None
    prior_year_balance: Optional[str] = None

    def is_complete(self) -> bool:
        return all([
            self.account_code,
            self.account_description,
            self.current_year_balance,
            self.prior_year_balance,
        ])

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            'account_code': self.account_code,
            'account_description': self.account_description,
            'current_year_balance': self.current_year_balance,
            'prior_year_balance': self.prior_year_balance,
        }


@dataclass
class SummaryStats:
    """Aggregate figures shown above the analysis table and in exports."""
    total_accounts: int = 0
    total_current_year_balance: float = 0.0
    total_prior_year_balance: float = 0.0
    total_variance: float = 0.0
    flagged_items: int = 0
    significant_items: int = 0
    moderate_items: int = 0
    explained_items: int = 0
    explanation_completion: int = 0
