"""
Variance classification, session state and summaries for trial balances.
"""

from .variance_engine import classify, classify_variance, ingest, reclassify_on_threshold_change
from .session import AnalysisSession

__all__ = ['classify', 'classify_variance', 'ingest', 'reclassify_on_threshold_change', 'AnalysisSession']
