"""
Trial Balance Variance Analysis

Period-over-period variance analysis for audit engagements: derives variance
per ledger account and flags each account against materiality and
significance thresholds.
"""

__version__ = "1.0.0"
__author__ = "Your Organization"
