"""
Calculators Package

Provides all calculation components for show payouts.
"""

from .allocation import RetainedFundsAllocator
from .earnings import EarningsSummarizer
from .payout import PayoutCalculator, compute_payout, round_rupees
from .reconciliation import ShowReconciler

__all__ = [
    "PayoutCalculator",
    "ShowReconciler",
    "RetainedFundsAllocator",
    "EarningsSummarizer",
    "compute_payout",
    "round_rupees",
]
