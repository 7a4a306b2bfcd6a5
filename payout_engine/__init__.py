"""
BAND PAYOUT ENGINE
Show payouts, reconciliation and retained-fund allocation
"""

from .models import MemberAssignment, PayoutConfig, Show, ShowFinancials, ShowMember
from .processor import ShowProcessor

__all__ = ['ShowProcessor', 'PayoutConfig', 'MemberAssignment', 'Show', 'ShowFinancials', 'ShowMember']
