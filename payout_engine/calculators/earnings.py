"""
Earnings Summarizer

Aggregates frozen payouts and retained-fund allocations across many shows
into admin (founder) and per-member totals.
"""

from datetime import date
from decimal import Decimal

from ..models import AdminEarnings, MemberEarnings, RetainedFundAllocation, Show, ShowMember
from .reconciliation import ShowReconciler


def _in_range(show: Show, date_from: date | None, date_to: date | None) -> bool:
    if date_from and show.show_date < date_from:
        return False
    if date_to and show.show_date > date_to:
        return False
    return True


def _payouts(members: list[ShowMember]) -> Decimal:
    return sum((m.calculated_amount for m in members), Decimal("0"))


class EarningsSummarizer:
    """Builds dashboard-level earnings figures."""

    def __init__(self, reconciler: ShowReconciler | None = None):
        self.reconciler = reconciler or ShowReconciler()

    def summarize_admin(
        self,
        shows: list[Show],
        members_by_show: dict[str, list[ShowMember]],
        allocations_by_show: dict[str, list[RetainedFundAllocation]],
        today: date,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> AdminEarnings:
        """
        Founder totals.

        Founder earnings come from two places:
        1. Paid shows already performed: revenue - expenses - member payouts
        2. Cancelled shows: retained funds not allocated to any member
        """
        active = [s for s in shows if s.status != "cancelled"]
        in_range = [s for s in active if _in_range(s, date_from, date_to)]
        cancelled = [s for s in shows if s.status == "cancelled" and _in_range(s, date_from, date_to)]

        summary = AdminEarnings()

        for show in in_range:
            payouts = _payouts(members_by_show.get(show.show_id, []))
            expenses = show.financials.total_expenses
            summary.total_revenue += show.total_amount
            summary.total_expenses += expenses
            summary.total_member_payouts += payouts

            if show.show_date <= today:
                summary.shows_performed += 1
                if show.is_paid:
                    summary.founder_earnings_from_paid_shows += show.total_amount - expenses - payouts

        summary.revenue_after_expenses = summary.total_revenue - summary.total_expenses

        # Upcoming and pending look at every active show, not just the date range
        summary.upcoming_count = sum(1 for s in active if s.show_date > today)
        summary.pending_amount = sum(
            (s.total_amount - s.advance_payment for s in active if not s.is_paid), Decimal("0")
        )
        summary.no_advance_count = sum(1 for s in active if s.show_date > today and s.advance_payment == 0)

        for show in cancelled:
            summary.cancelled_show_amount += self.reconciler.retained_amount_for(show)
            summary.cancelled_allocated += sum(
                (a.amount for a in allocations_by_show.get(show.show_id, [])), Decimal("0")
            )

        summary.cancelled_unallocated = max(
            Decimal("0"), summary.cancelled_show_amount - summary.cancelled_allocated
        )
        summary.founder_total_earnings = (
            summary.founder_earnings_from_paid_shows + summary.cancelled_unallocated
        )
        return summary

    def summarize_member(
        self,
        member_name: str,
        band_member_id: str | None,
        shows: list[Show],
        members_by_show: dict[str, list[ShowMember]],
        allocations_by_show: dict[str, list[RetainedFundAllocation]],
        today: date,
    ) -> MemberEarnings:
        """
        One member's totals.

        Show earnings are matched by name on non-cancelled shows; retained
        funds by band member id on cancelled shows.
        """
        summary = MemberEarnings(member_name=member_name)

        for show in shows:
            if show.status == "cancelled":
                if band_member_id is None:
                    continue
                for alloc in allocations_by_show.get(show.show_id, []):
                    if alloc.band_member_id == band_member_id:
                        summary.retained_funds_earnings += alloc.amount
                        summary.retained_details.append(
                            {"show_id": show.show_id, "show_title": show.title, "amount": alloc.amount}
                        )
                continue

            mine = [m for m in members_by_show.get(show.show_id, []) if m.name == member_name]
            if not mine:
                continue

            earning = _payouts(mine)
            summary.shows_count += 1
            summary.show_earnings += earning

            if show.show_date <= today:
                if show.is_paid:
                    summary.paid_shows += 1
                else:
                    summary.unpaid_shows += 1
                    summary.unpaid_amount += earning

        summary.total_earnings = summary.show_earnings + summary.retained_funds_earnings
        return summary
