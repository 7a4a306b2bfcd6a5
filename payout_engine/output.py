"""
Output Builder

Constructs the API responses from engine results.
"""

from decimal import Decimal

from .calculators.payout import uses_minimum_logic
from .models import (
    AdminEarnings,
    Cancellation,
    MemberEarnings,
    PayoutConfig,
    Reconciliation,
    RetainedFundAllocation,
    Show,
    ShowFinancials,
    ShowMember,
)


def to_rupees(value: Decimal) -> int:
    """Convert a whole-Rupee Decimal to int."""
    return int(value)


def to_number(value: Decimal | None) -> int | float | None:
    """Rates keep their fraction when they have one."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _fmt(value) -> str:
    """Format a number as a Rupee string for descriptions."""
    return f"Rs {value:,}"


def _pct(value: Decimal) -> str:
    return f"{to_number(value)}%"


def describe_policy(config: PayoutConfig) -> list[str]:
    """Plain-language explanation of a member's payout rule."""
    lines = []

    if config.payment_type == "fixed":
        lines.append(f"You receive a fixed payment of {_fmt(to_number(config.normal_rate))} per show.")
        lines.append("This amount remains the same regardless of the show's total amount or expenses.")
    elif config.payment_type == "percentage":
        rate = _pct(config.normal_rate)
        lines.append(
            f"You receive {rate} of the net amount (total show amount minus all expenses) for each show."
        )
        if config.referral_rate:
            lines.append(
                f"When you refer a show, your rate increases to {_pct(config.referral_rate)} "
                f"of the net amount instead of the standard {rate}."
            )
        if config.has_min_logic and config.min_threshold and config.min_flat_rate:
            lines.append(
                f"If the total show amount is below {_fmt(to_number(config.min_threshold))}, a minimum "
                f"payment logic applies: you receive a flat rate of {_fmt(to_number(config.min_flat_rate))}, "
                f"minus a deduction of {rate} of the show's total expenses."
            )

    return lines


class OutputBuilder:
    """Builds the final output responses."""

    def build_members(
        self,
        financials: ShowFinancials,
        members: list[ShowMember],
        reconciliation: Reconciliation,
    ) -> dict:
        """Response for saving (or previewing) a show's member list."""
        return {
            "members": [self.member_to_dict(m, financials) for m in members],
            "reconciliation": self._build_reconciliation(reconciliation),
        }

    def member_to_dict(self, member: ShowMember, financials: ShowFinancials) -> dict:
        return {
            "name": member.name,
            "role": member.role,
            "band_member_id": member.band_member_id,
            "payment_type": member.payment_type,
            "payment_value": to_number(member.payment_value),
            "is_referrer": member.is_referrer,
            "calculated_amount": to_rupees(member.calculated_amount),
            "referral_rate": to_number(member.referral_rate),
            "has_min_logic": member.has_min_logic,
            "min_threshold": to_number(member.min_threshold),
            "min_flat_rate": to_number(member.min_flat_rate),
            "is_manual_override": member.is_manual_override,
            "description": self._describe_member(member, financials),
        }

    def _describe_member(self, member: ShowMember, financials: ShowFinancials) -> str:
        amount = _fmt(to_rupees(member.calculated_amount))

        if member.is_manual_override:
            return f"Custom amount set by admin: {amount}"

        if member.payment_type == "fixed":
            return f"Fixed payment: {amount}, independent of show total and expenses"

        rate = _pct(member.payment_value)
        net = _fmt(to_rupees(financials.net_amount))

        if member.is_referrer:
            return f"Referral rate {rate} × net amount ({net}) = {amount}"

        if uses_minimum_logic(member.snapshot_config(), financials.total_amount):
            return (
                f"Show total ({_fmt(to_rupees(financials.total_amount))}) below minimum threshold "
                f"({_fmt(to_number(member.min_threshold))}): flat rate "
                f"({_fmt(to_number(member.min_flat_rate))}) - {rate} × expenses "
                f"({_fmt(to_rupees(financials.total_expenses))}) = {amount}"
            )

        return f"{rate} × net amount ({net}) = {amount}"

    def _build_reconciliation(self, rec: Reconciliation) -> dict:
        """Build reconciliation section with value and description for each field."""
        total = to_rupees(rec.total_amount)
        expenses = to_rupees(rec.total_expenses)
        net = to_rupees(rec.net_amount)
        payouts = to_rupees(rec.total_member_payouts)
        residual = to_rupees(rec.admin_residual)

        return {
            "total_amount": {
                "value": total,
                "description": "Gross contracted amount for the show",
            },
            "total_expenses": {
                "value": expenses,
                "description": "Sum of all show expenses",
            },
            "net_amount": {
                "value": net,
                "description": f"total ({_fmt(total)}) - expenses ({_fmt(expenses)}) = {_fmt(net)}",
            },
            "total_member_payouts": {
                "value": payouts,
                "description": "Sum of every member's calculated amount",
            },
            "admin_residual": {
                "value": residual,
                "description": (
                    f"net ({_fmt(net)}) - member payouts ({_fmt(payouts)}) = {_fmt(residual)}"
                    + (" (payouts exceed net amount)" if residual < 0 else "")
                ),
            },
        }

    def build_show(self, show: Show) -> dict:
        return {
            "show_id": show.show_id,
            "title": show.title,
            "status": show.status,
            "show_date": show.show_date.isoformat(),
            "total_amount": to_rupees(show.total_amount),
            "advance_payment": to_rupees(show.advance_payment),
            "is_paid": show.is_paid,
            "cancellation_reason": show.cancellation_reason,
            "refund_type": show.refund_type,
            "refund_amount": to_rupees(show.refund_amount),
        }

    def build_cancellation(self, show: Show, cancellation: Cancellation) -> dict:
        received = to_rupees(cancellation.funds_received)
        expenses = to_rupees(cancellation.total_expenses)
        available = to_rupees(cancellation.available_for_refund)
        refund = to_rupees(cancellation.refund_amount)
        retained = to_rupees(cancellation.retained_amount)

        return {
            "show": self.build_show(show),
            "status": show.status,
            "cancellation_reason": show.cancellation_reason,
            "refund_type": cancellation.refund_type,
            "refund_amount": refund,
            "calculations": {
                "funds_received": {
                    "value": received,
                    "description": "Full show amount (show was paid)" if show.is_paid else "Advance payment collected",
                },
                "available_for_refund": {
                    "value": available,
                    "description": f"max(0, received ({_fmt(received)}) - expenses ({_fmt(expenses)})) = {_fmt(available)}",
                },
                "refund_amount": {
                    "value": refund,
                    "description": f"{cancellation.refund_type.replace('_', ' ')} refund",
                },
                "retained_amount": {
                    "value": retained,
                    "description": f"available ({_fmt(available)}) - refund ({_fmt(refund)}) = {_fmt(retained)}",
                },
            },
        }

    def build_restore(self, show: Show) -> dict:
        return {"show": self.build_show(show), "status": show.status, "allocations_cleared": True}

    def build_allocation(
        self, retained_amount: Decimal, strategy: str, allocations: list[RetainedFundAllocation]
    ) -> dict:
        allocated = sum((a.amount for a in allocations), Decimal("0"))
        return {
            "strategy": strategy,
            "retained_amount": to_rupees(retained_amount),
            "allocations": [
                {
                    "band_member_id": a.band_member_id,
                    "member_name": a.member_name,
                    "amount": to_rupees(a.amount),
                }
                for a in allocations
            ],
            "total_allocated": to_rupees(allocated),
            "unallocated": to_rupees(retained_amount - allocated),
        }

    def build_admin_earnings(self, summary: AdminEarnings) -> dict:
        return {
            "shows_performed": summary.shows_performed,
            "total_revenue": to_rupees(summary.total_revenue),
            "total_expenses": to_rupees(summary.total_expenses),
            "revenue_after_expenses": to_rupees(summary.revenue_after_expenses),
            "total_member_payouts": to_rupees(summary.total_member_payouts),
            "founder_earnings_from_paid_shows": to_rupees(summary.founder_earnings_from_paid_shows),
            "founder_cancelled_earnings": to_rupees(summary.cancelled_unallocated),
            "founder_total_earnings": to_rupees(summary.founder_total_earnings),
            "cancelled_show_amount": to_rupees(summary.cancelled_show_amount),
            "cancelled_allocated": to_rupees(summary.cancelled_allocated),
            "cancelled_unallocated": to_rupees(summary.cancelled_unallocated),
            "upcoming_count": summary.upcoming_count,
            "pending_amount": to_rupees(summary.pending_amount),
            "no_advance_count": summary.no_advance_count,
        }

    def build_member_earnings(self, summary: MemberEarnings) -> dict:
        return {
            "member_name": summary.member_name,
            "shows_count": summary.shows_count,
            "show_earnings": to_rupees(summary.show_earnings),
            "paid_shows": summary.paid_shows,
            "unpaid_shows": summary.unpaid_shows,
            "unpaid_amount": to_rupees(summary.unpaid_amount),
            "retained_funds_earnings": to_rupees(summary.retained_funds_earnings),
            "retained_details": [
                {**d, "amount": to_rupees(d["amount"])} for d in summary.retained_details
            ],
            "total_earnings": to_rupees(summary.total_earnings),
        }
