"""
Payout Calculator

Calculates what a band member is owed for a show.
All percentage-derived amounts are rounded to whole Rupees, halves towards +infinity.
"""

from dataclasses import replace
from decimal import ROUND_FLOOR, Decimal

from ..models import (
    ManualOverride,
    MemberAssignment,
    PayoutConfig,
    ShowFinancials,
    ShowMember,
)

HUNDRED = Decimal("100")


def round_rupees(value: Decimal) -> Decimal:
    """Round to the nearest whole Rupee, halves upwards (-2.5 -> -2)."""
    return (value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)


def percent_of(rate: Decimal, amount: Decimal) -> Decimal:
    return round_rupees(amount * rate / HUNDRED)


def uses_minimum_logic(config: PayoutConfig, total_amount: Decimal) -> bool:
    """Minimum logic applies only when fully configured and the total is strictly below the threshold."""
    return (
        config.has_min_logic
        and config.min_threshold is not None
        and config.min_flat_rate is not None
        and total_amount < config.min_threshold
    )


def compute_payout(
    config: PayoutConfig,
    payment_value: Decimal,
    is_referrer: bool,
    total_amount: Decimal,
    net_amount: Decimal,
    total_expenses: Decimal,
    payment_type: str,
    floor_at_zero: bool = False,
) -> Decimal:
    """
    Compute a member's payout from an already-selected rate.

    Rules, in order:
    1. Fixed: payment_value as-is
    2. Referrer: payment_value % of net amount
    3. Minimum logic (total strictly below threshold):
       min_flat_rate - payment_value % of total expenses
    4. Standard: payment_value % of net amount

    payment_value must already hold the referral rate for referrers.
    """
    if payment_type == "fixed":
        return payment_value

    if is_referrer:
        return percent_of(payment_value, net_amount)

    if uses_minimum_logic(config, total_amount):
        amount = config.min_flat_rate - percent_of(payment_value, total_expenses)
        if floor_at_zero:
            return max(Decimal("0"), amount)
        return amount

    return percent_of(payment_value, net_amount)


class PayoutCalculator:
    """Calculates and freezes per-member payouts."""

    def __init__(self, floor_at_zero: bool = False):
        # When set, the minimum-logic result never goes below zero
        self.floor_at_zero = floor_at_zero

    @staticmethod
    def select_rate(config: PayoutConfig, is_referrer: bool) -> Decimal:
        """Referral rate for referrers on percentage pay, normal rate otherwise."""
        if config.payment_type == "percentage" and is_referrer and config.referral_rate is not None:
            return config.referral_rate
        return config.normal_rate if config.normal_rate is not None else Decimal("0")

    def calculate(self, assignment: MemberAssignment, financials: ShowFinancials) -> ShowMember:
        """Compute the member's payout and freeze it into a ShowMember record."""
        basis = assignment.basis

        if isinstance(basis, ManualOverride):
            return ShowMember(
                name=assignment.name,
                role=assignment.role,
                payment_type="fixed",
                payment_value=basis.amount,
                is_referrer=assignment.is_referrer,
                calculated_amount=basis.amount,
                is_manual_override=True,
                band_member_id=assignment.band_member_id,
            )

        config = basis.config
        rate = self.select_rate(config, assignment.is_referrer)
        amount = compute_payout(
            config,
            rate,
            assignment.is_referrer,
            financials.total_amount,
            financials.net_amount,
            financials.total_expenses,
            config.payment_type,
            floor_at_zero=self.floor_at_zero,
        )

        is_percentage = config.payment_type == "percentage"
        return ShowMember(
            name=assignment.name,
            role=assignment.role,
            payment_type=config.payment_type,
            payment_value=rate,
            is_referrer=assignment.is_referrer,
            calculated_amount=amount,
            referral_rate=config.referral_rate if is_percentage else None,
            has_min_logic=config.has_min_logic if is_percentage else False,
            min_threshold=config.min_threshold if is_percentage else None,
            min_flat_rate=config.min_flat_rate if is_percentage else None,
            band_member_id=assignment.band_member_id,
        )

    def calculate_all(
        self, assignments: list[MemberAssignment], financials: ShowFinancials
    ) -> list[ShowMember]:
        return [self.calculate(a, financials) for a in assignments]

    def recalculate(self, member: ShowMember, financials: ShowFinancials) -> ShowMember:
        """
        Recompute a frozen row against new show financials.

        Only the row's own snapshot is used, never the member's live config.
        Manual overrides keep their custom amount.
        """
        if member.is_manual_override:
            return member

        amount = compute_payout(
            member.snapshot_config(),
            member.payment_value,
            member.is_referrer,
            financials.total_amount,
            financials.net_amount,
            financials.total_expenses,
            member.payment_type,
            floor_at_zero=self.floor_at_zero,
        )
        return replace(member, calculated_amount=amount)
