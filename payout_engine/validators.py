"""
Input Validation for the Band Payout Engine

Validates request data before any calculation runs.
Raises ValueError with clear messages for any constraint violations.
The calculators themselves never validate.
"""

from decimal import Decimal

from .models import (
    ALLOCATION_STRATEGIES,
    MEMBER_ROLES,
    PAYMENT_TYPES,
    REFUND_TYPES,
    SHOW_STATUSES,
    AllocationMember,
    ManualOverride,
    MemberAssignment,
    PayoutConfig,
    Show,
    ShowFinancials,
    ShowMember,
)


def _check_rupees(name: str, value: Decimal | None) -> None:
    """Rupee amounts are non-negative whole numbers."""
    if value is None:
        return
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got: {value}")
    if value != value.to_integral_value():
        raise ValueError(f"{name} must be a whole Rupee amount, got: {value}")


def _check_percent(name: str, value: Decimal | None) -> None:
    if value is None:
        return
    if not (0 <= value <= 100):
        raise ValueError(f"{name} must be between 0 and 100, got: {value}")


class InputValidator:
    """Validates show, member, cancellation and allocation input."""

    def validate_financials(self, financials: ShowFinancials) -> None:
        _check_rupees("total_amount", financials.total_amount)
        for expense in financials.expenses:
            _check_rupees(f"expense amount ({expense.description or 'unnamed'})", expense.amount)

    def validate_show(self, show: Show) -> None:
        if show.status not in SHOW_STATUSES:
            raise ValueError(f"Invalid status: {show.status}. Must be one of {', '.join(SHOW_STATUSES)}")
        self.validate_financials(show.financials)
        _check_rupees("advance_payment", show.advance_payment)
        _check_rupees("refund_amount", show.refund_amount)

    def validate_config(self, config: PayoutConfig) -> None:
        if config.payment_type not in PAYMENT_TYPES:
            raise ValueError(f"Invalid payment_type: {config.payment_type}. Must be 'fixed' or 'percentage'")

        if config.normal_rate is None:
            raise ValueError("normal_rate is required")

        if config.payment_type == "fixed":
            _check_rupees("normal_rate", config.normal_rate)
            return

        _check_percent("normal_rate", config.normal_rate)
        _check_percent("referral_rate", config.referral_rate)
        _check_rupees("min_threshold", config.min_threshold)
        _check_rupees("min_flat_rate", config.min_flat_rate)

    def validate_assignment(self, assignment: MemberAssignment) -> None:
        if not assignment.name or not assignment.name.strip():
            raise ValueError("Member name is required")

        if assignment.role not in MEMBER_ROLES:
            raise ValueError(f"Invalid role: {assignment.role}. Must be one of {', '.join(MEMBER_ROLES)}")

        if isinstance(assignment.basis, ManualOverride):
            _check_rupees("manual_amount", assignment.basis.amount)
        else:
            self.validate_config(assignment.basis.config)

    def validate_members(self, financials: ShowFinancials, assignments: list[MemberAssignment]) -> None:
        """Validate a full 'save show members' request."""
        self.validate_financials(financials)
        for assignment in assignments:
            self.validate_assignment(assignment)

    def validate_frozen_member(self, member: ShowMember) -> None:
        if member.payment_type not in PAYMENT_TYPES:
            raise ValueError(f"Invalid payment_type: {member.payment_type}. Must be 'fixed' or 'percentage'")
        if member.payment_type == "fixed":
            _check_rupees("payment_value", member.payment_value)
        else:
            # payment_value already holds the referral rate for referrers
            self.validate_config(member.snapshot_config())
        if member.is_manual_override:
            _check_rupees("calculated_amount", member.calculated_amount)

    def validate_cancellation(
        self,
        show: Show,
        refund_type: str,
        refund_amount: Decimal | None,
        available_for_refund: Decimal,
    ) -> None:
        """Cancellation is only from upcoming/completed, and a partial refund must fit."""
        self.validate_show(show)

        if show.status == "cancelled":
            raise ValueError("Show is already cancelled")

        if refund_type not in REFUND_TYPES:
            raise ValueError(f"Invalid refund_type: {refund_type}. Must be one of {', '.join(REFUND_TYPES)}")

        if refund_type == "partial":
            if refund_amount is None:
                raise ValueError("refund_amount is required when refund_type='partial'")
            _check_rupees("refund_amount", refund_amount)
            if refund_amount > available_for_refund:
                raise ValueError(
                    f"refund_amount (Rs {refund_amount}) exceeds amount available for refund "
                    f"(Rs {available_for_refund})"
                )

    def validate_restore(self, show: Show) -> None:
        self.validate_show(show)
        if show.status != "cancelled":
            raise ValueError("Show is not cancelled")

    def validate_allocation(
        self,
        show: Show,
        retained_amount: Decimal,
        strategy: str,
        members: list[AllocationMember],
        manual_amounts: dict[str, Decimal] | None,
    ) -> None:
        self.validate_show(show)

        if show.status != "cancelled":
            raise ValueError("Show is not cancelled")

        if retained_amount <= 0:
            raise ValueError("No retained funds to allocate")

        if strategy not in ALLOCATION_STRATEGIES:
            raise ValueError(
                f"Invalid strategy: {strategy}. Must be one of {', '.join(ALLOCATION_STRATEGIES)}"
            )

        ids = [m.band_member_id for m in members]
        if len(ids) != len(set(ids)):
            raise ValueError("Each band member can only be selected once")

        for member in members:
            if member.normal_rate is not None and member.normal_rate < 0:
                raise ValueError(f"normal_rate cannot be negative for {member.member_name}")

        if strategy == "manual":
            for band_member_id, amount in (manual_amounts or {}).items():
                _check_rupees(f"allocation for {band_member_id}", amount)
