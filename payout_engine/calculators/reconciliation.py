"""
Show Reconciler

Ties member payouts to the show's net amount and handles the money side of
cancelling, restoring and marking a show paid.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from ..models import Cancellation, Reconciliation, Show, ShowFinancials, ShowMember


class ShowReconciler:
    """Derives net amount, admin residual and refund/retained splits."""

    def reconcile(self, financials: ShowFinancials, members: list[ShowMember]) -> Reconciliation:
        """
        Split the show's net amount between members and the admin.

        total_amount = total_expenses + total_member_payouts + admin_residual
        holds by construction. The residual is whatever is left and can be
        negative when payouts are over-committed.
        """
        net = financials.net_amount
        payouts = sum((m.calculated_amount for m in members), Decimal("0"))

        return Reconciliation(
            total_amount=financials.total_amount,
            total_expenses=financials.total_expenses,
            net_amount=net,
            total_member_payouts=payouts,
            admin_residual=net - payouts,
        )

    @staticmethod
    def funds_received(show: Show) -> Decimal:
        """Only money actually collected is subject to refund accounting."""
        return show.total_amount if show.is_paid else show.advance_payment

    def available_for_refund(self, show: Show) -> Decimal:
        """Expenses come out first; nothing is left if they ate the advance."""
        return max(Decimal("0"), self.funds_received(show) - show.financials.total_expenses)

    def split_refund(self, show: Show, refund_type: str, refund_amount: Decimal | None = None) -> Cancellation:
        """
        Work out refund and retained amounts for a cancellation.

        - non_refundable: nothing goes back
        - complete: everything available goes back
        - partial: caller amount, already checked against what is available
        """
        available = self.available_for_refund(show)

        if refund_type == "complete":
            refund = available
        elif refund_type == "partial":
            refund = refund_amount if refund_amount is not None else Decimal("0")
        else:
            refund = Decimal("0")

        return Cancellation(
            funds_received=self.funds_received(show),
            total_expenses=show.financials.total_expenses,
            available_for_refund=available,
            refund_type=refund_type,
            refund_amount=refund,
            retained_amount=available - refund,
        )

    def cancel(
        self,
        show: Show,
        reason: str | None,
        refund_type: str,
        refund_amount: Decimal | None = None,
    ) -> tuple[Show, Cancellation]:
        """Move a show to cancelled and record its refund decision."""
        cancellation = self.split_refund(show, refund_type, refund_amount)
        cancelled = replace(
            show,
            status="cancelled",
            cancellation_reason=reason,
            refund_type=refund_type,
            refund_amount=cancellation.refund_amount,
        )
        return cancelled, cancellation

    def retained_amount_for(self, show: Show) -> Decimal:
        """Retained amount of an already cancelled show, from its stored refund."""
        return max(Decimal("0"), self.available_for_refund(show) - show.refund_amount)

    @staticmethod
    def restore(show: Show, today: date) -> Show:
        """
        Undo a cancellation.

        Status goes back to upcoming or completed depending on the show date.
        Refund fields are cleared; the caller must also drop the show's
        retained-fund allocations.
        """
        status = "upcoming" if show.show_date > today else "completed"
        return replace(
            show,
            status=status,
            cancellation_reason=None,
            refund_type=None,
            refund_amount=Decimal("0"),
        )

    @staticmethod
    def toggle_paid(show: Show) -> Show:
        """Flip the paid flag. A show paid with no advance records the full total as advance."""
        now_paid = not show.is_paid
        advance = show.advance_payment
        if now_paid and advance == 0:
            advance = show.total_amount
        return replace(show, is_paid=now_paid, advance_payment=advance)
