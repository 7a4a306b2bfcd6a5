"""
Show Processor - Main Orchestrator

Coordinates the payout pipeline through discrete, testable steps.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from .calculators import (
    EarningsSummarizer,
    PayoutCalculator,
    RetainedFundsAllocator,
    ShowReconciler,
)
from .models import (
    AllocationMember,
    Cancellation,
    MemberAssignment,
    PayoutConfig,
    Reconciliation,
    RetainedFundAllocation,
    Show,
    ShowFinancials,
    ShowMember,
    parse_date,
    to_decimal,
)
from .output import OutputBuilder, describe_policy
from .validators import InputValidator


def _group_by_show(rows: Dict[str, list], factory) -> dict:
    return {show_id: [factory(r) for r in items] for show_id, items in (rows or {}).items()}


def _today(data: Dict[str, Any]) -> date:
    """Time-derived facts come from the caller; default to the server's date."""
    return parse_date(data["today"]) if data.get("today") else date.today()


class ShowProcessor:
    """
    Main orchestrator for show payouts.

    Save show members:
    1. Validate input
    2. Calculate each member's payout (frozen snapshot)
    3. Reconcile net amount and admin residual
    4. Build output

    Cancel show:
    1. Validate status and refund
    2. Split refund / retained
    3. Build output

    Allocate retained funds:
    1. Derive retained amount from the cancelled show
    2. Validate request
    3. Allocate by strategy
    4. Build output
    """

    def __init__(self, floor_negative_payouts: bool = False):
        self.validator = InputValidator()
        self.payout_calculator = PayoutCalculator(floor_at_zero=floor_negative_payouts)
        self.reconciler = ShowReconciler()
        self.allocator = RetainedFundsAllocator()
        self.earnings_summarizer = EarningsSummarizer(self.reconciler)
        self.output_builder = OutputBuilder()

    # -------------------------------------------------------------------------
    # Typed pipeline
    # -------------------------------------------------------------------------

    def calculate_members(
        self, financials: ShowFinancials, assignments: list[MemberAssignment]
    ) -> tuple[list[ShowMember], Reconciliation]:
        self.validator.validate_members(financials, assignments)
        members = self.payout_calculator.calculate_all(assignments, financials)
        return members, self.reconciler.reconcile(financials, members)

    def recalculate_members(
        self, financials: ShowFinancials, members: list[ShowMember]
    ) -> tuple[list[ShowMember], Reconciliation]:
        self.validator.validate_financials(financials)
        for member in members:
            self.validator.validate_frozen_member(member)
        updated = [self.payout_calculator.recalculate(m, financials) for m in members]
        return updated, self.reconciler.reconcile(financials, updated)

    def cancel_show(
        self,
        show: Show,
        reason: str | None,
        refund_type: str,
        refund_amount: Decimal | None = None,
    ) -> tuple[Show, Cancellation]:
        available = self.reconciler.available_for_refund(show)
        self.validator.validate_cancellation(show, refund_type, refund_amount, available)
        return self.reconciler.cancel(show, reason, refund_type, refund_amount)

    def restore_show(self, show: Show, today: date) -> Show:
        self.validator.validate_restore(show)
        return self.reconciler.restore(show, today)

    def toggle_paid(self, show: Show) -> Show:
        self.validator.validate_show(show)
        return self.reconciler.toggle_paid(show)

    def allocate_retained(
        self,
        show: Show,
        strategy: str,
        members: list[AllocationMember],
        manual_amounts: dict[str, Decimal] | None = None,
    ) -> tuple[Decimal, list[RetainedFundAllocation]]:
        retained = self.reconciler.retained_amount_for(show)
        self.validator.validate_allocation(show, retained, strategy, members, manual_amounts)
        return retained, self.allocator.allocate(retained, members, strategy, manual_amounts)

    # -------------------------------------------------------------------------
    # Dict in, dict out (API usage)
    # -------------------------------------------------------------------------

    def process_members_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        financials = ShowFinancials.from_dict(data["show"])
        assignments = [MemberAssignment.from_dict(m) for m in data.get("members", [])]
        members, reconciliation = self.calculate_members(financials, assignments)
        return self.output_builder.build_members(financials, members, reconciliation)

    def recalculate_members_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        financials = ShowFinancials.from_dict(data["show"])
        frozen = [ShowMember.from_dict(m) for m in data.get("members", [])]
        members, reconciliation = self.recalculate_members(financials, frozen)
        return self.output_builder.build_members(financials, members, reconciliation)

    def cancel_show_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        show = Show.from_dict(data["show"])
        show_after, cancellation = self.cancel_show(
            show,
            data.get("cancellation_reason"),
            data.get("refund_type", "non_refundable"),
            to_decimal(data.get("refund_amount")),
        )
        return self.output_builder.build_cancellation(show_after, cancellation)

    def restore_show_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        show = Show.from_dict(data["show"])
        return self.output_builder.build_restore(self.restore_show(show, _today(data)))

    def toggle_paid_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        show = Show.from_dict(data["show"])
        return {"show": self.output_builder.build_show(self.toggle_paid(show))}

    def allocate_retained_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        show = Show.from_dict(data["show"])
        strategy = data["strategy"]
        members = [AllocationMember.from_dict(m) for m in data.get("members", [])]
        manual_amounts = None
        if strategy == "manual":
            manual_amounts = {
                str(m["band_member_id"]): Decimal(str(m.get("amount", 0))) for m in data.get("members", [])
            }
        retained, allocations = self.allocate_retained(show, strategy, members, manual_amounts)
        return self.output_builder.build_allocation(retained, strategy, allocations)

    def summarize_admin_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        shows = [Show.from_dict(s) for s in data.get("shows", [])]
        for show in shows:
            self.validator.validate_show(show)
        summary = self.earnings_summarizer.summarize_admin(
            shows,
            _group_by_show(data.get("members_by_show"), ShowMember.from_dict),
            _group_by_show(data.get("allocations_by_show"), RetainedFundAllocation.from_dict),
            _today(data),
            parse_date(data["from"]) if data.get("from") else None,
            parse_date(data["to"]) if data.get("to") else None,
        )
        return self.output_builder.build_admin_earnings(summary)

    def summarize_member_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        shows = [Show.from_dict(s) for s in data.get("shows", [])]
        for show in shows:
            self.validator.validate_show(show)
        band_member_id = data.get("band_member_id")
        summary = self.earnings_summarizer.summarize_member(
            data["member_name"],
            str(band_member_id) if band_member_id is not None else None,
            shows,
            _group_by_show(data.get("members_by_show"), ShowMember.from_dict),
            _group_by_show(data.get("allocations_by_show"), RetainedFundAllocation.from_dict),
            _today(data),
        )
        return self.output_builder.build_member_earnings(summary)

    def describe_policy_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        config = PayoutConfig.from_dict(data["config"])
        self.validator.validate_config(config)
        return {"payment_type": config.payment_type, "policy": describe_policy(config)}

    OPERATIONS = {
        "calculate_payouts": process_members_from_dict,
        "recalculate_payouts": recalculate_members_from_dict,
        "cancel_show": cancel_show_from_dict,
        "restore_show": restore_show_from_dict,
        "toggle_paid": toggle_paid_from_dict,
        "allocate_retained": allocate_retained_from_dict,
        "admin_earnings": summarize_admin_from_dict,
        "member_earnings": summarize_member_from_dict,
        "describe_policy": describe_policy_from_dict,
    }

    def process_from_dict(self, operation: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run one operation on raw dictionary input.

        Convenience method for API usage.
        """
        handler = self.OPERATIONS.get(operation)
        if handler is None:
            raise ValueError(f"Unknown operation: {operation}")
        try:
            return handler(self, data)
        except InvalidOperation as e:
            raise ValueError(f"Invalid numeric value in input: {e}") from e


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_from_dict(operation: str, input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Process one operation from a Python dict and return a Python dict."""
    processor = ShowProcessor()
    return processor.process_from_dict(operation, input_data)


def process_from_json(operation: str, json_input: str) -> str:
    """
    Process one operation from a JSON string and return a JSON string.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = ShowProcessor()
        result = processor.process_from_dict(operation, input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
