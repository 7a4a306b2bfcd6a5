"""
Unit Tests for Input Validator

Boundary validation happens before any calculator runs.
"""

from datetime import date
from decimal import Decimal

import pytest

from payout_engine.models import (
    AllocationMember,
    CalculatedPayout,
    Expense,
    ManualOverride,
    MemberAssignment,
    PayoutConfig,
    Show,
    ShowFinancials,
    ShowMember,
)
from payout_engine.validators import InputValidator


@pytest.fixture
def validator():
    return InputValidator()


def cancelled_show(**overrides) -> Show:
    values = dict(
        show_id="s1",
        title="Corporate Gala",
        total_amount=Decimal("100000"),
        show_date=date(2026, 5, 1),
        status="cancelled",
        is_paid=True,
        expenses=(Expense("Sound", Decimal("20000")),),
        refund_amount=Decimal("30000"),
    )
    values.update(overrides)
    return Show(**values)


class TestConfigValidation:

    def test_valid_percentage_config(self, validator):
        validator.validate_config(
            PayoutConfig(
                payment_type="percentage",
                normal_rate=Decimal("15"),
                referral_rate=Decimal("33"),
                has_min_logic=True,
                min_threshold=Decimal("100000"),
                min_flat_rate=Decimal("15000"),
            )
        )

    def test_invalid_payment_type(self, validator):
        with pytest.raises(ValueError, match="Invalid payment_type"):
            validator.validate_config(PayoutConfig(payment_type="manual", normal_rate=Decimal("10")))

    def test_percent_above_hundred(self, validator):
        with pytest.raises(ValueError, match="between 0 and 100"):
            validator.validate_config(PayoutConfig(payment_type="percentage", normal_rate=Decimal("500")))

    def test_referral_rate_checked(self, validator):
        with pytest.raises(ValueError, match="referral_rate"):
            validator.validate_config(
                PayoutConfig(payment_type="percentage", normal_rate=Decimal("15"), referral_rate=Decimal("-1"))
            )

    def test_fixed_rate_must_be_whole_rupees(self, validator):
        with pytest.raises(ValueError, match="whole Rupee"):
            validator.validate_config(PayoutConfig(payment_type="fixed", normal_rate=Decimal("1500.5")))

    def test_fixed_rate_above_hundred_is_fine(self, validator):
        validator.validate_config(PayoutConfig(payment_type="fixed", normal_rate=Decimal("15000")))

    def test_missing_normal_rate(self, validator):
        with pytest.raises(ValueError, match="normal_rate is required"):
            validator.validate_config(PayoutConfig(payment_type="percentage", normal_rate=None))


class TestMemberValidation:

    def test_blank_name_rejected(self, validator):
        assignment = MemberAssignment(name="  ", role="manager", basis=ManualOverride(Decimal("3000")))
        with pytest.raises(ValueError, match="name is required"):
            validator.validate_assignment(assignment)

    def test_invalid_role_rejected(self, validator):
        assignment = MemberAssignment(name="Hassan", role="roadie", basis=ManualOverride(Decimal("3000")))
        with pytest.raises(ValueError, match="Invalid role"):
            validator.validate_assignment(assignment)

    def test_negative_manual_amount_rejected(self, validator):
        assignment = MemberAssignment(name="Hassan", role="manager", basis=ManualOverride(Decimal("-1")))
        with pytest.raises(ValueError, match="cannot be negative"):
            validator.validate_assignment(assignment)

    def test_negative_expense_rejected(self, validator):
        financials = ShowFinancials(Decimal("100000"), (Expense("Refund", Decimal("-500")),))
        config = PayoutConfig(payment_type="fixed", normal_rate=Decimal("3000"))
        assignment = MemberAssignment(name="Hassan", role="manager", basis=CalculatedPayout(config))
        with pytest.raises(ValueError, match="expense amount"):
            validator.validate_members(financials, [assignment])



class TestFrozenMemberValidation:

    @staticmethod
    def frozen(**overrides) -> ShowMember:
        values = dict(
            name="Zain Shahid",
            role="session_player",
            payment_type="percentage",
            payment_value=Decimal("15"),
            is_referrer=False,
            calculated_amount=Decimal("13500"),
            referral_rate=Decimal("33"),
            has_min_logic=True,
            min_threshold=Decimal("100000"),
            min_flat_rate=Decimal("15000"),
        )
        values.update(overrides)
        return ShowMember(**values)

    def test_valid_snapshot(self, validator):
        validator.validate_frozen_member(self.frozen())

    def test_fractional_min_flat_rate_rejected(self, validator):
        with pytest.raises(ValueError, match="min_flat_rate must be a whole Rupee"):
            validator.validate_frozen_member(self.frozen(min_flat_rate=Decimal("15000.7")))

    def test_negative_min_threshold_rejected(self, validator):
        with pytest.raises(ValueError, match="min_threshold cannot be negative"):
            validator.validate_frozen_member(self.frozen(min_threshold=Decimal("-1")))

    def test_referral_rate_checked(self, validator):
        with pytest.raises(ValueError, match="referral_rate"):
            validator.validate_frozen_member(self.frozen(referral_rate=Decimal("120")))

    def test_manual_amount_must_be_whole(self, validator):
        member = self.frozen(
            payment_type="fixed",
            payment_value=Decimal("3000"),
            calculated_amount=Decimal("3000.5"),
            is_manual_override=True,
        )
        with pytest.raises(ValueError, match="calculated_amount"):
            validator.validate_frozen_member(member)


class TestCancellationValidation:

    def test_partial_refund_within_available(self, validator):
        show = cancelled_show(status="upcoming")
        validator.validate_cancellation(show, "partial", Decimal("80000"), Decimal("80000"))

    def test_partial_refund_over_available(self, validator):
        show = cancelled_show(status="upcoming")
        with pytest.raises(ValueError, match="exceeds amount available"):
            validator.validate_cancellation(show, "partial", Decimal("80001"), Decimal("80000"))

    def test_partial_refund_requires_amount(self, validator):
        show = cancelled_show(status="upcoming")
        with pytest.raises(ValueError, match="refund_amount is required"):
            validator.validate_cancellation(show, "partial", None, Decimal("80000"))

    def test_already_cancelled(self, validator):
        with pytest.raises(ValueError, match="already cancelled"):
            validator.validate_cancellation(cancelled_show(), "complete", None, Decimal("80000"))

    def test_unknown_refund_type(self, validator):
        show = cancelled_show(status="completed")
        with pytest.raises(ValueError, match="Invalid refund_type"):
            validator.validate_cancellation(show, "half", None, Decimal("80000"))

    def test_restore_requires_cancelled(self, validator):
        with pytest.raises(ValueError, match="not cancelled"):
            validator.validate_restore(cancelled_show(status="upcoming"))


class TestAllocationValidation:

    def test_requires_cancelled_show(self, validator):
        with pytest.raises(ValueError, match="not cancelled"):
            validator.validate_allocation(cancelled_show(status="completed"), Decimal("50000"), "equal", [], None)

    def test_requires_retained_funds(self, validator):
        with pytest.raises(ValueError, match="No retained funds"):
            validator.validate_allocation(cancelled_show(), Decimal("0"), "equal", [], None)

    def test_unknown_strategy(self, validator):
        with pytest.raises(ValueError, match="Invalid strategy"):
            validator.validate_allocation(cancelled_show(), Decimal("50000"), "lottery", [], None)

    def test_duplicate_members(self, validator):
        members = [AllocationMember("bm1", "Zain"), AllocationMember("bm1", "Zain")]
        with pytest.raises(ValueError, match="only be selected once"):
            validator.validate_allocation(cancelled_show(), Decimal("50000"), "equal", members, None)

    def test_negative_manual_amount(self, validator):
        members = [AllocationMember("bm1", "Zain")]
        with pytest.raises(ValueError, match="cannot be negative"):
            validator.validate_allocation(
                cancelled_show(), Decimal("50000"), "manual", members, {"bm1": Decimal("-10")}
            )
