"""
Domain Models for the Band Payout Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values use Decimal and are whole Rupees; rates are percentages.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

PAYMENT_TYPES = ("fixed", "percentage")
MEMBER_ROLES = ("session_player", "manager", "other")
SHOW_STATUSES = ("upcoming", "completed", "cancelled")
REFUND_TYPES = ("non_refundable", "partial", "complete")
ALLOCATION_STRATEGIES = ("assign", "equal", "weighted", "manual")


def to_decimal(value) -> Decimal | None:
    """Convert a JSON number (or numeric string) to Decimal, keeping None."""
    if value is None:
        return None
    return Decimal(str(value))


def parse_date(value) -> date:
    """Accept an ISO date or datetime string and return the calendar date."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class PayoutConfig:
    """A member's payment policy snapshot (live config or a frozen copy)."""

    payment_type: str  # 'fixed' or 'percentage'
    normal_rate: Decimal | None  # Rs if fixed, percent if percentage
    referral_rate: Decimal | None = None
    has_min_logic: bool = False
    min_threshold: Decimal | None = None
    min_flat_rate: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PayoutConfig":
        return cls(
            payment_type=data["payment_type"],
            normal_rate=to_decimal(data.get("normal_rate")),
            referral_rate=to_decimal(data.get("referral_rate")),
            has_min_logic=data.get("has_min_logic", False),
            min_threshold=to_decimal(data.get("min_threshold")),
            min_flat_rate=to_decimal(data.get("min_flat_rate")),
        )


@dataclass(frozen=True)
class Expense:
    """A single show expense line."""

    description: str
    amount: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        return cls(description=data.get("description", ""), amount=Decimal(str(data["amount"])))


@dataclass(frozen=True)
class ShowFinancials:
    """Per-show facts at the time of calculation."""

    total_amount: Decimal
    expenses: tuple[Expense, ...] = ()

    @property
    def total_expenses(self) -> Decimal:
        return sum((e.amount for e in self.expenses), Decimal("0"))

    @property
    def net_amount(self) -> Decimal:
        """Total minus expenses. Not clamped: expenses may exceed the total."""
        return self.total_amount - self.total_expenses

    @classmethod
    def from_dict(cls, data: dict) -> "ShowFinancials":
        return cls(
            total_amount=Decimal(str(data["total_amount"])),
            expenses=tuple(Expense.from_dict(e) for e in data.get("expenses", [])),
        )


@dataclass(frozen=True)
class CalculatedPayout:
    """Payout derived from the member's configured payment rule."""

    config: PayoutConfig


@dataclass(frozen=True)
class ManualOverride:
    """Admin-entered custom amount replacing the calculated payout."""

    amount: Decimal


PayoutBasis = CalculatedPayout | ManualOverride


@dataclass(frozen=True)
class MemberAssignment:
    """A band member being assigned to a show."""

    name: str
    role: str
    basis: PayoutBasis
    is_referrer: bool = False
    band_member_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MemberAssignment":
        # A member row either carries a custom amount or a payment config
        if data.get("manual_amount") is not None:
            basis = ManualOverride(amount=Decimal(str(data["manual_amount"])))
        else:
            basis = CalculatedPayout(config=PayoutConfig.from_dict(data["config"]))
        return cls(
            name=data["name"],
            role=data.get("role", "session_player"),
            basis=basis,
            is_referrer=data.get("is_referrer", False),
            band_member_id=data.get("band_member_id"),
        )


@dataclass(frozen=True)
class ShowMember:
    """
    Persisted payout record for one member on one show.

    The payout config fields are copied at save time so the frozen
    calculated_amount stays stable when the member's live config changes.
    """

    name: str
    role: str
    payment_type: str
    payment_value: Decimal
    is_referrer: bool
    calculated_amount: Decimal
    referral_rate: Decimal | None = None
    has_min_logic: bool = False
    min_threshold: Decimal | None = None
    min_flat_rate: Decimal | None = None
    is_manual_override: bool = False
    band_member_id: str | None = None

    def snapshot_config(self) -> PayoutConfig:
        """Rebuild the payout config this row was frozen with."""
        return PayoutConfig(
            payment_type=self.payment_type,
            normal_rate=self.payment_value,
            referral_rate=self.referral_rate,
            has_min_logic=self.has_min_logic,
            min_threshold=self.min_threshold,
            min_flat_rate=self.min_flat_rate,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ShowMember":
        return cls(
            name=data["name"],
            role=data.get("role", "session_player"),
            payment_type=data["payment_type"],
            payment_value=Decimal(str(data["payment_value"])),
            is_referrer=data.get("is_referrer", False),
            calculated_amount=Decimal(str(data.get("calculated_amount", 0))),
            referral_rate=to_decimal(data.get("referral_rate")),
            has_min_logic=data.get("has_min_logic", False),
            min_threshold=to_decimal(data.get("min_threshold")),
            min_flat_rate=to_decimal(data.get("min_flat_rate")),
            is_manual_override=data.get("is_manual_override", False),
            band_member_id=data.get("band_member_id"),
        )


@dataclass(frozen=True)
class Show:
    """A show and the money facts the engine needs about it."""

    show_id: str
    title: str
    total_amount: Decimal
    show_date: date
    status: str = "upcoming"
    advance_payment: Decimal = Decimal("0")
    is_paid: bool = False
    expenses: tuple[Expense, ...] = ()
    cancellation_reason: str | None = None
    refund_type: str | None = None
    refund_amount: Decimal = Decimal("0")

    @property
    def financials(self) -> ShowFinancials:
        return ShowFinancials(total_amount=self.total_amount, expenses=self.expenses)

    @classmethod
    def from_dict(cls, data: dict) -> "Show":
        return cls(
            show_id=str(data.get("show_id", "")),
            title=data.get("title", "Untitled show"),
            total_amount=Decimal(str(data["total_amount"])),
            show_date=parse_date(data["show_date"]),
            status=data.get("status", "upcoming"),
            advance_payment=Decimal(str(data.get("advance_payment", 0))),
            is_paid=data.get("is_paid", False),
            expenses=tuple(Expense.from_dict(e) for e in data.get("expenses", [])),
            cancellation_reason=data.get("cancellation_reason"),
            refund_type=data.get("refund_type"),
            refund_amount=Decimal(str(data.get("refund_amount") or 0)),
        )


@dataclass(frozen=True)
class AllocationMember:
    """A band member selected to receive retained funds."""

    band_member_id: str
    member_name: str
    normal_rate: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AllocationMember":
        return cls(
            band_member_id=str(data["band_member_id"]),
            member_name=data.get("member_name", ""),
            normal_rate=to_decimal(data.get("normal_rate")),
        )


@dataclass(frozen=True)
class RetainedFundAllocation:
    """How much of a cancelled show's retained amount one member receives."""

    band_member_id: str
    member_name: str
    amount: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "RetainedFundAllocation":
        return cls(
            band_member_id=str(data["band_member_id"]),
            member_name=data.get("member_name", ""),
            amount=Decimal(str(data["amount"])),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class Reconciliation:
    """Net amount and admin residual for one show."""

    total_amount: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_amount: Decimal = Decimal("0")
    total_member_payouts: Decimal = Decimal("0")
    admin_residual: Decimal = Decimal("0")


@dataclass
class Cancellation:
    """Refund accounting for a cancelled show."""

    funds_received: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    available_for_refund: Decimal = Decimal("0")
    refund_type: str = "non_refundable"
    refund_amount: Decimal = Decimal("0")
    retained_amount: Decimal = Decimal("0")


@dataclass
class AdminEarnings:
    """Founder-level totals across shows."""

    shows_performed: int = 0
    total_revenue: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    revenue_after_expenses: Decimal = Decimal("0")
    total_member_payouts: Decimal = Decimal("0")
    founder_earnings_from_paid_shows: Decimal = Decimal("0")
    cancelled_show_amount: Decimal = Decimal("0")
    cancelled_allocated: Decimal = Decimal("0")
    cancelled_unallocated: Decimal = Decimal("0")
    founder_total_earnings: Decimal = Decimal("0")
    upcoming_count: int = 0
    pending_amount: Decimal = Decimal("0")
    no_advance_count: int = 0


@dataclass
class MemberEarnings:
    """One band member's totals across shows."""

    member_name: str
    shows_count: int = 0
    show_earnings: Decimal = Decimal("0")
    paid_shows: int = 0
    unpaid_shows: int = 0
    unpaid_amount: Decimal = Decimal("0")
    retained_funds_earnings: Decimal = Decimal("0")
    total_earnings: Decimal = Decimal("0")
    retained_details: list[dict] = field(default_factory=list)
