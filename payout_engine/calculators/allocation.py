"""
Retained Funds Allocator

Distributes a cancelled show's retained amount across band members.
Every strategy is integer-exact: the Rupees handed out never exceed the
retained amount and rounding leftovers always land on a defined member.
"""

from decimal import ROUND_FLOOR, Decimal

from ..models import AllocationMember, RetainedFundAllocation
from .payout import round_rupees


class RetainedFundsAllocator:
    """Splits retained funds by assign, equal, weighted or manual strategy."""

    def allocate(
        self,
        retained_amount: Decimal,
        members: list[AllocationMember],
        strategy: str,
        manual_amounts: dict[str, Decimal] | None = None,
    ) -> list[RetainedFundAllocation]:
        if strategy == "assign":
            return self._assign(retained_amount, members)
        if strategy == "equal":
            return self._equal(retained_amount, members)
        if strategy == "weighted":
            return self._weighted(retained_amount, members)
        if strategy == "manual":
            return self._manual(retained_amount, members, manual_amounts or {})
        raise ValueError(f"Invalid allocation strategy: {strategy}")

    def _assign(self, retained: Decimal, members: list[AllocationMember]) -> list[RetainedFundAllocation]:
        """One member takes everything."""
        if len(members) != 1:
            raise ValueError(f"assign strategy needs exactly one member, got: {len(members)}")
        member = members[0]
        return [RetainedFundAllocation(member.band_member_id, member.member_name, retained)]

    def _equal(self, retained: Decimal, members: list[AllocationMember]) -> list[RetainedFundAllocation]:
        """
        Equal shares; the first member in selection order absorbs the remainder.

        10000 over 3 -> 3334, 3333, 3333
        """
        if not members:
            raise ValueError("equal strategy needs at least one member")

        count = len(members)
        base = (retained / count).to_integral_value(rounding=ROUND_FLOOR)
        remainder = retained - base * count

        result = []
        for i, member in enumerate(members):
            amount = base + remainder if i == 0 else base
            result.append(RetainedFundAllocation(member.band_member_id, member.member_name, amount))
        return result

    def _weighted(self, retained: Decimal, members: list[AllocationMember]) -> list[RetainedFundAllocation]:
        """
        Shares proportional to each member's normal rate.

        The rate is used as a plain weight whatever the payment type. Every
        member but the last is rounded; the last gets exactly what is left.
        """
        weights = [m.normal_rate or Decimal("0") for m in members]
        total_weight = sum(weights, Decimal("0"))

        if total_weight == 0:
            return self._equal(retained, members)

        result = []
        allocated = Decimal("0")
        last = len(members) - 1
        for i, (member, weight) in enumerate(zip(members, weights)):
            if i == last:
                amount = retained - allocated
            else:
                amount = round_rupees(weight / total_weight * retained)
            allocated += amount
            result.append(RetainedFundAllocation(member.band_member_id, member.member_name, amount))
        return result

    def _manual(
        self,
        retained: Decimal,
        members: list[AllocationMember],
        amounts: dict[str, Decimal],
    ) -> list[RetainedFundAllocation]:
        """Caller-chosen amounts, rejected (never clamped) when they exceed the retained amount."""
        result = [
            RetainedFundAllocation(m.band_member_id, m.member_name, amounts.get(m.band_member_id, Decimal("0")))
            for m in members
        ]
        total = sum((a.amount for a in result), Decimal("0"))
        if total > retained:
            raise ValueError(f"Total allocated (Rs {total}) exceeds retained amount (Rs {retained})")
        return result
