"""Rate tier set - validation and CRUD staging for the investment configuration"""

import asyncio
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Protocol

from quantum_rates.config import settings
from quantum_rates.domain.exceptions import TierNotFoundError, TierValidationError, TierValidationKind
from quantum_rates.domain.models import RateTier
from quantum_rates.domain.ranges import bounds_equal, ranges_intersect, ranges_touch_or_intersect
from quantum_rates.utils.money import is_number


class TierRepository(Protocol):
    """Persistence collaborator for rate tiers (see RateTierClient)"""

    async def list_tiers(self) -> List[RateTier]: ...

    async def create_tier(self, tier: RateTier) -> RateTier: ...

    async def update_tier(self, tier_id: int, tier: RateTier) -> None: ...

    async def delete_tier(self, tier_id: int) -> None: ...


def display_order(tier: RateTier) -> tuple:
    return (tier.term_from, tier.amount_from)


class TierStore:
    """
    In-memory authoritative list of rate tiers.

    Every mutation is validated against the current set and then persisted
    through the repository; the local set only changes after the repository
    call succeeds. Validate+mutate runs under one lock so concurrent callers
    cannot both pass validation against the same snapshot.
    """

    def __init__(self, repository: TierRepository, amount_tolerance: Decimal | None = None):
        self.repository = repository
        self.amount_tolerance = amount_tolerance if amount_tolerance is not None else settings.amount_tolerance
        self.loaded = False
        self._tiers: List[RateTier] = []
        self._lock = asyncio.Lock()

    def list_tiers(self) -> List[RateTier]:
        """Current tiers ordered by term_from, then amount_from"""
        return sorted(self._tiers, key=display_order)

    def get(self, tier_id: int) -> Optional[RateTier]:
        return next((t for t in self._tiers if t.id == tier_id), None)

    async def refresh(self) -> List[RateTier]:
        """Replace the local set with the repository's"""
        async with self._lock:
            self._tiers = await self.repository.list_tiers()
            self.loaded = True
        return self.list_tiers()

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.refresh()

    async def _load_unlocked(self) -> None:
        """First load for mutations; caller holds the lock"""
        if not self.loaded:
            self._tiers = await self.repository.list_tiers()
            self.loaded = True

    def validate(self, candidate: RateTier, exclude_id: int | None = None) -> Optional[TierValidationError]:
        """
        Check a proposed tier against field rules and the configured set.

        Returns the first failing reason, or None when the tier is acceptable.
        """
        for name in ("amount_from", "term_from", "rate"):
            if not is_number(getattr(candidate, name)):
                return TierValidationError(
                    TierValidationKind.MISSING_FIELD,
                    f"{name} is required and must be numeric",
                    field=name,
                )
        for name in ("amount_to", "term_to"):
            value = getattr(candidate, name)
            if value is not None and not is_number(value):
                return TierValidationError(
                    TierValidationKind.MISSING_FIELD,
                    f"{name} must be numeric when provided",
                    field=name,
                )

        for name in ("amount_from", "amount_to", "term_from", "term_to", "rate"):
            value = getattr(candidate, name)
            if value is not None and value < 0:
                return TierValidationError(
                    TierValidationKind.NEGATIVE_VALUE,
                    f"{name} cannot be negative",
                    field=name,
                )

        if candidate.rate == 0:
            return TierValidationError(TierValidationKind.ZERO_RATE, "Rate must be greater than zero", field="rate")

        if candidate.amount_to is not None and candidate.amount_from >= candidate.amount_to:
            return TierValidationError(
                TierValidationKind.INVERTED_RANGE,
                "Amount 'from' must be lower than amount 'to'",
                field="amount",
            )
        if candidate.term_to is not None and candidate.term_from >= candidate.term_to:
            return TierValidationError(
                TierValidationKind.INVERTED_RANGE,
                "Term 'from' must be lower than term 'to'",
                field="term",
            )

        others = [t for t in self._tiers if exclude_id is None or t.id != exclude_id]

        if candidate.amount_to is None:
            unbounded = next((t for t in others if t.amount_to is None), None)
            if unbounded is not None:
                return TierValidationError(
                    TierValidationKind.DUPLICATE_UNBOUNDED_AMOUNT,
                    "An unbounded-amount tier already exists",
                    field="amount_to",
                    conflicting_id=unbounded.id,
                )

        overlapping = [t for t in others if self._overlaps(candidate, t)]
        if overlapping:
            # An exact amount duplicate is the more useful message for the admin
            duplicate = next((t for t in overlapping if self._same_amount_bounds(candidate, t)), None)
            if duplicate is not None:
                return self._duplicate_error(duplicate)
            return TierValidationError(
                TierValidationKind.OVERLAPPING_TIER,
                "Tier overlaps an existing tier in both amount and term",
                conflicting_id=overlapping[0].id,
            )

        for tier in others:
            if self._same_amount_bounds(candidate, tier) and ranges_touch_or_intersect(
                candidate.term_from, candidate.term_to, tier.term_from, tier.term_to
            ):
                return self._duplicate_error(tier)

        return None

    async def create(self, candidate: RateTier) -> RateTier:
        """Validate, persist, and add a new tier. Raises TierValidationError or RepositoryError."""
        async with self._lock:
            await self._load_unlocked()
            error = self.validate(candidate)
            if error is not None:
                raise error
            created = await self.repository.create_tier(candidate)
            self._tiers.append(created)
        return created

    async def update(self, tier_id: int, candidate: RateTier) -> RateTier:
        """Validate against every other tier, persist, then reload the set"""
        async with self._lock:
            await self._load_unlocked()
            if self.get(tier_id) is None:
                raise TierNotFoundError(f"Rate tier {tier_id} not found")
            error = self.validate(candidate, exclude_id=tier_id)
            if error is not None:
                raise error
            await self.repository.update_tier(tier_id, candidate)
            self._tiers = await self.repository.list_tiers()
            self.loaded = True
        return self.get(tier_id) or replace(candidate, id=tier_id)

    async def delete(self, tier_id: int) -> None:
        async with self._lock:
            await self.repository.delete_tier(tier_id)
            self._tiers = [t for t in self._tiers if t.id != tier_id]

    @staticmethod
    def _overlaps(a: RateTier, b: RateTier) -> bool:
        return ranges_intersect(a.amount_from, a.amount_to, b.amount_from, b.amount_to) and ranges_intersect(
            a.term_from, a.term_to, b.term_from, b.term_to
        )

    def _same_amount_bounds(self, a: RateTier, b: RateTier) -> bool:
        return bounds_equal(a.amount_from, b.amount_from, self.amount_tolerance) and bounds_equal(
            a.amount_to, b.amount_to, self.amount_tolerance
        )

    @staticmethod
    def _duplicate_error(existing: RateTier) -> TierValidationError:
        return TierValidationError(
            TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND,
            "A tier with the same amount range already covers this term band",
            conflicting_id=existing.id,
        )
