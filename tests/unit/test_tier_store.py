"""Unit tests for tier validation and CRUD staging"""

import pytest
from dataclasses import replace
from decimal import Decimal
from quantum_rates.domain.exceptions import (
    RepositoryError,
    TierNotFoundError,
    TierValidationError,
    TierValidationKind,
)
from quantum_rates.domain.models import RateTier
from quantum_rates.domain.ranges import ranges_intersect
from quantum_rates.domain.tier_store import TierStore


def tier(amount_from, amount_to, term_from, term_to, rate="5", tier_id=None) -> RateTier:
    return RateTier(
        id=tier_id,
        amount_from=Decimal(str(amount_from)) if amount_from is not None else None,
        amount_to=Decimal(str(amount_to)) if amount_to is not None else None,
        term_from=term_from,
        term_to=term_to,
        rate=Decimal(str(rate)) if rate is not None else None,
    )


async def test_list_tiers_sorted_by_term_then_amount(fake_repository):
    fake_repository.records[3] = tier(0, 1000, 5, 29, tier_id=3)
    store = TierStore(fake_repository)
    await store.refresh()

    assert [t.id for t in store.list_tiers()] == [3, 1, 2]


def test_list_tiers_empty_before_load(fake_repository):
    store = TierStore(fake_repository)
    assert store.list_tiers() == []
    assert store.loaded is False


async def test_validate_missing_field(store):
    error = store.validate(tier(None, 1000, 90, 180))
    assert error.kind == TierValidationKind.MISSING_FIELD
    assert error.field == "amount_from"

    error = store.validate(RateTier(amount_from=Decimal("0"), amount_to=None, term_from=90, term_to=None, rate="abc"))
    assert error.kind == TierValidationKind.MISSING_FIELD
    assert error.field == "rate"


async def test_validate_negative_value(store):
    error = store.validate(tier(-1, 1000, 90, 180))
    assert error.kind == TierValidationKind.NEGATIVE_VALUE


async def test_validate_zero_rate(store):
    error = store.validate(tier(0, 1000, 90, 180, rate="0"))
    assert error.kind == TierValidationKind.ZERO_RATE


async def test_validate_inverted_ranges(store):
    error = store.validate(tier(1000, 500, 90, 180))
    assert error.kind == TierValidationKind.INVERTED_RANGE
    assert error.field == "amount"

    error = store.validate(tier(0, 1000, 180, 90))
    assert error.kind == TierValidationKind.INVERTED_RANGE
    assert error.field == "term"

    # Equal bounds are inverted too
    assert store.validate(tier(0, 1000, 90, 90)).kind == TierValidationKind.INVERTED_RANGE


async def test_validate_second_unbounded_amount_tier_rejected(store):
    error = store.validate(tier(5000, None, 90, 180))
    assert error.kind == TierValidationKind.DUPLICATE_UNBOUNDED_AMOUNT
    assert error.conflicting_id == 2


async def test_validate_unbounded_amount_tier_can_be_updated_in_place(store):
    assert store.validate(tier(1000, None, 30, 89, rate="6.5"), exclude_id=2) is None


async def test_validate_overlap_requires_both_dimensions(store):
    """Amounts overlap but the term bands are disjoint: a legitimate grid cell"""
    assert store.validate(tier(500, 1500, 90, 180)) is None


async def test_validate_overlapping_tier(store):
    error = store.validate(tier(500, 1500, 60, 120))
    assert error.kind == TierValidationKind.OVERLAPPING_TIER
    assert error.conflicting_id == 1


async def test_validate_duplicate_amount_range_in_same_term_band(store):
    error = store.validate(tier(0, 1000, 60, 120))
    assert error.kind == TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND
    assert error.conflicting_id == 1


async def test_validate_duplicate_amount_range_touching_term_band(store):
    """Same amounts, term band starting on the existing tier's last day"""
    error = store.validate(tier(0, 1000, 89, 120))
    assert error.kind == TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND


async def test_validate_duplicate_amount_within_tolerance(store):
    error = store.validate(tier("0.0004", "1000.0009", 60, 120))
    assert error.kind == TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND


async def test_validate_same_amounts_next_term_band_accepted(store):
    assert store.validate(tier(0, 1000, 90, 179)) is None


async def test_multiple_open_ended_term_tiers_allowed(store):
    await store.create(tier(0, 1000, 90, None, rate="5.5"))
    created = await store.create(tier(1000, 5000, 90, None, rate="6.5"))

    assert created.id is not None
    assert len([t for t in store.list_tiers() if t.term_to is None]) == 2


async def test_create_round_trip(store, fake_repository):
    candidate = tier(0, 1000, 90, 179, rate="5.25")
    created = await store.create(candidate)

    assert created.id in fake_repository.records
    listed = next(t for t in store.list_tiers() if t.id == created.id)
    assert replace(listed, id=None) == candidate


async def test_create_rejected_leaves_store_unchanged(store, fake_repository):
    before = store.list_tiers()

    with pytest.raises(TierValidationError) as exc_info:
        await store.create(tier(0, 1000, 60, 120))

    assert exc_info.value.kind == TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND
    assert store.list_tiers() == before
    assert len(fake_repository.records) == 2


async def test_create_on_unloaded_store_validates_against_repository(fake_repository):
    """First mutation loads the configured set before checking for conflicts"""
    store = TierStore(fake_repository)

    with pytest.raises(TierValidationError) as exc_info:
        await store.create(tier(0, 1000, 30, 89, rate="9"))

    assert exc_info.value.kind == TierValidationKind.DUPLICATE_RANGE_SAME_TERM_BAND
    assert len(fake_repository.records) == 2
    assert store.loaded is True


async def test_update_on_unloaded_store_checks_existing_ids(fake_repository):
    store = TierStore(fake_repository)

    with pytest.raises(TierNotFoundError):
        await store.update(99, tier(0, 1000, 90, 179))

    updated = await store.update(1, tier(0, 1000, 30, 89, rate="5.5"))
    assert updated.rate == Decimal("5.5")


async def test_create_repository_failure_propagates(store, fake_repository):
    fake_repository.fail_with = RepositoryError("Rate tier API error: 500", status_code=500)

    with pytest.raises(RepositoryError):
        await store.create(tier(0, 1000, 90, 179))

    assert len(store.list_tiers()) == 2


async def test_update_preserves_id(store, fake_repository):
    updated = await store.update(1, tier(0, 1000, 30, 89, rate="5.5"))

    assert updated.id == 1
    assert updated.rate == Decimal("5.5")
    assert fake_repository.records[1].rate == Decimal("5.5")
    assert store.get(1).rate == Decimal("5.5")


async def test_update_validates_against_other_tiers(store):
    """Moving tier 2 down into tier 1's amount range conflicts"""
    with pytest.raises(TierValidationError) as exc_info:
        await store.update(2, tier(500, None, 30, 89, rate="6"))

    assert exc_info.value.kind == TierValidationKind.OVERLAPPING_TIER
    assert store.get(2).amount_from == Decimal("1000")


async def test_update_unknown_tier(store):
    with pytest.raises(TierNotFoundError):
        await store.update(99, tier(0, 1000, 90, 179))


async def test_delete(store, fake_repository):
    await store.delete(1)

    assert [t.id for t in store.list_tiers()] == [2]
    assert 1 not in fake_repository.records


async def test_delete_failure_keeps_tier(store, fake_repository):
    fake_repository.fail_with = RepositoryError("Rate tier API timeout after 5.0s")

    with pytest.raises(RepositoryError):
        await store.delete(1)

    assert store.get(1) is not None


async def test_accepted_tiers_never_overlap_in_both_dimensions(store):
    """Whatever the admin submits, no two stored tiers conflict"""
    candidates = [
        tier(0, 1000, 90, 179),
        tier(500, 2000, 100, 200),
        tier(1000, 5000, 90, 179),
        tier(0, 1000, 150, 400),
        tier(0, 1000, 180, 359),
        tier(1000, 5000, 180, None),
        tier(5000, 9000, 1, 29),
        tier(0, 5000, 1, 29),
        tier(0, 4999, 1, 29),
    ]
    for candidate in candidates:
        try:
            await store.create(candidate)
        except TierValidationError:
            pass

    tiers = store.list_tiers()
    for i, a in enumerate(tiers):
        for b in tiers[i + 1:]:
            assert not (
                ranges_intersect(a.amount_from, a.amount_to, b.amount_from, b.amount_to)
                and ranges_intersect(a.term_from, a.term_to, b.term_from, b.term_to)
            )
    assert sum(1 for t in tiers if t.amount_to is None) <= 1
