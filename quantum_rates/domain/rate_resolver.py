"""Investment simulator engine - resolves (capital, term) to a rate tier and net interest"""

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from quantum_rates.config import settings
from quantum_rates.domain.exceptions import ResolutionError, ResolutionKind
from quantum_rates.domain.models import RateTier, Simulation, SimulationQuery, TermUnit, TierGrid
from quantum_rates.domain.ranges import amount_label, contains, term_label, upper_or_infinity
from quantum_rates.domain.tier_store import display_order
from quantum_rates.utils.money import format_currency, is_number, to_decimal

CENTS = Decimal("0.01")


class RateResolver:
    """Read-only view over a tier set for simulations and the rate grid"""

    def __init__(
        self,
        tiers: Sequence[RateTier],
        tax_rate: Decimal | None = None,
        day_count_basis: int | None = None,
        days_per_month: int | None = None,
        max_term_months: int | None = None,
    ):
        self.tiers: List[RateTier] = sorted(tiers, key=display_order)
        self.tax_rate = tax_rate if tax_rate is not None else settings.tax_rate
        self.day_count_basis = day_count_basis or settings.day_count_basis
        self.days_per_month = days_per_month or settings.days_per_month
        self.max_term_months = max_term_months or settings.max_term_months

    @property
    def min_available_term_days(self) -> Optional[int]:
        """Smallest term_from across tiers; anchors month to day conversion"""
        if not self.tiers:
            return None
        return min(t.term_from for t in self.tiers)

    def months_to_days(self, months) -> int:
        """
        Convert a month count to days.

        Month 1 maps to the minimum configured term; each further month adds
        ``days_per_month`` days. Months must be a whole number in
        ``[1, max_term_months]``.
        """
        minimum = self.min_available_term_days
        if minimum is None:
            raise ResolutionError(
                ResolutionKind.TERM_MINIMUM_UNKNOWN,
                "Rate tiers are not loaded yet; the minimum term is unknown",
            )
        value = to_decimal(months)
        if value is None or value != value.to_integral_value() or not 1 <= value <= self.max_term_months:
            raise ResolutionError(
                ResolutionKind.TERM_CONVERSION_OUT_OF_BOUNDS,
                f"Term in months must be a whole number between 1 and {self.max_term_months}",
            )
        return minimum + (int(value) - 1) * self.days_per_month

    def configured_amount_range(self) -> tuple[Decimal, Decimal]:
        """(lowest amount_from, highest amount_to); the upper end is Infinity if any tier is open"""
        return (
            min(t.amount_from for t in self.tiers),
            max(upper_or_infinity(t.amount_to) for t in self.tiers),
        )

    def find_tier(self, capital: Decimal, term_days: int) -> RateTier:
        """First tier (display order) whose amount and term ranges both contain the query"""
        for tier in self.tiers:
            if contains(tier.amount_from, tier.amount_to, capital) and contains(
                tier.term_from, tier.term_to, term_days
            ):
                return tier
        raise ResolutionError(
            ResolutionKind.NO_MATCHING_TIER,
            f"No rate is configured for {format_currency(capital)} over {term_days} days",
        )

    def compute_interest(self, capital: Decimal, rate: Decimal, term_days: int) -> Decimal:
        """
        Net interest after tax, rounded to cents once at the end.

        interest = capital * rate/100 * term_days/basis * (1 - tax_rate)

        The numerator is an exact product of decimals; the single division
        comes last so a true half cent is never rounded away beforehand.
        """
        numerator = Decimal(capital) * Decimal(rate) * Decimal(term_days) * (Decimal(1) - self.tax_rate)
        interest = numerator / (Decimal(100) * Decimal(self.day_count_basis))
        return interest.quantize(CENTS, rounding=ROUND_HALF_UP)

    def resolve(self, query: SimulationQuery) -> Simulation:
        """
        Validate the query, find its tier and compute the payout.

        Raises ResolutionError with the first failing reason.
        """
        if not is_number(query.capital) or query.capital <= 0:
            raise ResolutionError(ResolutionKind.MISSING_INPUT, "Capital is required and must be greater than zero")
        if not is_number(query.term) or query.term <= 0:
            raise ResolutionError(ResolutionKind.MISSING_INPUT, "Term is required and must be greater than zero")

        capital = to_decimal(query.capital)
        if not self.tiers:
            if query.term_unit == TermUnit.MONTHS:
                raise ResolutionError(
                    ResolutionKind.TERM_MINIMUM_UNKNOWN,
                    "Rate tiers are not loaded yet; the minimum term is unknown",
                )
            raise ResolutionError(ResolutionKind.NO_MATCHING_TIER, "No investment rates are configured")

        lowest, highest = self.configured_amount_range()
        if capital < lowest or capital > highest:
            if highest.is_infinite():
                message = f"Capital must be at least {format_currency(lowest)}"
            else:
                message = f"Capital must be between {format_currency(lowest)} and {format_currency(highest)}"
            raise ResolutionError(ResolutionKind.OUT_OF_CONFIGURED_RANGE, message)

        if query.term_unit == TermUnit.MONTHS:
            term_days = self.months_to_days(query.term)
        else:
            term = to_decimal(query.term)
            if term != term.to_integral_value():
                raise ResolutionError(ResolutionKind.MISSING_INPUT, "Term in days must be a whole number")
            term_days = int(term)

        tier = self.find_tier(capital, term_days)
        net_interest = self.compute_interest(capital, tier.rate, term_days)
        return Simulation(
            tier=tier,
            capital=capital,
            term_days=term_days,
            rate=tier.rate,
            net_interest=net_interest,
            total_payout=capital + net_interest,
        )

    def grid(self) -> TierGrid:
        """Rates by (term range, amount range); a cell needs an exact match on both ranges"""
        term_ranges = sorted(
            {(t.term_from, t.term_to) for t in self.tiers},
            key=lambda r: (r[0], upper_or_infinity(r[1])),
        )
        amount_ranges = sorted(
            {(t.amount_from, t.amount_to) for t in self.tiers},
            key=lambda r: (r[0], upper_or_infinity(r[1])),
        )
        rates = {((t.term_from, t.term_to), (t.amount_from, t.amount_to)): t.rate for t in self.tiers}

        return TierGrid(
            row_labels=[term_label(*r) for r in term_ranges],
            column_labels=[amount_label(*a) for a in amount_ranges],
            cells=[[rates.get((r, a)) for a in amount_ranges] for r in term_ranges],
        )
