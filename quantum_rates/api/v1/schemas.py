"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

from quantum_rates.domain.models import RateTier, Simulation, TermUnit


class TierRequest(BaseModel):
    """Request body for POST /v1/tiers and PUT /v1/tiers/{id}

    Field rules are checked by the tier validator so the admin gets a typed
    error kind instead of a generic schema error.
    """

    amount_from: Optional[Decimal] = None
    amount_to: Optional[Decimal] = Field(None, description="Omit for an unbounded amount tier")
    term_from: Optional[int] = Field(None, description="Minimum term in days")
    term_to: Optional[int] = Field(None, description="Maximum term in days; omit for open-ended")
    rate: Optional[Decimal] = Field(None, description="Interest rate as a percentage")

    def to_domain(self) -> RateTier:
        return RateTier(
            amount_from=self.amount_from,
            amount_to=self.amount_to,
            term_from=self.term_from,
            term_to=self.term_to,
            rate=self.rate,
        )


class TierResponse(BaseModel):
    """Configured rate tier"""

    id: int
    amount_from: Decimal
    amount_to: Optional[Decimal] = None
    term_from: int
    term_to: Optional[int] = None
    rate: Decimal

    @classmethod
    def from_domain(cls, tier: RateTier) -> "TierResponse":
        return cls(
            id=tier.id,
            amount_from=tier.amount_from,
            amount_to=tier.amount_to,
            term_from=tier.term_from,
            term_to=tier.term_to,
            rate=tier.rate,
        )


class TierListResponse(BaseModel):
    tiers: List[TierResponse]


class GridResponse(BaseModel):
    """Response for GET /v1/tiers/grid"""

    row_labels: List[str]
    column_labels: List[str]
    cells: List[List[str]]


class SimulationRequest(BaseModel):
    """Request body for POST /v1/simulate"""

    capital: Optional[Decimal] = Field(None, description="Amount to invest")
    term: Optional[Decimal] = Field(None, description="Investment term in term_unit")
    term_unit: TermUnit = TermUnit.DAYS


class SimulationResponse(BaseModel):
    """Response for POST /v1/simulate"""

    simulation_id: Optional[str] = None
    tier_id: Optional[int]
    capital: Decimal
    term_days: int
    rate: Decimal
    net_interest: Decimal
    total_payout: Decimal

    @classmethod
    def from_domain(cls, simulation: Simulation, simulation_id: str | None = None) -> "SimulationResponse":
        return cls(
            simulation_id=simulation_id,
            tier_id=simulation.tier.id,
            capital=simulation.capital,
            term_days=simulation.term_days,
            rate=simulation.rate,
            net_interest=simulation.net_interest,
            total_payout=simulation.total_payout,
        )


class ErrorDetail(BaseModel):
    """Typed validation/resolution failure returned as HTTP 422 detail"""

    kind: str
    message: str


class HistoryItem(BaseModel):
    """Single simulation in history"""

    simulation_id: str
    capital: Decimal
    term_value: int
    term_unit: TermUnit
    term_days: int
    tier_id: Optional[int] = None
    rate: Decimal
    net_interest: Decimal
    total_payout: Decimal
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/simulations/history"""

    simulations: List[HistoryItem]
