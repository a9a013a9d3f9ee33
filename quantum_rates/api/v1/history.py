"""GET /v1/simulations/history - Fetch recent simulations"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quantum_rates.api.v1.schemas import HistoryResponse, HistoryItem
from quantum_rates.infrastructure.database.session import get_db
from quantum_rates.infrastructure.database.repositories import SimulationRepository

router = APIRouter()


@router.get("/simulations/history", response_model=HistoryResponse)
def get_simulation_history(
    limit: int = Query(20, ge=1, le=100, description="Maximum number of simulations"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent investment simulations, newest first.
    """
    simulations = SimulationRepository(db).get_recent_simulations(limit=limit)

    history_items = [
        HistoryItem(
            simulation_id=str(s.id),
            capital=s.capital,
            term_value=s.term_value,
            term_unit=s.term_unit,
            term_days=s.term_days,
            tier_id=s.tier_id,
            rate=s.rate,
            net_interest=s.net_interest,
            total_payout=s.total_payout,
            created_at=s.created_at.isoformat(),
        )
        for s in simulations
    ]

    return HistoryResponse(simulations=history_items)
