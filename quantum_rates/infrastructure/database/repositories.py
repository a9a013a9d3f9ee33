"""Data access layer for simulation history"""

from typing import List
from sqlalchemy.orm import Session
from quantum_rates.infrastructure.database.models import InvestmentSimulation
from quantum_rates.domain.models import Simulation, SimulationQuery


class SimulationRepository:
    """Repository for resolved investment simulations"""

    def __init__(self, db: Session):
        self.db = db

    def create_simulation(
        self,
        query: SimulationQuery,
        simulation: Simulation,
        request_id: str | None = None,
    ) -> InvestmentSimulation:
        """Persist a simulation result"""
        db_simulation = InvestmentSimulation(
            request_id=request_id,
            capital=simulation.capital,
            term_value=int(query.term),
            term_unit=query.term_unit.value,
            term_days=simulation.term_days,
            tier_id=simulation.tier.id,
            rate=simulation.rate,
            net_interest=simulation.net_interest,
            total_payout=simulation.total_payout,
        )
        self.db.add(db_simulation)
        self.db.flush()  # Get ID without committing
        return db_simulation

    def get_recent_simulations(self, limit: int = 20) -> List[InvestmentSimulation]:
        """Fetch most recent simulations"""
        return (
            self.db.query(InvestmentSimulation)
            .order_by(InvestmentSimulation.created_at.desc())
            .limit(limit)
            .all()
        )
