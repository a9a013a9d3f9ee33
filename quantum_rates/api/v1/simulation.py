"""POST /v1/simulate - investment simulator endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from quantum_rates.api.v1.schemas import SimulationRequest, SimulationResponse
from quantum_rates.api.dependencies import get_request_id, get_tier_store
from quantum_rates.infrastructure.database.session import get_db
from quantum_rates.infrastructure.database.repositories import SimulationRepository
from quantum_rates.domain.models import SimulationQuery
from quantum_rates.domain.rate_resolver import RateResolver
from quantum_rates.domain.tier_store import TierStore
from quantum_rates.domain.exceptions import RepositoryError, ResolutionError
from quantum_rates.infrastructure.observability.metrics import record_simulation
from quantum_rates.infrastructure.observability.logging import log_simulation

router = APIRouter()


@router.post("/simulate", response_model=SimulationResponse)
async def simulate(
    request_body: SimulationRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: TierStore = Depends(get_tier_store),
):
    """
    Resolve an investment query to its rate tier and compute the payout.

    Flow:
    1. Reload the tier table from the repository
    2. Validate the query and convert months to days if needed
    3. Find the matching tier and compute net interest (2% tax)
    4. Persist the simulation to history
    5. Return the result
    """
    start_time = time.time()
    request_id = get_request_id(request)
    query = SimulationQuery(
        capital=request_body.capital,
        term=request_body.term,
        term_unit=request_body.term_unit,
    )

    try:
        # 1. Current tier table
        tiers = await store.refresh()

        # 2-3. Resolve
        simulation = RateResolver(tiers).resolve(query)

        # 4. Persist
        db_simulation = SimulationRepository(db).create_simulation(query, simulation, request_id=request_id)
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_simulation(True, simulation.term_days)
        log_simulation(
            request_id,
            simulation.capital,
            simulation.term_days,
            simulation.tier.id,
            simulation.net_interest,
            duration_ms,
        )

        return SimulationResponse.from_domain(simulation, simulation_id=str(db_simulation.id))

    except ResolutionError as e:
        db.rollback()
        record_simulation(False)
        logging.info(f"Simulation rejected: {e.message}", extra={"request_id": request_id, "kind": e.kind.value})
        raise HTTPException(status_code=422, detail={"kind": e.kind.value, "message": e.message})

    except RepositoryError as e:
        db.rollback()
        logging.error(f"Rate tier repository error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Rate tier service unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
