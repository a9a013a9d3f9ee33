"""/v1/tiers - investment rate tier administration and grid view"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from quantum_rates.api.v1.schemas import GridResponse, TierListResponse, TierRequest, TierResponse
from quantum_rates.api.dependencies import get_request_id, get_tier_store
from quantum_rates.domain.exceptions import RepositoryError, TierNotFoundError, TierValidationError
from quantum_rates.domain.rate_resolver import RateResolver
from quantum_rates.domain.tier_store import TierStore
from quantum_rates.infrastructure.observability.logging import log_tier_change
from quantum_rates.infrastructure.observability.metrics import record_tier_mutation

router = APIRouter()


def _validation_failed(e: TierValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"kind": e.kind.value, "message": e.message})


def _repository_unavailable(e: RepositoryError, request_id: str) -> HTTPException:
    logging.error(f"Rate tier repository error: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=503, detail="Rate tier service unavailable")


@router.get("/tiers", response_model=TierListResponse)
async def list_tiers(request: Request, store: TierStore = Depends(get_tier_store)):
    """Reload the tier table from the repository and return it in display order"""
    try:
        tiers = await store.refresh()
    except RepositoryError as e:
        raise _repository_unavailable(e, get_request_id(request))
    return TierListResponse(tiers=[TierResponse.from_domain(t) for t in tiers])


@router.get("/tiers/grid", response_model=GridResponse)
async def get_grid(request: Request, store: TierStore = Depends(get_tier_store)):
    """
    Rates cross-tabulated by term range (rows) and amount range (columns).

    Cells without an exactly matching tier show a placeholder.
    """
    try:
        tiers = await store.refresh()
    except RepositoryError as e:
        raise _repository_unavailable(e, get_request_id(request))

    grid = RateResolver(tiers).grid()
    return GridResponse(
        row_labels=grid.row_labels,
        column_labels=grid.column_labels,
        cells=grid.as_text_rows(),
    )


@router.post("/tiers", response_model=TierResponse, status_code=201)
async def create_tier(body: TierRequest, request: Request, store: TierStore = Depends(get_tier_store)):
    request_id = get_request_id(request)
    try:
        await store.ensure_loaded()
        tier = await store.create(body.to_domain())
    except TierValidationError as e:
        record_tier_mutation("create", "invalid")
        logging.warning(f"Rejected rate tier: {e.message}", extra={"request_id": request_id, "kind": e.kind.value})
        raise _validation_failed(e)
    except RepositoryError as e:
        record_tier_mutation("create", "failed")
        raise _repository_unavailable(e, request_id)

    record_tier_mutation("create", "ok")
    log_tier_change(request_id, "create", tier.id)
    return TierResponse.from_domain(tier)


@router.put("/tiers/{tier_id}", response_model=TierResponse)
async def update_tier(
    tier_id: int,
    body: TierRequest,
    request: Request,
    store: TierStore = Depends(get_tier_store),
):
    request_id = get_request_id(request)
    try:
        await store.ensure_loaded()
        tier = await store.update(tier_id, body.to_domain())
    except TierNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TierValidationError as e:
        record_tier_mutation("update", "invalid")
        logging.warning(f"Rejected rate tier: {e.message}", extra={"request_id": request_id, "kind": e.kind.value})
        raise _validation_failed(e)
    except RepositoryError as e:
        record_tier_mutation("update", "failed")
        raise _repository_unavailable(e, request_id)

    record_tier_mutation("update", "ok")
    log_tier_change(request_id, "update", tier_id)
    return TierResponse.from_domain(tier)


@router.delete("/tiers/{tier_id}", status_code=204)
async def delete_tier(tier_id: int, request: Request, store: TierStore = Depends(get_tier_store)):
    request_id = get_request_id(request)
    try:
        await store.delete(tier_id)
    except RepositoryError as e:
        record_tier_mutation("delete", "failed")
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=f"Rate tier {tier_id} not found")
        raise _repository_unavailable(e, request_id)

    record_tier_mutation("delete", "ok")
    log_tier_change(request_id, "delete", tier_id)
    return Response(status_code=204)
