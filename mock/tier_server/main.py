from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pathlib import Path
import json
import os

# Optional seed file; same record shape the real backend returns
SEED_FILE = Path(os.environ.get("TIER_SEED_FILE", "/tier_stub/investment_tiers.json"))

CAMEL_KEYS = {
    "minAmount": "min_amount",
    "maxAmount": "max_amount",
    "minTermMonths": "min_term_months",
    "maxTermMonths": "max_term_months",
    "interestRate": "interest_rate",
}
FIELDS = list(CAMEL_KEYS.values())


def create_app(seed: list | None = None) -> FastAPI:
    app = FastAPI(title="Mock Investment Tier Server", version="1.0.0")
    if seed is None and SEED_FILE.exists():
        seed = json.loads(SEED_FILE.read_text())
    records = {r["id"]: dict(r) for r in seed or []}
    next_id = [max(records, default=0) + 1]

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.get("/investment-tiers")
    def list_tiers():
        return JSONResponse(content=list(records.values()))

    @app.post("/investment-tiers")
    async def create_tier(request: Request):
        body = await request.json()
        record = {"id": next_id[0], **{k: body.get(k) for k in FIELDS}}
        next_id[0] += 1
        records[record["id"]] = record
        return JSONResponse(content=record, status_code=201)

    @app.put("/investment-tiers")
    async def update_tier(request: Request):
        body = await request.json()
        tier_id = body.get("id")
        if tier_id not in records:
            raise HTTPException(status_code=404, detail="tier not found")
        # Accept both the camelCase body of the current backend and snake_case
        if "minAmount" in body:
            body = {snake: body.get(camel) for camel, snake in CAMEL_KEYS.items()}
        records[tier_id] = {"id": tier_id, **{k: body.get(k) for k in FIELDS}}
        return Response(status_code=204)

    @app.delete("/investment-tiers/{tier_id}")
    def delete_tier(tier_id: int):
        if records.pop(tier_id, None) is None:
            raise HTTPException(status_code=404, detail="tier not found")
        return Response(status_code=204)

    return app


app = create_app()
