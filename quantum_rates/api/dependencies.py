"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from fastapi import Request
from quantum_rates.domain.tier_store import TierStore
from quantum_rates.infrastructure.clients.rate_tiers import RateTierClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_tier_client() -> RateTierClient:
    """Provide Rate Tier Repository client instance"""
    return RateTierClient()


@lru_cache
def get_tier_store() -> TierStore:
    """Process-wide tier store shared by admin and simulator endpoints"""
    return TierStore(get_rate_tier_client())
