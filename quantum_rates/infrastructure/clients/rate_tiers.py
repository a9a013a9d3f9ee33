"""Rate Tier Repository HTTP client for the investment tier table"""

import httpx
from decimal import Decimal
from typing import Any, Dict, List
from quantum_rates.domain.models import RateTier
from quantum_rates.domain.exceptions import RepositoryError
from quantum_rates.infrastructure.observability.metrics import repository_failure_counter, repository_latency_histogram
from quantum_rates.config import settings
from quantum_rates.utils.money import to_decimal


def _whole_days(value: Any) -> int | None:
    """Term bound from the wire; fractional days are malformed data, not truncated"""
    days = to_decimal(value)
    if days is None:
        return None
    if not days.is_finite() or days != days.to_integral_value():
        raise ValueError(f"Term must be a whole number of days: {value!r}")
    return int(days)


def tier_from_record(record: Dict[str, Any]) -> RateTier:
    """
    Map a repository record onto a RateTier.

    The backend names term columns ``*_term_months`` but stores days.
    """
    term_from = _whole_days(record["min_term_months"])
    if term_from is None:
        raise ValueError("min_term_months is required")
    return RateTier(
        id=record["id"],
        amount_from=to_decimal(record["min_amount"]),
        amount_to=to_decimal(record.get("max_amount")),
        term_from=term_from,
        term_to=_whole_days(record.get("max_term_months")),
        rate=to_decimal(record["interest_rate"]),
    )


def _money(value: Decimal | None) -> str | None:
    """Amounts and rates travel as decimal strings so they never pass through float"""
    return None if value is None else str(value)


def create_payload(tier: RateTier) -> Dict[str, Any]:
    return {
        "min_amount": _money(tier.amount_from),
        "max_amount": _money(tier.amount_to),
        "min_term_months": tier.term_from,
        "max_term_months": tier.term_to,
        "interest_rate": _money(tier.rate),
    }


def update_payload(tier_id: int, tier: RateTier, legacy: bool) -> Dict[str, Any]:
    """PUT body; the current backend reads camelCase keys and the id from the body"""
    if not legacy:
        return {"id": tier_id, **create_payload(tier)}
    return {
        "id": tier_id,
        "minAmount": _money(tier.amount_from),
        "maxAmount": _money(tier.amount_to),
        "minTermMonths": tier.term_from,
        "maxTermMonths": tier.term_to,
        "interestRate": _money(tier.rate),
    }


class RateTierClient:
    """Client for the external investment rate tier API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        legacy_update_payload: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.rate_tier_api_base) + settings.rate_tier_path
        self.timeout = timeout or settings.http_timeout_seconds
        self.legacy_update_payload = (
            settings.legacy_update_payload if legacy_update_payload is None else legacy_update_payload
        )
        self.transport = transport

    async def _request(self, operation: str, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send one request and map every failure onto RepositoryError.

        No retries: the caller decides whether to try again.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with repository_latency_histogram.labels(operation=operation).time():
                    response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                repository_failure_counter.labels(operation=operation).inc()
                raise RepositoryError(f"Rate tier API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                repository_failure_counter.labels(operation=operation).inc()
                raise RepositoryError(
                    f"Rate tier API error: {e.response.status_code}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                repository_failure_counter.labels(operation=operation).inc()
                raise RepositoryError(f"Rate tier API unreachable: {e}") from e

    async def list_tiers(self) -> List[RateTier]:
        """
        Fetch the full tier table.

        Raises:
            RepositoryError: On timeout, HTTP errors, or invalid response
        """
        response = await self._request("list", "GET", self.base_url)
        try:
            return [tier_from_record(record) for record in response.json()]
        except (KeyError, ValueError, TypeError) as e:
            raise RepositoryError(f"Invalid rate tier data: {e}") from e

    async def create_tier(self, tier: RateTier) -> RateTier:
        response = await self._request("create", "POST", self.base_url, json=create_payload(tier))
        try:
            return tier_from_record(response.json())
        except (KeyError, ValueError, TypeError) as e:
            raise RepositoryError(f"Invalid rate tier data: {e}") from e

    async def update_tier(self, tier_id: int, tier: RateTier) -> None:
        await self._request(
            "update",
            "PUT",
            self.base_url,
            json=update_payload(tier_id, tier, self.legacy_update_payload),
        )

    async def delete_tier(self, tier_id: int) -> None:
        await self._request("delete", "DELETE", f"{self.base_url}/{tier_id}")
