"""
HTTP client the fee estimate pages use to reach the API.

One call per user action; responses are parsed back into the service
schemas so the pages work with Decimal amounts.
"""

from decimal import Decimal
from typing import Any, Optional, Sequence

import httpx

from mbs_estimate.schemas.estimate import MultiItemEstimate, SingleItemEstimate
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)


class ApiClientError(Exception):
    """Raised when the API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MbsApiClient:
    """Synchronous client for the search and estimate endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MbsApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"API request failed: {method} {path}: {e}")
            raise ApiClientError(f"Could not reach the fee estimate API: {e}") from e

        if response.is_error:
            raise ApiClientError(_error_message(response), status_code=response.status_code)
        return response.json()

    def search(self, query: str) -> list[FeeScheduleRecord]:
        data = self._request("GET", "/api/search-mbs", params={"query": query})
        return [FeeScheduleRecord.model_validate(row) for row in data]

    def estimate_single(
        self,
        item_code: str,
        charged_fee: Decimal,
        assistant_gap_fee: Optional[Decimal] = None,
    ) -> SingleItemEstimate:
        payload = {
            "item_code": item_code,
            "charged_fee": str(charged_fee),
            "assistant_gap_fee": None if assistant_gap_fee is None else str(assistant_gap_fee),
        }
        data = self._request("POST", "/api/estimates/single", json=payload)
        return SingleItemEstimate.model_validate(data)

    def estimate_multiple(
        self,
        item_codes: Sequence[str],
        total_charged_fee: Decimal,
        assistant_gap_fee: Optional[Decimal] = None,
    ) -> MultiItemEstimate:
        payload = {
            "item_codes": list(item_codes),
            "total_charged_fee": str(total_charged_fee),
            "assistant_gap_fee": None if assistant_gap_fee is None else str(assistant_gap_fee),
        }
        data = self._request("POST", "/api/estimates/multiple", json=payload)
        return MultiItemEstimate.model_validate(data)


def _error_message(response: httpx.Response) -> str:
    """Pull the error detail out of an API error response."""
    try:
        body = response.json()
    except ValueError:
        return f"API request failed with status {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    # Request validation errors come back as a list of field errors
    if isinstance(detail, list) and detail:
        return "; ".join(str(err.get("msg", err)) for err in detail if isinstance(err, dict)) or str(detail)
    return f"API request failed with status {response.status_code}"


def get_api_client() -> MbsApiClient:
    """Client configured from application settings."""
    from mbs_estimate.api.config import settings

    return MbsApiClient(settings.API_BASE_URL, timeout=settings.API_TIMEOUT)
