"""
Gateways to services outside this process.
"""

from mbs_estimate.gateways.mbs_api_client import (
    ApiClientError,
    MbsApiClient,
    get_api_client,
)

__all__ = [
    "ApiClientError",
    "MbsApiClient",
    "get_api_client",
]
