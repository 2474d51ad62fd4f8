"""
Fleet summary provider.

Fetches the in-service fleet cards once and exposes them as a
loading / loaded / empty / failed state.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from coop_backend.app.clients.base import BaseHTTPClient, service_headers
from coop_backend.app.core.config import settings
from coop_backend.app.schemas.fleet import BusCardResponse, FleetSummaryResponse
from coop_backend.app.services.fleet_summary import FleetSummaryState

logger = logging.getLogger(__name__)

SUMMARY_PATH = "fleet/summary"


class FleetSummaryProvider:
    def __init__(
        self,
        base_url: str,
        access_token: str,
        http_client: Optional[httpx.AsyncClient] = None,
        limit: Optional[int] = None,
    ):
        self._http = BaseHTTPClient(
            base_url,
            http_client=http_client,
            headers=service_headers(access_token=access_token),
        )
        self.limit = settings.fleet_summary_limit if limit is None else limit
        self.state = FleetSummaryState.LOADING
        self.buses: List[BusCardResponse] = []
        self.message: Optional[str] = None
    
    @property
    def placeholder_count(self) -> int:
        """Skeleton cards to draw while loading."""
        return self.limit if self.state == FleetSummaryState.LOADING else 0
    
    async def load(self) -> FleetSummaryState:
        """
        Issue the single fleet read.
        
        Transport errors, error statuses and malformed bodies all end in
        FAILED so they are never confused with an empty fleet.
        """
        try:
            async with self._http.client() as client:
                response = await client.get(self._http.url(SUMMARY_PATH), headers=self._http.headers)
            response.raise_for_status()
            summary = FleetSummaryResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.error("Fleet summary load failed: %s", exc)
            self.state = FleetSummaryState.FAILED
            self.buses = []
            self.message = "Fleet data could not be loaded"
            return self.state
        
        self.buses = summary.buses[:self.limit]
        self.message = summary.message
        if summary.state == FleetSummaryState.FAILED:
            self.state = FleetSummaryState.FAILED
        elif self.buses:
            self.state = FleetSummaryState.LOADED
        else:
            self.state = FleetSummaryState.EMPTY
        return self.state
