"""
Demo user provisioning trigger.

Invokes the create-test-users function on demand, keeps the last
result, and turns it into a notice for the user.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from coop_backend.app.clients.base import BaseHTTPClient, service_headers
from coop_backend.app.core.config import settings
from coop_backend.app.schemas.provisioning import (
    ProvisioningCredentials, ProvisioningResponse, ProvisioningResultItem, ProvisioningSummary
)
from coop_backend.app.services.provisioning_summary import (
    FAILURE_NOTICE, DerivedProvisioningSummary, ProvisioningNotice, derive_provisioning_summary
)

logger = logging.getLogger(__name__)

FUNCTION_PATH = "create-test-users"


class ProvisioningInFlightError(RuntimeError):
    """A provisioning call is already running."""


class ProvisioningFailed(Exception):
    """Any failure while invoking the function; never shown to the user."""


class ProvisioningTrigger:
    """
    Button-like wrapper around the provisioning function.
    
    Usage:
        trigger = ProvisioningTrigger()
        notice = await trigger.run()
        for credentials in trigger.created_credentials:
            ...
    """
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        service_key: Optional[str] = None,
    ):
        self._http = BaseHTTPClient(
            base_url or settings.functions_base_url,
            http_client=http_client,
            headers=service_headers(service_key),
        )
        self.in_flight = False
        self.results: List[ProvisioningResultItem] = []
        self.summary: Optional[ProvisioningSummary] = None
        self.derived: Optional[DerivedProvisioningSummary] = None
        self.last_notice: Optional[ProvisioningNotice] = None
    
    @property
    def disabled(self) -> bool:
        return self.in_flight
    
    @property
    def created_credentials(self) -> List[ProvisioningCredentials]:
        return [item.credentials for item in self.results if item.credentials is not None]
    
    async def _invoke(self) -> ProvisioningResponse:
        try:
            async with self._http.client() as client:
                response = await client.post(self._http.url(FUNCTION_PATH), headers=self._http.headers)
        except httpx.HTTPError as exc:
            raise ProvisioningFailed(f"network error: {exc}") from exc
        
        if response.is_error:
            raise ProvisioningFailed(f"status {response.status_code}: {response.text}")
        
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProvisioningFailed("response is not JSON") from exc
        
        if not isinstance(payload, dict) or "error" in payload or payload.get("success") is not True:
            raise ProvisioningFailed(f"function reported failure: {payload!r}")
        
        try:
            return ProvisioningResponse.model_validate(payload)
        except ValidationError as exc:
            raise ProvisioningFailed(f"unexpected response shape: {exc}") from exc
    
    async def run(self) -> ProvisioningNotice:
        """
        Invoke the provisioning function once.
        
        Raises:
            ProvisioningInFlightError: a previous run has not finished
            
        Returns:
            The notice to show. Failures of any kind give the generic
            failure notice; the detail is only logged.
        """
        if self.in_flight:
            raise ProvisioningInFlightError("provisioning already in progress")
        
        self.in_flight = True
        try:
            outcome = await self._invoke()
        except ProvisioningFailed as exc:
            logger.error("Demo user provisioning failed: %s", exc)
            self.last_notice = FAILURE_NOTICE
            return self.last_notice
        finally:
            self.in_flight = False
        
        self.results = outcome.results
        self.summary = outcome.summary
        self.derived = derive_provisioning_summary(outcome.results, outcome.summary)
        self.last_notice = self.derived.notice
        return self.last_notice
