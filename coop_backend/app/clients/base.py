"""
Shared plumbing for the caller-side HTTP clients.

The clients are what the dashboard does on mount or on a button press:
one request, result kept in local state. They send the service key the
same way the hosted functions expect it.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx

from coop_backend.app.core.config import settings


def service_headers(service_key: Optional[str] = None, access_token: Optional[str] = None) -> Dict[str, str]:
    key = settings.service_role_key if service_key is None else service_key
    headers = {"apikey": key, "x-client-info": "coop-backend"}
    bearer = access_token or key
    if bearer:
        headers["Authorization"] = f"Bearer {bearer}"
    return headers


class BaseHTTPClient:
    """
    Holds either an injected httpx.AsyncClient or the settings to open one.
    
    No timeout or retry is configured beyond httpx defaults.
    """
    
    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client
        self.headers = headers or {}
    
    @asynccontextmanager
    async def client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient() as client:
            yield client
    
    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
