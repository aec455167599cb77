"""Data-store reachability probe — async REST health call."""

from __future__ import annotations

import time

import httpx
from pydantic import BaseModel

from admin_core.logging.setup import get_logger

log = get_logger("datastore")


class DataStoreStatus(BaseModel):
    reachable: bool
    response_time_ms: float
    url: str
    version: str | None = None
    error: str | None = None


class DataStoreProbe:
    """Calls ``GET {base_url}/api/health`` on the backing data store.

    ``check`` never raises: transport errors and non-2xx responses come back
    as ``reachable=False`` with the error text.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8090",
        timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/api/health"

    async def check(self) -> DataStoreStatus:
        start = time.perf_counter()
        try:
            http = await self._get_http()
            resp = await http.get(self.health_url)
        except httpx.HTTPError as e:
            elapsed = (time.perf_counter() - start) * 1000
            log.warning("datastore_unreachable", url=self.health_url, error=str(e))
            return DataStoreStatus(
                reachable=False,
                response_time_ms=elapsed,
                url=self.base_url,
                error=str(e) or type(e).__name__,
            )

        elapsed = (time.perf_counter() - start) * 1000
        if not resp.is_success:
            error = f"HTTP {resp.status_code}: {resp.reason_phrase}"
            log.warning("datastore_unhealthy", url=self.health_url, error=error)
            return DataStoreStatus(
                reachable=False,
                response_time_ms=elapsed,
                url=self.base_url,
                error=error,
            )

        try:
            data = resp.json()
        except ValueError:
            data = None
        version = data.get("version") if isinstance(data, dict) else None
        return DataStoreStatus(
            reachable=True,
            response_time_ms=elapsed,
            url=self.base_url,
            version=str(version) if version is not None else None,
        )
