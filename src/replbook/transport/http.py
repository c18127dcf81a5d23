"""
REST HTTP client for the evaluator service.
"""

from typing import Any, Optional

import httpx

from replbook.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT
from replbook.errors import HttpError


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "replbook/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        """POST and decode the JSON body. Raises HttpError on any non-2xx status."""
        resp = await self._client.post(path, json=body)
        if not resp.is_success:
            raise HttpError(resp.status_code, resp.text)
        return resp.json()

    async def close(self) -> None:
        await self._client.aclose()
