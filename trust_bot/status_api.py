"""
Trust status API client.

Handles:
- JSON GETs against api.status.salesforce.com (no retries)
- Mapping transport, HTTP and decoding failures onto StatusApiError subclasses
- Instance lookups with key validation
"""

import logging
import time
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from .errors import HttpError, NetworkError, ParseError, UnknownInstance
from .models import InstanceRecord, MetricRow

logger = logging.getLogger(__name__)

STATUS_API_BASE_URL = "https://api.status.salesforce.com/v1"


class StatusApiClient:
    """Async client for the public Trust status API."""

    def __init__(
        self,
        base_url: str = STATUS_API_BASE_URL,
        timeout: float = 10.0,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = http or httpx.AsyncClient(timeout=timeout)

    async def aclose(self):
        await self.client.aclose()

    async def get_data(self, path: str) -> Any:
        """
        GET a JSON document. One request, no retries.

        Raises:
            NetworkError: transport failure or timeout
            HttpError: any status other than 200
            ParseError: body is not valid JSON
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        start = time.time()
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"GET {url} failed: {e}") from e
        duration_ms = round((time.time() - start) * 1000)

        logger.debug(
            f"GET {url} -> {response.status_code}",
            extra={"url": url, "status_code": response.status_code, "duration_ms": duration_ms},
        )

        if response.status_code != 200:
            raise HttpError(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}: {e}") from e

    async def get_instance_status(self, instance: str) -> InstanceRecord:
        """Fetch an instance's status; the returned key must match the request."""
        key = instance.upper()
        data = await self.get_data(f"instances/{quote(key, safe='')}/status")

        if not isinstance(data, dict) or data.get("key") != key:
            raise UnknownInstance(f"Unknown instance {instance!r}")

        return InstanceRecord.from_dict(data)

    async def get_instance_alias(self, alias: str) -> str:
        """Resolve an alias (e.g. a My Domain name) to its instance key."""
        data = await self.get_data(f"instanceAliases/{quote(alias, safe='')}")

        instance_key = data.get("instanceKey") if isinstance(data, dict) else None
        if not instance_key:
            raise UnknownInstance(f"Unknown alias {alias!r}")
        return instance_key

    async def get_metric_values(self) -> List[MetricRow]:
        """Fetch every metric sample across all instances."""
        data = await self.get_data("metricValues")

        if not isinstance(data, list):
            raise ParseError("metricValues response is not a list")
        return [MetricRow.from_dict(row) for row in data]
