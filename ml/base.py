"""
ML Client Base - Abstract base class for external ML services.
"""
import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from loguru import logger


class MLClientError(Exception):
    """Raised when an external ML call fails (timeout, network, status, payload)."""

    def __init__(self, message: str, reason: str = "error"):
        super().__init__(message)
        self.reason = reason


@dataclass
class MLResponse:
    """Decoded JSON response from an ML service."""
    payload: Dict[str, Any]
    status_code: int
    latency_ms: Optional[int] = None


class MLClient(ABC):
    """
    Abstract base class for ML service clients.

    Each call carries its own deadline (`timeout`); the underlying HTTP
    client gets `timeout + timeout_buffer` so the deadline always fires first.
    """

    def __init__(
        self,
        url: str,
        timeout: float,
        timeout_buffer: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.timeout_buffer = timeout_buffer
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout + self.timeout_buffer,
            transport=self._transport,
        )

    async def _post(self, **request_kwargs) -> MLResponse:
        """
        POST to the service and decode a JSON object.

        Raises:
            MLClientError: On timeout, network error, non-2xx status or a
                body that is not a JSON object
        """
        start = time.perf_counter()

        async def _send() -> httpx.Response:
            async with self._http_client() as client:
                return await client.post(self.url, **request_kwargs)

        try:
            response = await asyncio.wait_for(_send(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise MLClientError(f"{self} timed out after {self.timeout}s", reason="timeout")
        except httpx.TimeoutException as e:
            raise MLClientError(f"{self} timed out: {e}", reason="timeout")
        except httpx.HTTPError as e:
            raise MLClientError(f"{self} request failed: {e}", reason="network")

        latency_ms = int((time.perf_counter() - start) * 1000)

        if response.status_code < 200 or response.status_code >= 300:
            raise MLClientError(
                f"{self} returned non-2xx status {response.status_code}: {response.text[:200]}",
                reason="status",
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MLClientError(f"{self} returned malformed JSON: {e}", reason="payload")

        if not isinstance(payload, dict):
            raise MLClientError(f"{self} returned a non-object payload", reason="payload")

        logger.debug(f"{self} responded in {latency_ms}ms")
        return MLResponse(payload=payload, status_code=response.status_code, latency_ms=latency_ms)

    @abstractmethod
    def build_request(self, value: str) -> Dict[str, Any]:
        """
        Build the httpx request keyword arguments for one input.

        Args:
            value: Text or image URL sent to the service
        """
        pass

    async def send(self, value: str) -> MLResponse:
        """Send one input to the service and return the decoded response."""
        return await self._post(**self.build_request(value))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.url})"
