"""
backend/app/providers/http_client.py

Purpose:
    httpx.AsyncClient wrapper shared by the sports feed providers: per-call
    timeout, retry with exponential backoff on transient failures, and a
    circuit breaker so a dead upstream is skipped instead of awaited.

Dependencies:
    - httpx
"""

import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("bibet.http_client")

# Retryable HTTP status codes
_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class CircuitOpenError(RuntimeError):
    """Raised when a provider's circuit is open and no call is attempted."""


class CircuitBreaker:
    """Simple circuit breaker for external API calls."""

    def __init__(self, failure_threshold: int = 3, recovery_timeout: int = 300):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.is_open = False

    def record_success(self) -> None:
        self.failure_count = 0
        self.is_open = False

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()
        if self.failure_count >= self.failure_threshold:
            self.is_open = True
            logger.warning(
                "Circuit breaker OPEN after %d failures", self.failure_count
            )

    def can_attempt(self) -> bool:
        if not self.is_open:
            return True
        # Half-open after the recovery timeout
        if self.last_failure_time and (
            time.time() - self.last_failure_time > self.recovery_timeout
        ):
            logger.info("Circuit breaker half-open, allowing retry")
            return True
        return False


def _safe_url(url: str) -> str:
    """Strip query params (may contain API keys) for safe logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


class ResilientClient:
    """Retrying JSON GET client with a circuit breaker."""

    def __init__(
        self,
        name: str,
        timeout: float = 8.0,
        max_retries: int = 1,
        base_delay: float = 1.0,
    ):
        self._client = httpx.AsyncClient(timeout=timeout)
        self._name = name
        self._max_retries = max_retries
        self._base_delay = base_delay
        self.circuit = CircuitBreaker()

    async def get_json(self, url: str, **kwargs) -> Any:
        """GET url and return the decoded JSON body.

        Raises CircuitOpenError when the circuit is open, httpx.HTTPStatusError
        for a final non-2xx response and the last network error when every
        attempt failed.
        """
        if not self.circuit.can_attempt():
            raise CircuitOpenError(f"{self._name} circuit open")

        last_exc: Optional[Exception] = None
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.get(url, **kwargs)
                if resp.status_code in _RETRYABLE_STATUSES and attempt < self._max_retries:
                    logger.warning(
                        "[%s] Status %d on GET %s (attempt %d/%d)",
                        self._name, resp.status_code, _safe_url(url),
                        attempt + 1, self._max_retries + 1,
                    )
                    await asyncio.sleep(self._base_delay * (2 ** attempt))
                    continue
                resp.raise_for_status()
                data = resp.json()
                self.circuit.record_success()
                return data
            except httpx.HTTPStatusError:
                self.circuit.record_failure()
                raise
            except (httpx.TimeoutException, httpx.ConnectError, httpx.RemoteProtocolError) as exc:
                last_exc = exc
                logger.warning(
                    "[%s] Network error on GET %s (attempt %d/%d): %s",
                    self._name, _safe_url(url), attempt + 1, self._max_retries + 1, exc,
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(self._base_delay * (2 ** attempt))

        self.circuit.record_failure()
        logger.error(
            "[%s] All %d attempts failed for GET %s",
            self._name, self._max_retries + 1, _safe_url(url),
        )
        raise last_exc  # type: ignore[misc]

    async def aclose(self) -> None:
        await self._client.aclose()
