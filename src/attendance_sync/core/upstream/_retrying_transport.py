"""httpx async transport wrapper with retry, backoff, rate-limit and circuit-breaker handling."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass

import httpx

_LOG = logging.getLogger(__name__)

# Status codes considered transient and eligible for automatic retry.
_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

# Upper bound on a server-supplied Retry-After for 5xx responses.
_MAX_RETRY_AFTER = 8.0


class CircuitOpenError(httpx.TransportError):
    """Raised without touching the network while a host's circuit is open."""


@dataclass
class _Circuit:
    failures: int = 0
    opened_at: float | None = None
    trial_in_flight: bool = False


class RetryingTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx async transport with automatic retry on transient failures.

    Features:
    - Retry with exponential backoff + jitter (up to *max_retries* attempts)
    - Rate-limit pause on HTTP 429 (reads ``Retry-After`` header,
      blocks **all** concurrent requests via a shared event)
    - Retry on 502 / 503 / 504 server errors
    - Retry on transport-level errors (connection reset, timeout, etc.)
    - Per-host circuit breaker: after *breaker_threshold* consecutive failed
      attempts, requests to that host fail fast for *breaker_reset* seconds
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 6,
        breaker_threshold: int = 5,
        breaker_reset: float = 30.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._breaker_threshold = breaker_threshold
        self._breaker_reset = breaker_reset
        self._circuits: dict[str, _Circuit] = {}

        self._rate_limit_lock = asyncio.Lock()
        self._rate_limit_clear = asyncio.Event()
        self._rate_limit_clear.set()
        self._rate_limit_pause_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        for attempt in range(self._max_retries + 1):
            await self._rate_limit_clear.wait()
            self._check_circuit(host, request)

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError:
                self._record_failure(host)
                if attempt >= self._max_retries:
                    raise
                await self._sleep_backoff(attempt)
                continue
            except BaseException:
                self._end_trial(host)
                raise

            if response.status_code == 429:
                self._end_trial(host)
                retry_after = self._parse_retry_after(response)
                await self._apply_rate_limit_pause(retry_after)
                if attempt < self._max_retries:
                    await self._sleep_backoff(attempt)
                    continue
                return response

            if response.status_code in _RETRYABLE_STATUS_CODES:
                self._record_failure(host)
                if attempt < self._max_retries:
                    retry_after = min(self._parse_retry_after(response), _MAX_RETRY_AFTER)
                    if retry_after > 0:
                        await self._sleep_retry_after(retry_after)
                    await self._sleep_backoff(attempt)
                    continue
                return response

            self._record_success(host)
            return response

        raise httpx.TransportError("Request failed after retries")  # pragma: no cover

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ------------------------------------------------------------------
    # Circuit-breaker helpers
    # ------------------------------------------------------------------

    def _check_circuit(self, host: str, request: httpx.Request) -> None:
        circuit = self._circuits.get(host)
        if circuit is None or circuit.opened_at is None:
            return
        if circuit.trial_in_flight or time.monotonic() - circuit.opened_at < self._breaker_reset:
            raise CircuitOpenError(f"circuit open for {host}", request=request)
        # Half-open: exactly one trial goes through; its failure re-opens the circuit.
        circuit.trial_in_flight = True

    def _record_failure(self, host: str) -> None:
        circuit = self._circuits.setdefault(host, _Circuit())
        circuit.failures += 1
        if circuit.trial_in_flight:
            circuit.trial_in_flight = False
            circuit.opened_at = time.monotonic()
            _LOG.warning("Re-opening circuit for %s after failed trial request", host)
            return
        if circuit.failures >= self._breaker_threshold and circuit.opened_at is None:
            circuit.opened_at = time.monotonic()
            _LOG.warning("Opening circuit for %s after %d consecutive failures", host, circuit.failures)

    def _record_success(self, host: str) -> None:
        self._circuits.pop(host, None)

    def _end_trial(self, host: str) -> None:
        circuit = self._circuits.get(host)
        if circuit is not None:
            circuit.trial_in_flight = False

    # ------------------------------------------------------------------
    # Rate-limit helpers
    # ------------------------------------------------------------------

    async def _apply_rate_limit_pause(self, retry_after: float) -> None:
        now = time.monotonic()
        async with self._rate_limit_lock:
            until = now + max(0.0, retry_after)
            if until <= self._rate_limit_pause_until:
                return
            self._rate_limit_pause_until = until
            self._rate_limit_clear.clear()

        await asyncio.sleep(max(0.0, self._rate_limit_pause_until - time.monotonic()))

        async with self._rate_limit_lock:
            if time.monotonic() >= self._rate_limit_pause_until:
                self._rate_limit_clear.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 1.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 1.0

    @staticmethod
    async def _sleep_retry_after(seconds: float) -> None:
        await asyncio.sleep(seconds)

    @staticmethod
    async def _sleep_backoff(attempt: int) -> None:
        seconds = min(8.0, float(2**attempt)) + random.uniform(0.0, 0.25)
        _LOG.warning("Retrying upstream request (attempt %d)", attempt + 1)
        await asyncio.sleep(seconds)
