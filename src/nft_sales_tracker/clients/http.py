# -*- coding: utf-8 -*-
"""Async HTTP client with retries, rate-limit handling and existence probes."""

from __future__ import annotations

import asyncio
import random
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from nft_sales_tracker.config import Settings
from nft_sales_tracker.exceptions import HttpRequestError


class AsyncHttpClient:
    """Async HTTP client shared by the JSON-RPC client and the metadata resolver.

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (api.timeout_seconds, api.max_retries).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    async def _rate_limit_wait(self, response: aiohttp.ClientResponse, attempt: int) -> None:
        retry_after: Optional[float] = None
        header = response.headers.get("Retry-After")
        if header:
            try:
                retry_after = float(header)
            except ValueError:
                pass
        self._logger.warning(
            "http_rate_limited",
            http_status_code=429,
            http_retry_after_seconds=retry_after,
        )
        if retry_after is not None and retry_after > 0:
            await asyncio.sleep(retry_after)
        else:
            await asyncio.sleep(self._backoff_delay(attempt))

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Send a request and return parsed JSON, retrying on 429 and transport errors.

        Raises:
            HttpRequestError: If the request fails after all retries.
        """
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.api.max_retries
        event_prefix = f"http_{method.lower()}"
        last_error: Optional[Exception] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.request(
                            method, url, params=params, json=json
                        ) as response:
                            if response.status == 429:
                                await self._rate_limit_wait(response, attempt)
                                continue
                            response.raise_for_status()
                            # IPFS gateways often serve JSON as text/plain.
                            return await response.json(content_type=None)
                    except aiohttp.ClientResponseError as e:
                        last_error = e
                        self._logger.debug(
                            f"{event_prefix}_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                            http_status_code=e.status,
                        )
                        await asyncio.sleep(self._backoff_delay(attempt))
                    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                        last_error = e
                        self._logger.debug(
                            f"{event_prefix}_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                        await asyncio.sleep(self._backoff_delay(attempt))

            status_code = (
                last_error.status
                if isinstance(last_error, aiohttp.ClientResponseError)
                else None
            )
            self._logger.warning(
                f"{event_prefix}_failed",
                http_status_code=status_code,
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            raise HttpRequestError(
                f"{method} failed after {max_retries} retries: {url}",
                url=url,
                status_code=status_code,
                cause=last_error,
            ) from last_error

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform a GET request and return JSON. Retries on failure and on 429.

        Raises:
            HttpRequestError: If the request fails after all retries.
        """
        return await self._request("GET", url, params=params or {})

    async def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
    ) -> Any:
        """Perform a POST request with a JSON body and return JSON. Retries on failure.

        Raises:
            HttpRequestError: If the request fails after all retries.
        """
        return await self._request("POST", url, json=json if json is not None else {})

    async def probe(self, url: str, *, timeout_seconds: float) -> bool:
        """Return True if a HEAD request to url answers 2xx within timeout_seconds.

        Single attempt; never raises for network errors or timeouts.
        """
        try:
            session = await self._get_session()
            timeout = aiohttp.ClientTimeout(total=timeout_seconds)
            async with session.head(url, timeout=timeout, allow_redirects=True) as response:
                ok = 200 <= response.status < 300
                self._logger.debug(
                    "http_probe",
                    http_url=url,
                    http_status_code=response.status,
                    http_probe_ok=ok,
                )
                return ok
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.debug(
                "http_probe_failed",
                http_url=url,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
