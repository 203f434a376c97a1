"""
Resource Prober - concurrent reachability checks.

Responsibilities:
- One GET per resource, all in flight at once over a single scoped client
- Hard per-resource deadline (httpx timeout + asyncio.wait_for)
- Error translation to ResourceProbeError subclasses, then to ProbeResult

No shared state is touched here; the caller decides what a round means.
"""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
import time
from typing import Callable, Iterable, List, Optional

import httpx

from .errors import (
    ResourceNetworkError,
    ResourceProbeError,
    ResourceStatusError,
    ResourceTimeout,
)
from .types import ProbeResult, Resource

logger = logging.getLogger(__name__)

USER_AGENT = "resource-failover-monitor"


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ResourceProber:
    """
    Checks a ResourceSet and classifies every resource as reachable or not.

    Reachable means the response arrived before the deadline with status 200.
    Redirects are not followed, so a 3xx counts as unreachable.
    """

    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        time_fn: Callable[[], float] = time.monotonic,
        now_fn: Callable[[], dt.datetime] = _utc_now,
    ) -> None:
        self._transport = transport
        self._time_fn = time_fn
        self._now_fn = now_fn

    async def probe(self, resources: Iterable[Resource], timeout: float) -> List[ProbeResult]:
        """
        Check every resource concurrently and wait for all of them.

        Args:
            resources: Resources to check, in display order
            timeout: Per-resource deadline in seconds

        Returns:
            One ProbeResult per resource, in input order. Never raises for
            network conditions.
        """
        items = tuple(resources)
        if not items:
            return []

        async with httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
            follow_redirects=False,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            checks = [self._check(client, resource, timeout) for resource in items]
            return list(await asyncio.gather(*checks))

    async def _check(self, client: httpx.AsyncClient, resource: Resource, timeout: float) -> ProbeResult:
        started = self._time_fn()
        status_code: Optional[int] = None
        error: Optional[ResourceProbeError] = None

        try:
            status_code = await asyncio.wait_for(self._fetch(client, resource), timeout)
        except asyncio.TimeoutError:
            error = ResourceTimeout(f"no response after {timeout}s", url=resource.url)
        except ResourceProbeError as exc:
            error = exc
            status_code = exc.status_code
        except Exception as exc:
            logger.exception("Unexpected error probing %s", resource.url)
            error = ResourceNetworkError(f"{type(exc).__name__}: {exc}", url=resource.url)

        latency_ms = round((self._time_fn() - started) * 1000, 1)

        if error is not None:
            logger.debug("Probe %s unreachable (%s): %s", resource.url, error.kind, error)
            return ProbeResult(
                resource=resource,
                reachable=False,
                observed_at=self._now_fn(),
                status_code=status_code,
                error=f"{error.kind}: {error}",
                latency_ms=latency_ms,
            )

        logger.debug("Probe %s reachable in %sms", resource.url, latency_ms)
        return ProbeResult(
            resource=resource,
            reachable=True,
            observed_at=self._now_fn(),
            status_code=status_code,
            latency_ms=latency_ms,
        )

    async def _fetch(self, client: httpx.AsyncClient, resource: Resource) -> int:
        """GET the resource headers only; the stream context releases the connection."""
        try:
            async with client.stream("GET", resource.url) as response:
                status_code = response.status_code
        except httpx.TimeoutException as e:
            raise ResourceTimeout(f"timed out: {e}", url=resource.url)
        except httpx.HTTPError as e:
            raise ResourceNetworkError(f"{type(e).__name__}: {e}", url=resource.url)
        except httpx.InvalidURL as e:
            raise ResourceNetworkError(f"invalid URL: {e}", url=resource.url)

        if status_code != 200:
            raise ResourceStatusError(
                f"HTTP {status_code}", url=resource.url, status_code=status_code
            )
        return status_code
