"""Background availability monitor driving the failover flag."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .errors import MonitorError
from .failover_state import FALLBACK, PRIMARY, FailoverState
from .prober import ResourceProber
from .types import ProbeResult, ProbeRound, Resource, ResourceSet

logger = logging.getLogger(__name__)

# Extra time a whole round may take beyond the per-resource timeout.
ROUND_GRACE_SECONDS = 1.0


class Prober(Protocol):
    async def probe(self, resources: Iterable[Resource], timeout: float) -> List[ProbeResult]:
        ...


def failover_required(results: Sequence[ProbeResult]) -> bool:
    """All-or-nothing: any unreachable resource activates the fallback pair."""
    return any(not r.reachable for r in results)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class FailoverMonitor:
    """
    Periodically probes the primary resources and publishes the outcome.

    States are ``primary`` (flag False) and ``fallback`` (flag True). The flag
    is written once per round, only after every resource has a result, so
    readers never see a value derived from a partial round.
    """

    def __init__(
        self,
        resources: ResourceSet,
        state: FailoverState,
        *,
        prober: Optional[Prober] = None,
        interval_seconds: float = 10.0,
        timeout_seconds: float = 5.0,
        time_fn: Callable[[], float] = time.monotonic,
        now_fn: Callable[[], dt.datetime] = _utc_now,
    ) -> None:
        self.resources: ResourceSet = tuple(resources)
        self.state = state
        self.interval_seconds = float(interval_seconds)
        self.timeout_seconds = float(timeout_seconds)
        self._prober: Prober = prober or ResourceProber()
        self._time_fn = time_fn
        self._now_fn = now_fn

        self._lock = threading.Lock()
        self._last_round: Optional[ProbeRound] = None
        self._rounds_completed = 0
        self._transitions = 0
        self._task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    async def run_round(self) -> ProbeRound:
        """Probe every resource, aggregate, then update the failover flag."""
        started_at = self._now_fn()
        try:
            results = await asyncio.wait_for(
                self._prober.probe(self.resources, self.timeout_seconds),
                self.timeout_seconds + ROUND_GRACE_SECONDS,
            )
            results = self._complete_round(results)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Probe round failed; treating all resources as unreachable")
            results = self._unreachable_results(f"round: {type(exc).__name__}: {exc}")

        failover = failover_required(results)
        probe_round = ProbeRound(
            results=results,
            started_at=started_at,
            finished_at=self._now_fn(),
            failover=failover,
        )

        changed = self.state.set(failover)
        with self._lock:
            self._last_round = probe_round
            self._rounds_completed += 1
            if changed:
                self._transitions += 1

        self._log_round(probe_round, changed)
        return probe_round

    def _complete_round(self, results: Any) -> Tuple[ProbeResult, ...]:
        """Require exactly one result per monitored resource, in order."""
        if results is None:
            raise MonitorError("prober returned no results")
        results = tuple(results)
        if len(results) != len(self.resources):
            raise MonitorError(
                f"prober returned {len(results)} result(s) for {len(self.resources)} resource(s)"
            )
        for resource, result in zip(self.resources, results):
            if not isinstance(result, ProbeResult) or result.resource != resource:
                raise MonitorError(f"missing result for {resource.url}")
        return results

    def _unreachable_results(self, reason: str) -> Tuple[ProbeResult, ...]:
        now = self._now_fn()
        return tuple(
            ProbeResult(resource=r, reachable=False, observed_at=now, error=reason)
            for r in self.resources
        )

    def _log_round(self, probe_round: ProbeRound, changed: bool) -> None:
        for r in probe_round.results:
            logger.debug(
                "  %s %s reachable=%s status=%s error=%s",
                r.resource.name,
                r.resource.url,
                r.reachable,
                r.status_code,
                r.error,
            )

        if not changed:
            logger.debug(
                "Probe round done in %sms, mode unchanged (%s)",
                probe_round.duration_ms,
                FALLBACK if probe_round.failover else PRIMARY,
            )
            return

        if probe_round.failover:
            down = [r.resource.url for r in probe_round.results if not r.reachable]
            logger.warning("Failover activated: primary -> fallback (unreachable: %s)", ", ".join(down))
        else:
            logger.info("Failover cleared: fallback -> primary (all resources reachable)")

    # ------------------------------------------------------------------
    # Loop lifecycle
    # ------------------------------------------------------------------

    async def run_forever(self) -> None:
        """Run a round every interval until cancelled."""
        logger.info(
            "Monitoring %d resource(s) every %ss (timeout %ss)",
            len(self.resources),
            self.interval_seconds,
            self.timeout_seconds,
        )
        while True:
            tick = self._time_fn()
            try:
                await self.run_round()
            except Exception:
                logger.exception("Monitor round crashed; retrying next interval")
            elapsed = self._time_fn() - tick
            await asyncio.sleep(max(0.0, self.interval_seconds - elapsed))

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop (idempotent)."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run_forever(), name="failover-monitor"
            )
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def last_round(self) -> Optional[ProbeRound]:
        with self._lock:
            return self._last_round

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            last_round = self._last_round
            rounds = self._rounds_completed
            transitions = self._transitions
        return {
            "mode": self.state.mode,
            "failover": self.state.get(),
            "running": self.running,
            "interval_seconds": self.interval_seconds,
            "timeout_seconds": self.timeout_seconds,
            "rounds_completed": rounds,
            "transitions": transitions,
            "resources": [{"name": r.name, "url": r.url} for r in self.resources],
            "last_round": last_round.to_dict() if last_round else None,
        }
