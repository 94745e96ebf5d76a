"""In-process request rate limiting.

A sliding window of request timestamps per client. Once a client goes over
its limit it is blocked for ``block_seconds`` regardless of the window.
State lives in this process only, so limits are per instance.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    """Request budget for one tier."""

    name: str
    max_requests: int
    window_seconds: float
    block_seconds: float = 0.0


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0


# Tiers, from most to least restrictive per minute
AUTH = RateLimitPolicy("auth", max_requests=100, window_seconds=300, block_seconds=300)
CRITICAL = RateLimitPolicy("critical", max_requests=20, window_seconds=60, block_seconds=600)
IMPORTANT = RateLimitPolicy("important", max_requests=50, window_seconds=60, block_seconds=300)
GENERAL = RateLimitPolicy("general", max_requests=200, window_seconds=60, block_seconds=180)

DEFAULT_POLICIES = (AUTH, CRITICAL, IMPORTANT, GENERAL)


class RateLimiter:
    """Sliding-window limiter keyed by client identifier.

    Clients with no request left in the window and no active block are
    swept at most once per window, so idle clients do not accumulate.
    """

    def __init__(
        self,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._blocked_until: dict[str, float] = {}
        self._last_sweep = clock()

    def check(self, client_id: str) -> RateLimitDecision:
        """Record a request for ``client_id`` and decide whether to allow it."""
        now = self._clock()
        if now - self._last_sweep >= self.policy.window_seconds:
            self._sweep(now)

        blocked_until = self._blocked_until.get(client_id)
        if blocked_until is not None:
            if now < blocked_until:
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    retry_after=max(1, math.ceil(blocked_until - now)),
                )
            del self._blocked_until[client_id]

        window_start = now - self.policy.window_seconds
        timestamps = [t for t in self._requests.get(client_id, ()) if t > window_start]

        if len(timestamps) >= self.policy.max_requests:
            self._requests[client_id] = timestamps
            if self.policy.block_seconds:
                self._blocked_until[client_id] = now + self.policy.block_seconds
                retry_after = self.policy.block_seconds
            else:
                retry_after = timestamps[0] + self.policy.window_seconds - now
            logger.warning(
                "Rate limit exceeded for %s on %s tier", client_id, self.policy.name
            )
            return RateLimitDecision(
                allowed=False,
                remaining=0,
                retry_after=max(1, math.ceil(retry_after)),
            )

        timestamps.append(now)
        self._requests[client_id] = timestamps
        return RateLimitDecision(
            allowed=True,
            remaining=self.policy.max_requests - len(timestamps),
        )

    @property
    def tracked_clients(self) -> int:
        return len(self._requests.keys() | self._blocked_until.keys())

    def _sweep(self, now: float) -> None:
        window_start = now - self.policy.window_seconds
        stale = [
            client_id
            for client_id, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for client_id in stale:
            del self._requests[client_id]

        expired = [c for c, until in self._blocked_until.items() if until <= now]
        for client_id in expired:
            del self._blocked_until[client_id]

        self._last_sweep = now
        if stale or expired:
            logger.debug(
                "Swept %d idle clients from %s tier", len(stale) + len(expired), self.policy.name
            )

    def reset(self, client_id: str | None = None) -> None:
        if client_id is None:
            self._requests.clear()
            self._blocked_until.clear()
        else:
            self._requests.pop(client_id, None)
            self._blocked_until.pop(client_id, None)


def build_limiters(
    policies: tuple[RateLimitPolicy, ...] = DEFAULT_POLICIES,
    clock: Callable[[], float] = time.monotonic,
) -> dict[str, RateLimiter]:
    """One limiter per tier, keyed by tier name."""
    return {policy.name: RateLimiter(policy, clock) for policy in policies}


def client_ip(headers: Mapping[str, str], fallback: str | None = None) -> str:
    """First hop of x-forwarded-for, then x-real-ip, then the socket peer."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return fallback or "unknown"


def client_identifier(headers: Mapping[str, str], fallback_ip: str | None = None) -> str:
    """Identify a client by IP plus a user-agent prefix."""
    user_agent = headers.get("user-agent", "unknown")[:50]
    return f"{client_ip(headers, fallback_ip)}:{user_agent}"
