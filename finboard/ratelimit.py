"""In-memory sliding-window rate limiting.

Each named limiter keeps, per caller identifier, the timestamps of accepted
requests inside the trailing window. State lives in a RateLimiterRegistry so
tests can use isolated instances. Nothing is persisted and nothing is shared
across processes, so multi-instance deployments need an external store.
"""

import logging
import math
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from finboard.config import get_limiter_preset

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

ANONYMOUS_CLIENT = "anonymous"


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000


@dataclass(frozen=True)
class RateLimitResult:
    """Immutable outcome of a rate limit check."""

    allowed: bool
    remaining: int
    retry_after_seconds: int


class RateLimiter:
    """Sliding-window limiter bound to one named store of a registry."""

    def __init__(self, registry: "RateLimiterRegistry", name: str, limit: int, window_seconds: float) -> None:
        self.registry = registry
        self.name = name
        self.limit = limit
        self.window_seconds = window_seconds

    def check(self, identifier: str) -> RateLimitResult:
        """Record a request for identifier if it fits in the window.

        Rejected attempts are not recorded.

        Args:
            identifier: Caller key (usually a client IP).

        Returns:
            RateLimitResult with remaining quota or the wait time in seconds.
        """
        return self.registry.check(self.name, identifier, self.limit, self.window_seconds)


class RateLimiterRegistry:
    """Owner of all limiter stores: name -> identifier -> timestamps (ms)."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or wall_clock_ms
        self._stores: dict[str, dict[str, list[float]]] = {}
        self._lock = threading.Lock()

    def create(self, name: str, limit: int, window_seconds: float) -> RateLimiter:
        """Create a limiter. Limiters with the same name share one store."""
        with self._lock:
            if name not in self._stores:
                logger.debug("Creating rate limit store '%s'", name)
                self._stores[name] = {}
        return RateLimiter(self, name, limit, window_seconds)

    def reset(self, name: str | None = None) -> None:
        """Forget recorded requests for one store, or all stores."""
        with self._lock:
            if name is None:
                self._stores.clear()
            elif name in self._stores:
                self._stores[name] = {}

    def check(self, name: str, identifier: str, limit: int, window_seconds: float) -> RateLimitResult:
        """Run a sliding-window check against the named store."""
        with self._lock:
            now = self.clock()
            window_ms = window_seconds * 1000
            window_start = now - window_ms

            store = self._stores.setdefault(name, {})
            timestamps = [ts for ts in store.get(identifier, []) if ts > window_start]
            store[identifier] = timestamps

            if len(timestamps) >= limit:
                retry_after_ms = timestamps[0] + window_ms - now if timestamps else 0
                result = RateLimitResult(
                    allowed=False,
                    remaining=0,
                    retry_after_seconds=math.ceil(retry_after_ms / 1000),
                )
                logger.info(
                    "Rate limit '%s' exceeded for %s, retry in %ss",
                    name,
                    identifier,
                    result.retry_after_seconds,
                )
                return result

            timestamps.append(now)
            return RateLimitResult(allowed=True, remaining=limit - len(timestamps), retry_after_seconds=0)


default_registry = RateLimiterRegistry()


def create_limiter(
    name: str,
    limit: int,
    window_seconds: float,
    registry: RateLimiterRegistry | None = None,
) -> RateLimiter:
    """Create a named limiter in the given (or process-wide) registry.

    Args:
        name: Store name. Reusing a name shares its quota state.
        limit: Maximum requests per window.
        window_seconds: Sliding window size.
        registry: Registry to use. Defaults to the process-wide one.

    Returns:
        RateLimiter handle.
    """
    return (registry or default_registry).create(name, limit, window_seconds)


def limiter_from_config(
    name: str,
    config: dict[str, Any],
    registry: RateLimiterRegistry | None = None,
) -> RateLimiter:
    """Create a limiter from a preset in the [limiters] config table.

    Raises:
        KeyError: If no preset with that name is configured.
    """
    preset = get_limiter_preset(name, config)
    return create_limiter(name, preset["limit"], preset["window_seconds"], registry)


def get_client_identifier(headers: Mapping[str, str]) -> str:
    """Extract a client identifier from request headers.

    Uses the first x-forwarded-for address, then x-real-ip, then a shared
    "anonymous" key. Header names are matched case-insensitively.

    Args:
        headers: Request header mapping.

    Returns:
        Client identifier string.
    """
    normalized = {key.lower(): value for key, value in headers.items()}

    forwarded = normalized.get("x-forwarded-for", "").split(",")[0].strip()
    if forwarded:
        return forwarded

    return normalized.get("x-real-ip") or ANONYMOUS_CLIENT


def rejection_message(result: RateLimitResult) -> str:
    """User-facing message for an HTTP 429 response."""
    return f"Príliš veľa požiadaviek. Skúste znova o {result.retry_after_seconds}s."
