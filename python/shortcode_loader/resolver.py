"""Configuration resolver - tiered fetch with cache repair.

The ConfigResolver obtains the shortcode configuration by running an
ordered list of fetchers until one produces a valid configuration.

Resolution Contract:
1. Fetchers run strictly in order: fast cache, durable cache (when
   enabled), then the YAML source of truth
2. Each fetcher run yields a FetchResult (hit, miss, invalid or error);
   nothing a fetcher raises escapes the resolver
3. The first valid candidate wins and later fetchers are not run
4. Caches are repaired according to the winner:
   - yaml: write the durable tier (NO_EXPIRY), then the fast tier
   - transient: write the fast tier only
   - cache: no writes
5. When nothing wins, both well-known keys are purged and an empty
   configuration is returned

A configuration is valid when it is a mapping containing a "shortcodes"
key. The check is shallow; the binder copes with odd values.

Usage:
    resolver = ConfigResolver(
        fast_cache=MemoryCacheTier(),
        durable_cache=FileCacheTier("/var/cache/shortcodes"),
        source=ConfigSource(settings),
        settings=settings,
    )
    config = resolver.resolve()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .cache import CacheTier, MemoryCacheTier
from .event_bridge import EventBridge, EventNames
from .logging import log_debug, log_info, log_trace, log_warn
from .source import ConfigSource
from .types import (
    FetcherName,
    FetcherOutcome,
    FetchStatus,
    LoaderSettings,
    LogContext,
    ResolutionReport,
)

REQUIRED_KEY = "shortcodes"


def is_config_valid(config: Any) -> bool:
    """Check the shallow shape of a configuration candidate.

    Args:
        config: Candidate produced by a fetcher.

    Returns:
        True if the candidate is a mapping with a "shortcodes" key.

    Example:
        >>> is_config_valid({"shortcodes": {}})
        True
        >>> is_config_valid(["shortcodes"])
        False
    """
    return isinstance(config, Mapping) and REQUIRED_KEY in config


@dataclass
class FetchResult:
    """Result of running a single fetcher.

    Attributes:
        fetcher: Name of the fetcher that ran.
        status: HIT, MISS, INVALID or ERROR.
        value: The candidate (set for HIT and INVALID).
        error: The exception raised (set for ERROR).
    """

    fetcher: FetcherName
    status: FetchStatus
    value: Any = None
    error: Exception | None = None

    @property
    def is_hit(self) -> bool:
        return self.status is FetchStatus.HIT

    def to_outcome(self) -> FetcherOutcome:
        return FetcherOutcome(
            fetcher=self.fetcher,
            status=self.status,
            error=f"{type(self.error).__name__}: {self.error}" if self.error else None,
        )


@dataclass
class Fetcher:
    """A named, zero-argument strategy producing a configuration candidate.

    Attributes:
        name: Fetcher name (also identifies the tier for cache repair).
        fetch: Thunk returning a candidate, None for absent, or raising.
    """

    name: FetcherName
    fetch: Callable[[], Any]

    def run(self) -> FetchResult:
        """Run the thunk and classify its outcome.

        Returns:
            FetchResult; never raises.
        """
        try:
            candidate = self.fetch()
        except Exception as e:
            return FetchResult(self.name, FetchStatus.ERROR, error=e)

        if candidate is None:
            return FetchResult(self.name, FetchStatus.MISS)

        if not is_config_valid(candidate):
            return FetchResult(self.name, FetchStatus.INVALID, value=candidate)

        return FetchResult(self.name, FetchStatus.HIT, value=candidate)


class ConfigResolver:
    """Resolves the shortcode configuration across cache tiers and the source.

    Tiers are injected and never owned. No locking is performed; every
    write stores the value parsed from the same source.

    Attributes:
        fast_cache: Fast shared cache tier.
        durable_cache: Durable cache tier, or None when not deployed.
        source: Source of truth for the configuration.
        settings: Keys, TTL and the durable read toggle.
    """

    def __init__(
        self,
        fast_cache: CacheTier | None = None,
        durable_cache: CacheTier | None = None,
        source: ConfigSource | None = None,
        settings: LoaderSettings | None = None,
        event_bridge: EventBridge | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            fast_cache: Fast tier. Defaults to a private MemoryCacheTier.
            durable_cache: Durable tier. Optional.
            source: Source of truth. Defaults to ConfigSource(settings).
            settings: Loader settings. Defaults to LoaderSettings().
            event_bridge: Bridge for notifications. Defaults to the singleton.
        """
        self.settings = settings or LoaderSettings()
        self.fast_cache = fast_cache if fast_cache is not None else MemoryCacheTier()
        self.durable_cache = durable_cache
        self.source = source if source is not None else ConfigSource(self.settings)
        self._event_bridge = event_bridge

    @property
    def event_bridge(self) -> EventBridge:
        return self._event_bridge or EventBridge.instance()

    @property
    def durable_reads_enabled(self) -> bool:
        """Whether the durable tier takes part in the fetch chain."""
        return self.durable_cache is not None and self.settings.durable_cache_enabled

    def build_fetchers(self) -> list[Fetcher]:
        """Build the ordered fetcher list for one resolution.

        Returns:
            Fetchers in priority order (cheapest first).
        """
        fast_key = self.settings.fast_cache_key
        durable_key = self.settings.durable_cache_key

        fetchers = [Fetcher(FetcherName.CACHE, lambda: self.fast_cache.get(fast_key))]

        if self.durable_reads_enabled:
            durable = self.durable_cache
            fetchers.append(Fetcher(FetcherName.TRANSIENT, lambda: durable.get(durable_key)))

        fetchers.append(Fetcher(FetcherName.YAML, self.source.load))
        return fetchers

    def resolve(self) -> dict[str, Any]:
        """Resolve the configuration.

        Returns:
            The winning configuration, or an empty dict on total miss.
            Never raises.
        """
        config, _report = self.resolve_with_report()
        return config

    def resolve_with_report(self) -> tuple[dict[str, Any], ResolutionReport]:
        """Resolve the configuration and describe how it was obtained.

        Returns:
            Tuple of (configuration, ResolutionReport).
        """
        report = ResolutionReport()
        fetchers = self.build_fetchers()
        winner: FetchResult | None = None

        for index, fetcher in enumerate(fetchers):
            result = fetcher.run()
            report.outcomes.append(result.to_outcome())

            if result.status is FetchStatus.ERROR:
                log_warn(
                    f"ConfigResolver: Fetcher '{fetcher.name.value}' failed: {result.error}",
                    LogContext(
                        fetcher=fetcher.name.value,
                        error_type=type(result.error).__name__,
                    ),
                )
                self.event_bridge.publish(
                    EventNames.CONFIG_FETCH_FAILED, fetcher.name, result.error
                )
                continue

            if result.status is FetchStatus.INVALID:
                log_debug(
                    f"ConfigResolver: Fetcher '{fetcher.name.value}' returned an invalid "
                    f"configuration ({type(result.value).__name__})",
                    LogContext(fetcher=fetcher.name.value),
                )
                continue

            if result.status is FetchStatus.MISS:
                log_trace(f"ConfigResolver: Fetcher '{fetcher.name.value}' missed")
                continue

            winner = result
            for skipped in fetchers[index + 1 :]:
                report.outcomes.append(
                    FetcherOutcome(fetcher=skipped.name, status=FetchStatus.SKIPPED)
                )
            break

        if winner is None:
            self._purge(report)
            self.event_bridge.publish(EventNames.CONFIG_RESOLVED, report)
            return {}, report

        report.winner = winner.fetcher
        self._populate(winner, report)

        log_debug(f"ConfigResolver: Resolved configuration via '{winner.fetcher.value}'")
        self.event_bridge.publish(EventNames.CONFIG_RESOLVED, report)
        return winner.value, report

    def _populate(self, winner: FetchResult, report: ResolutionReport) -> None:
        """Write the winning configuration into the tiers it did not come from."""
        if winner.fetcher is FetcherName.YAML:
            if self.durable_cache is not None and self._write(
                self.durable_cache,
                self.settings.durable_cache_key,
                winner.value,
                self.settings.durable_cache_ttl,
            ):
                report.cache_writes.append(FetcherName.TRANSIENT)
            if self._write(self.fast_cache, self.settings.fast_cache_key, winner.value):
                report.cache_writes.append(FetcherName.CACHE)
            log_info(
                "ConfigResolver: Populated caches from source",
                {"tiers": ",".join(tier.value for tier in report.cache_writes)},
            )

        elif winner.fetcher is FetcherName.TRANSIENT:
            if self._write(self.fast_cache, self.settings.fast_cache_key, winner.value):
                report.cache_writes.append(FetcherName.CACHE)

    def _purge(self, report: ResolutionReport) -> None:
        """Delete both well-known keys after a total miss."""
        self._delete(self.fast_cache, self.settings.fast_cache_key, report)
        if self.durable_cache is not None:
            self._delete(self.durable_cache, self.settings.durable_cache_key, report)

        log_warn(
            "ConfigResolver: No valid shortcode configuration found, caches purged",
            {"keys": ",".join(report.cache_purges)},
        )
        self.event_bridge.publish(EventNames.CONFIG_CACHE_PURGED, list(report.cache_purges))

    def _write(self, tier: CacheTier, key: str, value: Any, ttl: int | None = None) -> bool:
        try:
            tier.set(key, value, ttl)
        except Exception as e:
            log_warn(
                f"ConfigResolver: Failed to write '{key}' to {tier.name}: {e}",
                LogContext(cache_key=key, error_type=type(e).__name__),
            )
            return False
        return True

    def _delete(self, tier: CacheTier, key: str, report: ResolutionReport) -> None:
        report.cache_purges.append(key)
        try:
            tier.delete(key)
        except Exception as e:
            log_warn(
                f"ConfigResolver: Failed to delete '{key}' from {tier.name}: {e}",
                LogContext(cache_key=key, error_type=type(e).__name__),
            )


__all__ = [
    "REQUIRED_KEY",
    "ConfigResolver",
    "Fetcher",
    "FetchResult",
    "is_config_valid",
]
