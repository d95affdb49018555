"""Tests for the configuration resolver.

These tests verify:
- Fetch order and short-circuiting on the first valid candidate
- Cache population depending on the winning tier
- Cache purge and empty result on total miss
- Fetch failures and invalid candidates never escape resolve()
- The resolution report and published events
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from shortcode_loader import (
    NO_EXPIRY,
    CacheBackendError,
    CacheTier,
    ConfigParseError,
    ConfigResolver,
    ConfigSource,
    ConfigSourceError,
    EventNames,
    Fetcher,
    FetcherName,
    FetchStatus,
    LoaderSettings,
    MemoryCacheTier,
    is_config_valid,
)

VALID = {"namespace": "App", "shortcodes": {"greet": "Greeter"}}
FAST_KEY = "shortcode-config"
DURABLE_KEY = "vendi-shortcode-config"


class RecordingCacheTier(MemoryCacheTier):
    """Memory tier that records every write and delete."""

    def __init__(self, name: str, journal: list[str] | None = None) -> None:
        super().__init__(name=name)
        self.journal = journal if journal is not None else []
        self.writes: list[tuple[str, Any, int | None]] = []
        self.deletes: list[str] = []

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self.writes.append((key, value, ttl))
        self.journal.append(self.name)
        super().set(key, value, ttl)

    def delete(self, key: str) -> bool:
        self.deletes.append(key)
        return super().delete(key)


def make_source(value: Any = None, error: Exception | None = None) -> MagicMock:
    source = MagicMock(spec=ConfigSource)
    if error is not None:
        source.load.side_effect = error
    else:
        source.load.return_value = value
    return source


@pytest.fixture
def fast() -> RecordingCacheTier:
    return RecordingCacheTier("fast")


@pytest.fixture
def durable() -> RecordingCacheTier:
    return RecordingCacheTier("durable")


@pytest.fixture
def enabled_settings() -> LoaderSettings:
    return LoaderSettings(durable_cache_enabled=True)


class TestIsConfigValid:
    """Tests for the shallow validity check."""

    def test_mapping_with_shortcodes(self):
        assert is_config_valid({"shortcodes": {}}) is True

    def test_shortcodes_value_shape_is_not_checked(self):
        assert is_config_valid({"shortcodes": None}) is True
        assert is_config_valid({"shortcodes": "oops"}) is True

    def test_mapping_without_shortcodes(self):
        assert is_config_valid({"namespace": "App"}) is False

    @pytest.mark.parametrize("candidate", ["shortcodes", ["shortcodes"], 42, None, False])
    def test_non_mapping_is_invalid(self, candidate):
        assert is_config_valid(candidate) is False


class TestFetcher:
    """Tests for Fetcher.run() classification."""

    def test_hit(self):
        result = Fetcher(FetcherName.CACHE, lambda: VALID).run()
        assert result.status is FetchStatus.HIT
        assert result.value == VALID
        assert result.is_hit

    def test_miss_on_none(self):
        result = Fetcher(FetcherName.CACHE, lambda: None).run()
        assert result.status is FetchStatus.MISS

    def test_invalid_candidate(self):
        result = Fetcher(FetcherName.YAML, lambda: "plain string").run()
        assert result.status is FetchStatus.INVALID
        assert result.value == "plain string"

    def test_error_is_captured(self):
        def boom():
            raise ConfigParseError("bad yaml")

        result = Fetcher(FetcherName.YAML, boom).run()
        assert result.status is FetchStatus.ERROR
        assert isinstance(result.error, ConfigParseError)
        assert result.to_outcome().error == "ConfigParseError: bad yaml"


class TestFastCacheHit:
    """Fast cache holds a valid configuration."""

    def test_returns_cached_value_without_writes(self, fast, durable, enabled_settings):
        fast.set(FAST_KEY, VALID)
        fast.writes.clear()
        source = make_source(VALID)

        resolver = ConfigResolver(fast, durable, source, enabled_settings)
        config, report = resolver.resolve_with_report()

        assert config == VALID
        assert report.winner is FetcherName.CACHE
        assert fast.writes == []
        assert durable.writes == []
        assert report.cache_writes == []
        source.load.assert_not_called()

    def test_later_fetchers_are_skipped(self, fast, durable, enabled_settings):
        fast.set(FAST_KEY, VALID)
        resolver = ConfigResolver(fast, durable, make_source(VALID), enabled_settings)

        _config, report = resolver.resolve_with_report()

        assert [(o.fetcher, o.status) for o in report.outcomes] == [
            (FetcherName.CACHE, FetchStatus.HIT),
            (FetcherName.TRANSIENT, FetchStatus.SKIPPED),
            (FetcherName.YAML, FetchStatus.SKIPPED),
        ]


class TestDurableCacheHit:
    """Fast cache misses, durable cache holds a valid configuration."""

    def test_warms_fast_cache_only(self, fast, durable, enabled_settings):
        durable.set(DURABLE_KEY, VALID)
        durable.writes.clear()
        source = make_source(VALID)

        resolver = ConfigResolver(fast, durable, source, enabled_settings)
        config, report = resolver.resolve_with_report()

        assert config == VALID
        assert report.winner is FetcherName.TRANSIENT
        assert fast.writes == [(FAST_KEY, VALID, None)]
        assert durable.writes == []
        assert report.cache_writes == [FetcherName.CACHE]
        source.load.assert_not_called()

    def test_invalid_fast_value_falls_through(self, fast, durable, enabled_settings):
        fast.set(FAST_KEY, ["not", "a", "mapping"])
        durable.set(DURABLE_KEY, VALID)

        config = ConfigResolver(fast, durable, make_source(), enabled_settings).resolve()

        assert config == VALID
        assert fast.get(FAST_KEY) == VALID

    def test_durable_reads_disabled_by_default(self, fast, durable):
        durable.set(DURABLE_KEY, {"shortcodes": {"stale": "Old"}})
        resolver = ConfigResolver(fast, durable, make_source(VALID), LoaderSettings())

        config, report = resolver.resolve_with_report()

        assert config == VALID
        assert report.winner is FetcherName.YAML
        assert [f.name for f in resolver.build_fetchers()] == [FetcherName.CACHE, FetcherName.YAML]

    def test_no_durable_tier(self, fast, enabled_settings):
        resolver = ConfigResolver(fast, None, make_source(VALID), enabled_settings)

        assert resolver.durable_reads_enabled is False
        assert resolver.resolve() == VALID


class TestSourceHit:
    """Both caches miss and the YAML source parses to a valid configuration."""

    def test_populates_durable_then_fast(self, enabled_settings):
        journal: list[str] = []
        fast = RecordingCacheTier("fast", journal)
        durable = RecordingCacheTier("durable", journal)

        resolver = ConfigResolver(fast, durable, make_source(VALID), enabled_settings)
        config, report = resolver.resolve_with_report()

        assert config == VALID
        assert report.winner is FetcherName.YAML
        assert journal == ["durable", "fast"]
        assert durable.writes == [(DURABLE_KEY, VALID, NO_EXPIRY)]
        assert fast.writes == [(FAST_KEY, VALID, None)]
        assert report.cache_writes == [FetcherName.TRANSIENT, FetcherName.CACHE]

    def test_durable_written_even_when_reads_disabled(self, fast, durable):
        ConfigResolver(fast, durable, make_source(VALID), LoaderSettings()).resolve()

        assert durable.get(DURABLE_KEY) == VALID

    def test_custom_durable_ttl(self, fast, durable):
        settings = LoaderSettings(durable_cache_ttl=3600)
        ConfigResolver(fast, durable, make_source(VALID), settings).resolve()

        assert durable.writes == [(DURABLE_KEY, VALID, 3600)]

    def test_fast_cache_error_falls_through(self, durable, enabled_settings):
        fast = MagicMock(spec=CacheTier)
        fast.name = "broken"
        fast.get.side_effect = CacheBackendError("down", key=FAST_KEY)

        config, report = ConfigResolver(
            fast, durable, make_source(VALID), enabled_settings
        ).resolve_with_report()

        assert config == VALID
        assert report.outcomes[0].status is FetchStatus.ERROR
        fast.set.assert_called_once_with(FAST_KEY, VALID, None)

    def test_write_failure_is_swallowed(self, fast, enabled_settings):
        durable = MagicMock(spec=CacheTier)
        durable.name = "broken"
        durable.get.return_value = None
        durable.set.side_effect = CacheBackendError("disk full")

        config, report = ConfigResolver(
            fast, durable, make_source(VALID), enabled_settings
        ).resolve_with_report()

        assert config == VALID
        assert report.cache_writes == [FetcherName.CACHE]
        assert fast.get(FAST_KEY) == VALID

    def test_reads_real_yaml_file(self, fast, durable, settings, write_config):
        write_config("shortcodes:\n  greet: Greeter\n")
        resolver = ConfigResolver(fast, durable, ConfigSource(settings), settings)

        assert resolver.resolve() == {"shortcodes": {"greet": "Greeter"}}
        assert fast.get(FAST_KEY) == {"shortcodes": {"greet": "Greeter"}}


class TestTotalMiss:
    """Every fetcher fails or yields an invalid candidate."""

    @pytest.mark.parametrize(
        "source",
        [
            make_source(error=ConfigSourceError("missing")),
            make_source(error=ConfigParseError("bad")),
            make_source(error=RuntimeError("unexpected")),
            make_source("plain string"),
            make_source(["a", "list"]),
            make_source({"namespace": "App"}),
            make_source(None),
        ],
    )
    def test_returns_empty_and_purges(self, fast, durable, enabled_settings, source):
        fast.set(FAST_KEY, "poisoned")
        durable.set(DURABLE_KEY, {"no": "shortcodes"})

        config, report = ConfigResolver(fast, durable, source, enabled_settings).resolve_with_report()

        assert config == {}
        assert report.winner is None
        assert report.is_total_miss
        assert fast.deletes == [FAST_KEY]
        assert durable.deletes == [DURABLE_KEY]
        assert fast.get(FAST_KEY) is None
        assert durable.get(DURABLE_KEY) is None
        assert report.cache_purges == [FAST_KEY, DURABLE_KEY]

    def test_purge_is_idempotent_when_absent(self, fast, durable, enabled_settings):
        resolver = ConfigResolver(fast, durable, make_source(error=OSError("nope")), enabled_settings)

        assert resolver.resolve() == {}
        assert resolver.resolve() == {}
        assert fast.deletes == [FAST_KEY, FAST_KEY]
        assert durable.deletes == [DURABLE_KEY, DURABLE_KEY]

    def test_purge_reaches_durable_when_reads_disabled(self, fast, durable):
        durable.set(DURABLE_KEY, VALID)
        ConfigResolver(fast, durable, make_source(error=OSError()), LoaderSettings()).resolve()

        assert durable.get(DURABLE_KEY) is None

    def test_delete_failure_is_swallowed(self, fast, enabled_settings):
        durable = MagicMock(spec=CacheTier)
        durable.name = "broken"
        durable.get.return_value = None
        durable.delete.side_effect = CacheBackendError("down")

        resolver = ConfigResolver(fast, durable, make_source(error=OSError()), enabled_settings)

        assert resolver.resolve() == {}

    def test_missing_file_on_disk(self, fast, durable, settings):
        resolver = ConfigResolver(fast, durable, ConfigSource(settings), settings)

        config, report = resolver.resolve_with_report()

        assert config == {}
        assert report.outcomes[-1].fetcher is FetcherName.YAML
        assert report.outcomes[-1].status is FetchStatus.ERROR


class TestIdempotence:
    """Resolving twice without external changes yields the same value."""

    def test_cold_then_warm(self, fast, durable, enabled_settings):
        source = make_source(VALID)
        resolver = ConfigResolver(fast, durable, source, enabled_settings)

        first, first_report = resolver.resolve_with_report()
        second, second_report = resolver.resolve_with_report()

        assert first == second == VALID
        assert first_report.winner is FetcherName.YAML
        assert second_report.winner is FetcherName.CACHE
        assert source.load.call_count == 1

    def test_empty_twice(self, fast, durable, enabled_settings):
        resolver = ConfigResolver(fast, durable, make_source("bad"), enabled_settings)
        assert resolver.resolve() == resolver.resolve() == {}

    def test_file_source_round_trip(self, settings, write_config, tmp_path: Path):
        from shortcode_loader import FileCacheTier

        write_config()
        durable = FileCacheTier(tmp_path / "cache")
        fast = MemoryCacheTier()

        first = ConfigResolver(fast, durable, ConfigSource(settings), settings).resolve()
        fast.clear()
        second, report = ConfigResolver(
            fast, durable, ConfigSource(settings), settings
        ).resolve_with_report()

        assert first == second
        assert report.winner is FetcherName.TRANSIENT


class TestResolverEvents:
    """Events published during resolution."""

    def test_resolved_event_carries_report(self, fast, durable, enabled_settings, event_bridge):
        reports = []
        event_bridge.subscribe(EventNames.CONFIG_RESOLVED, reports.append)

        ConfigResolver(
            fast, durable, make_source(VALID), enabled_settings, event_bridge=event_bridge
        ).resolve()

        assert len(reports) == 1
        assert reports[0].winner is FetcherName.YAML

    def test_purge_and_failure_events(self, fast, durable, enabled_settings, event_bridge):
        purged = []
        failures = []
        event_bridge.subscribe(EventNames.CONFIG_CACHE_PURGED, purged.append)
        event_bridge.subscribe(
            EventNames.CONFIG_FETCH_FAILED, lambda name, error: failures.append((name, error))
        )

        error = ConfigSourceError("missing")
        ConfigResolver(
            fast, durable, make_source(error=error), enabled_settings, event_bridge=event_bridge
        ).resolve()

        assert purged == [[FAST_KEY, DURABLE_KEY]]
        assert failures == [(FetcherName.YAML, error)]

    def test_failing_subscriber_does_not_break_resolution(
        self, fast, durable, enabled_settings, event_bridge
    ):
        def explode(_report):
            raise ValueError("subscriber bug")

        event_bridge.subscribe(EventNames.CONFIG_RESOLVED, explode)

        config = ConfigResolver(
            fast, durable, make_source(VALID), enabled_settings, event_bridge=event_bridge
        ).resolve()

        assert config == VALID
