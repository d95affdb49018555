"""pytest configuration and fixtures for shortcode_loader tests.

This module provides shared fixtures: cache tiers, loader settings rooted
in a temporary base directory, a configuration file writer and a fresh
EventBridge.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from shortcode_loader import EventBridge, LoaderSettings, MemoryCacheTier


SAMPLE_YAML = """\
namespace: tests.handlers.shortcode_handlers
shortcodes:
  greet: Greeter
  clock: Clock
  missing: NoSuchHandler
"""


@pytest.fixture(autouse=True)
def _clear_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of location discovery."""
    for name in (
        "SHORTCODE_YAML_FILE",
        "SHORTCODE_BASE_DIR",
        "SHORTCODE_DURABLE_CACHE",
        "SHORTCODE_DURABLE_CACHE_DIR",
        "SHORTCODE_CACHE_KEY",
        "SHORTCODE_DURABLE_CACHE_KEY",
        "SHORTCODE_DURABLE_CACHE_TTL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def event_bridge() -> Generator[EventBridge, None, None]:
    """Provide a fresh, started EventBridge for each test."""
    from shortcode_loader import EventBridge

    EventBridge.reset_instance()
    bridge = EventBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()
    EventBridge.reset_instance()


@pytest.fixture
def fast_cache() -> MemoryCacheTier:
    from shortcode_loader import MemoryCacheTier

    return MemoryCacheTier(name="fast")


@pytest.fixture
def durable_cache() -> MemoryCacheTier:
    from shortcode_loader import MemoryCacheTier

    return MemoryCacheTier(name="durable")


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    theme = tmp_path / "theme"
    theme.mkdir()
    return theme


@pytest.fixture
def settings(base_dir: Path) -> LoaderSettings:
    from shortcode_loader import LoaderSettings

    return LoaderSettings(base_dir=base_dir, durable_cache_enabled=True)


@pytest.fixture
def write_config(base_dir: Path) -> Callable[[str], Path]:
    """Write YAML text to the default configuration path."""

    def _write(content: str = SAMPLE_YAML) -> Path:
        path = base_dir / ".config" / "shortcodes.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
