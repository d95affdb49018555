"""Tests for the configuration source.

These tests verify:
- Location discovery (override variable, existing file, stream, relative, default)
- YAML parsing and parse errors
- File, file:// and http(s) reads
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from shortcode_loader import (
    ConfigParseError,
    ConfigSource,
    ConfigSourceError,
    LoaderSettings,
)


class TestConfigLocation:
    """Tests for ConfigSource.config_location()."""

    def test_default_location(self, base_dir: Path):
        source = ConfigSource(LoaderSettings(base_dir=base_dir), environ={})
        assert source.config_location() == str(base_dir / ".config" / "shortcodes.yaml")

    def test_override_existing_file_used_verbatim(self, base_dir: Path, tmp_path: Path):
        config = tmp_path / "elsewhere.yaml"
        config.write_text("shortcodes: {}")

        source = ConfigSource(
            LoaderSettings(base_dir=base_dir),
            environ={"SHORTCODE_YAML_FILE": str(config)},
        )
        assert source.config_location() == str(config)

    def test_override_relative_made_absolute(self, base_dir: Path):
        source = ConfigSource(
            LoaderSettings(base_dir=base_dir),
            environ={"SHORTCODE_YAML_FILE": "config/../shortcodes.yml"},
        )
        assert source.config_location() == str(base_dir / "shortcodes.yml")

    def test_override_absolute_missing_file_kept(self, base_dir: Path, tmp_path: Path):
        missing = tmp_path / "missing.yaml"
        source = ConfigSource(
            LoaderSettings(base_dir=base_dir),
            environ={"SHORTCODE_YAML_FILE": str(missing)},
        )
        assert source.config_location() == str(missing)

    @pytest.mark.parametrize(
        "stream",
        ["https://config.example.com/shortcodes.yaml", "s3://bucket/shortcodes.yaml"],
    )
    def test_override_stream_used_verbatim(self, base_dir: Path, stream: str):
        source = ConfigSource(
            LoaderSettings(base_dir=base_dir), environ={"SHORTCODE_YAML_FILE": stream}
        )
        assert source.config_location() == stream

    def test_empty_override_ignored(self, base_dir: Path):
        source = ConfigSource(
            LoaderSettings(base_dir=base_dir), environ={"SHORTCODE_YAML_FILE": ""}
        )
        assert source.config_location().endswith("shortcodes.yaml")

    def test_custom_override_variable(self, base_dir: Path):
        source = ConfigSource(
            LoaderSettings(base_dir=base_dir, config_env_var="MY_SHORTCODES"),
            environ={"MY_SHORTCODES": "custom.yaml"},
        )
        assert source.config_location() == str(base_dir / "custom.yaml")

    def test_reads_process_environment(self, base_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SHORTCODE_YAML_FILE", "from-env.yaml")
        source = ConfigSource(LoaderSettings(base_dir=base_dir))
        assert source.config_location() == str(base_dir / "from-env.yaml")

    def test_base_dir_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        source = ConfigSource(LoaderSettings(), environ={})
        assert source.base_dir() == tmp_path


class TestLoad:
    """Tests for ConfigSource.load() from files."""

    def test_parses_yaml(self, settings, write_config):
        write_config("namespace: App\nshortcodes:\n  greet: Greeter\n")

        assert ConfigSource(settings, environ={}).load() == {
            "namespace": "App",
            "shortcodes": {"greet": "Greeter"},
        }

    def test_non_mapping_document_is_returned_as_is(self, settings, write_config):
        write_config("- just\n- a list\n")
        assert ConfigSource(settings, environ={}).load() == ["just", "a list"]

    def test_empty_file_loads_none(self, settings, write_config):
        write_config("")
        assert ConfigSource(settings, environ={}).load() is None

    def test_missing_file_raises_source_error(self, settings):
        with pytest.raises(ConfigSourceError) as exc_info:
            ConfigSource(settings, environ={}).load()
        assert exc_info.value.location.endswith("shortcodes.yaml")

    def test_invalid_yaml_raises_parse_error(self, settings, write_config):
        write_config("shortcodes: [unclosed\n")

        with pytest.raises(ConfigParseError):
            ConfigSource(settings, environ={}).load()

    def test_undecodable_file_raises_source_error(self, settings, write_config):
        path = write_config()
        path.write_bytes(b"shortcodes:\n  greet: \xff\xfe\n")

        with pytest.raises(ConfigSourceError) as exc_info:
            ConfigSource(settings, environ={}).load()
        assert exc_info.value.location == str(path)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_parse_error_is_a_source_error(self):
        assert issubclass(ConfigParseError, ConfigSourceError)

    def test_file_url(self, settings, tmp_path: Path):
        config = tmp_path / "remote.yaml"
        config.write_text("shortcodes:\n  a: A\n")

        source = ConfigSource(settings, environ={"SHORTCODE_YAML_FILE": config.as_uri()})
        assert source.load() == {"shortcodes": {"a": "A"}}

    def test_unsupported_scheme(self, settings):
        source = ConfigSource(settings, environ={"SHORTCODE_YAML_FILE": "s3://bucket/x.yaml"})

        with pytest.raises(ConfigSourceError, match="Unsupported stream scheme"):
            source.load()


class TestHttpLoad:
    """Tests for http(s) configuration sources."""

    URL = "https://config.example.com/shortcodes.yaml"

    def _source(self, settings, handler) -> ConfigSource:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return ConfigSource(settings, environ={"SHORTCODE_YAML_FILE": self.URL}, http_client=client)

    def test_fetches_and_parses(self, settings):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text="shortcodes:\n  greet: Greeter\n")

        assert self._source(settings, handler).load() == {"shortcodes": {"greet": "Greeter"}}
        assert requested == [self.URL]

    def test_http_error_status(self, settings):
        source = self._source(settings, lambda request: httpx.Response(404))

        with pytest.raises(ConfigSourceError, match="HTTP 404") as exc_info:
            source.load()
        assert exc_info.value.location == self.URL

    def test_transport_error(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ConfigSourceError):
            self._source(settings, handler).load()
