"""Source of truth for the shortcode configuration.

This module locates and parses the YAML configuration file. The location
follows this priority order:
1. The override environment variable (SHORTCODE_YAML_FILE by default)
   - an existing file is used verbatim
   - a stream location (``scheme://...``) is used verbatim
   - anything else is made absolute against the base directory
2. ``<base_dir>/.config/shortcodes.yaml``

Supported locations are plain paths, ``file://`` URLs and ``http(s)://``
URLs (fetched with httpx). Parsing uses ``yaml.safe_load``.

Example:
    >>> source = ConfigSource(LoaderSettings(base_dir="/srv/theme"))
    >>> source.config_location()
    '/srv/theme/.config/shortcodes.yaml'
    >>> config = source.load()
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx
import yaml

from .exceptions import ConfigParseError, ConfigSourceError
from .logging import log_debug
from .types import LoaderSettings

# scheme://... (a single drive letter such as "C:" is not a scheme)
STREAM_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]+://")

HTTP_SCHEMES = ("http", "https")


class ConfigSource:
    """Reads and parses the shortcode configuration file.

    Attributes:
        settings: Loader settings (base directory, override variable, timeout).
    """

    def __init__(
        self,
        settings: LoaderSettings | None = None,
        environ: Mapping[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            settings: Loader settings. Defaults to LoaderSettings().
            environ: Environment mapping. Defaults to os.environ.
            http_client: Client used for http(s) locations. A short-lived
                client is created per request when omitted.
        """
        self.settings = settings or LoaderSettings()
        self._environ = environ
        self._http_client = http_client
        self._base_dir: Path | None = None

    def get_env(self, name: str) -> str:
        """Return an environment variable, or an empty string when unset."""
        env = os.environ if self._environ is None else self._environ
        return env.get(name) or ""

    def base_dir(self) -> Path:
        """Return the base directory, memoized for the lifetime of the source."""
        if self._base_dir is None:
            self._base_dir = self.settings.resolved_base_dir()
        return self._base_dir

    def config_location(self) -> str:
        """Return the configuration file path or URL to read."""
        override = self.get_env(self.settings.config_env_var)

        if override:
            if Path(override).is_file():
                return override

            # Streams cannot be made absolute
            if STREAM_PATTERN.match(override):
                return override

            return self._make_absolute(override)

        return str(self.base_dir() / self.settings.default_relative_path)

    def load(self) -> Any:
        """Read and parse the configuration.

        Returns:
            The parsed YAML document (any YAML value; shape is validated
            by the resolver).

        Raises:
            ConfigSourceError: If the location cannot be read.
            ConfigParseError: If the content is not valid YAML.
        """
        location = self.config_location()
        content = self.read(location)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Failed to parse {location}: {e}", location=location) from e

        log_debug(f"Parsed shortcode configuration from {location}", {"location": location})
        return data

    def read(self, location: str) -> str:
        """Read raw configuration text from a path or URL.

        Raises:
            ConfigSourceError: If the location cannot be read.
        """
        if STREAM_PATTERN.match(location):
            scheme = urlparse(location).scheme.lower()
            if scheme in HTTP_SCHEMES:
                return self._read_http(location)
            if scheme == "file":
                return self._read_file(url2pathname(urlparse(location).path), location)
            raise ConfigSourceError(f"Unsupported stream scheme: {scheme}", location=location)

        return self._read_file(location, location)

    def _make_absolute(self, path: str) -> str:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.base_dir() / candidate
        return os.path.normpath(candidate)

    def _read_file(self, path: str, location: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigSourceError(f"Failed to read {location}: {e}", location=location) from e

    def _read_http(self, url: str) -> str:
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, timeout=self.settings.http_timeout)
            else:
                with httpx.Client(timeout=self.settings.http_timeout) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ConfigSourceError(
                f"Failed to fetch {url}: HTTP {e.response.status_code}", location=url
            ) from e
        except httpx.HTTPError as e:
            raise ConfigSourceError(f"Failed to fetch {url}: {e}", location=url) from e

        return response.text


__all__ = ["ConfigSource", "STREAM_PATTERN"]
