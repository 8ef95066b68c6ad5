"""Configuration loading from environment variables and the YAML target file."""

import math
import os
import re
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

from spider.ports.settings import SpiderSettingsPort
from spider.ports.target import TargetPort

__all__ = ["Settings", "TargetConfig", "load_settings", "parse_duration"]

load_dotenv()

_http_url_adapter = TypeAdapter(HttpUrl)

DEFAULT_CONFIG_FILE = "./config.yml"
DEFAULT_LISTEN = ":8080"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_HTTP_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def parse_duration(value: Any) -> float | None:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) or Go-style strings such as
    ``"1m30s"``, ``"500ms"`` or ``"2h"``.

    Args:
        value: Raw value from the YAML file.

    Returns:
        Duration in seconds, or None when unset.

    Raises:
        ValueError: If the value is negative or not a duration.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        try:
            seconds = float(value)
        except OverflowError:
            raise ValueError(f"Duration must be finite: {value!r}") from None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            seconds = float(text)
        except ValueError:
            seconds = 0.0
            pos = 0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos == 0 or pos != len(text):
                raise ValueError(f"Invalid duration: {value!r}") from None
    else:
        raise ValueError(f"Invalid duration: {value!r}")

    if not math.isfinite(seconds):
        raise ValueError(f"Duration must be finite: {value!r}")
    if seconds < 0:
        raise ValueError(f"Duration must not be negative: {value!r}")
    return seconds


class TargetConfig(BaseModel):
    """One entry of the ``targets`` mapping.

    Attributes:
        url: Absolute http(s) URL to probe.
        method: HTTP method (GET/HEAD/POST/...).
        timeout: Per-target timeout in seconds.
        spidertime: Per-target poll interval in seconds.
    """

    url: str = Field(..., description="Absolute http(s) URL to probe.")
    method: str = Field(default="GET", description="HTTP method used for every probe.")
    timeout: float | None = Field(default=None, description="Per-target timeout.")
    spidertime: float | None = Field(default=None, description="Per-target poll interval.")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that the target is an absolute HTTP(S) URL.

        Args:
            v: URL to validate.

        Returns:
            The URL, unchanged.

        Raises:
            ValueError: If URL is invalid or the scheme is not http/https.
        """
        try:
            url = _http_url_adapter.validate_python(v)
        except Exception as e:
            raise ValueError(f"Invalid target URL: {e}") from e
        if url.scheme not in ("http", "https"):
            raise ValueError(f"unsupported scheme {url.scheme!r}")
        return v

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Upper-case the method and reject non-token characters."""
        if not _HTTP_TOKEN.match(v):
            raise ValueError(f"Invalid HTTP method: {v!r}")
        return v.upper()

    @field_validator("timeout", "spidertime", mode="before")
    @classmethod
    def validate_duration(cls, v: Any) -> float | None:
        """Convert duration strings to seconds."""
        return parse_duration(v)


class Settings(BaseModel):
    """Runtime configuration for the spider service.

    Attributes:
        config_file: Path to the YAML target file.
        listen: Metrics listener address, ``[host]:port``.
        verbose: Emit per-tick diagnostic logs.
        timeout: Global timeout in seconds.
        spider: Global poll interval in seconds.
        targets: Targets keyed by unique name (loaded from file).
    """

    config_file: str = Field(default=DEFAULT_CONFIG_FILE, description="YAML target file.")
    listen: str = Field(default=DEFAULT_LISTEN, description="Metrics listen address.")
    verbose: bool = Field(default=False, description="Per-tick diagnostic logs.")
    timeout: float | None = Field(default=None, description="Global probe timeout.")
    spider: float | None = Field(default=None, description="Global poll interval.")
    targets: dict[str, TargetConfig] = Field(
        default_factory=dict,
        description="Targets keyed by name (populated from file).",
    )

    @field_validator("listen")
    @classmethod
    def validate_listen(cls, v: str) -> str:
        """Validate the ``[host]:port`` listen address."""
        host, sep, port = v.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"Invalid listen address: {v!r}")
        return v

    @field_validator("timeout", "spider", mode="before")
    @classmethod
    def validate_duration(cls, v: Any) -> float | None:
        """Convert duration strings to seconds."""
        return parse_duration(v)

    def load_targets(self) -> None:
        """Load and validate targets and global defaults from the YAML file.

        Raises:
            ValueError: If file not found, invalid YAML, wrong format or invalid target.
        """
        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ValueError(f"Config file not found: {self.config_file}") from e
        except yaml.YAMLError as e:
            raise ValueError(f"Config file contains invalid YAML: {self.config_file}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Config file must be a YAML mapping")

        raw_targets = data.get("targets") or {}
        if not isinstance(raw_targets, dict):
            raise ValueError("'targets' must be a mapping of name to target")

        targets: dict[str, TargetConfig] = {}
        for name, raw in raw_targets.items():
            key = str(name)
            if key in targets:
                raise ValueError(f"duplicate target name {key!r}")
            if not isinstance(raw, dict):
                raise ValueError(f"invalid target {name!r}: must be a mapping")
            bad_keys = [k for k in raw if not isinstance(k, str)]
            if bad_keys:
                raise ValueError(f"invalid target {name!r}: non-string keys {bad_keys!r}")
            try:
                targets[key] = TargetConfig(**raw)
            except ValueError as e:
                raise ValueError(f"invalid target {name!r}: {e}") from e

        self.timeout = parse_duration(data.get("timeout"))
        self.spider = parse_duration(data.get("spider"))
        self.targets = targets

    def summary(self) -> str:
        """Return a one-line description of the loaded configuration."""
        return (
            f"targets={len(self.targets)}, "
            f"timeout={self.timeout or '<default>'}, "
            f"spider={self.spider or '<default>'}, "
            f"listen={self.listen}"
        )

    def to_port(self) -> SpiderSettingsPort:
        """Convert to the settings port consumed by the core.

        Returns:
            Targets and global defaults as plain DTOs.
        """
        return SpiderSettingsPort(
            targets=[
                TargetPort(
                    name=name,
                    url=target.url,
                    method=target.method,
                    timeout_sec=target.timeout,
                    interval_sec=target.spidertime,
                )
                for name, target in self.targets.items()
            ],
            timeout_sec=self.timeout,
            interval_sec=self.spider,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment and the target file.

    Optional environment variables:
    - SPIDER_CONFIG_FILE: Path to the YAML target file (default ./config.yml).
    - SPIDER_LISTEN: Metrics listen address (default :8080).
    - SPIDER_VERBOSE: Per-tick diagnostic logs (default false).

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If an environment variable is invalid.
        ValueError: If the configuration file is invalid.
    """
    config_file = os.getenv("SPIDER_CONFIG_FILE", DEFAULT_CONFIG_FILE)
    listen = os.getenv("SPIDER_LISTEN", DEFAULT_LISTEN)
    verbose_raw = os.getenv("SPIDER_VERBOSE", "false")

    verbose_norm = verbose_raw.strip().lower()
    if verbose_norm in ("1", "true", "yes", "on"):
        verbose = True
    elif verbose_norm in ("", "0", "false", "no", "off"):
        verbose = False
    else:
        raise RuntimeError(f"SPIDER_VERBOSE must be a boolean (got: {verbose_raw})")

    settings = Settings(config_file=config_file, listen=listen, verbose=verbose)

    # Load and validate target file
    settings.load_targets()

    return settings
