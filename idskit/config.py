"""Configuration store with a simple YAML/JSON line reader and typed views."""

from __future__ import annotations

import contextlib
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any

from idskit.netutils import trim

_log = logging.getLogger(__name__)

_LL_MIN, _LL_MAX = -(2**63), 2**63 - 1
_ULL_MAX = 2**64 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_LEADING_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.ASCII | re.IGNORECASE,
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "ALERT")
VALID_LOG_FORMATS = ("tcpdump", "json", "csv")


def _to_signed(text: str) -> int:
    """Read a leading signed 64-bit integer, as stoll does."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _LL_MIN <= value <= _LL_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _to_unsigned(text: str) -> int:
    """Read a leading unsigned 64-bit integer, as stoull does (negatives wrap)."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if abs(value) > _ULL_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value % (_ULL_MAX + 1)


def _to_float(text: str) -> float:
    """Read a leading floating-point number, as stod does."""
    match = _LEADING_FLOAT.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    literal = match.group(1)
    value = float(literal)
    if math.isinf(value) and "inf" not in literal.lower():
        raise ValueError(f"number out of range: {text!r}")
    return value


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _is_size_key(key: str) -> bool:
    return "size" in key or "buffer" in key or "length" in key


def _parse_value(key: str, value: str, timeouts_signed: bool) -> Any:
    """Turn a text value into a bool, float, int or str."""
    if value in ("true", "false"):
        return value == "true"
    try:
        if "." in value:
            return _to_float(value)
        if timeouts_signed and (key in ("timeout_ms", "snaplen") or "timeout" in key):
            return _to_signed(value)
        if _is_size_key(key):
            return _to_unsigned(value)
        return _to_signed(value)
    except ValueError:
        return value


def _type_matches(value: Any, default: Any) -> bool:
    if default is None:
        return True
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    return isinstance(value, type(default))


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, "g")
    if isinstance(value, str):
        return f'"{value}"'
    return '"unknown"'


@dataclass
class CommandLineOptions:
    """Options given on the command line."""

    config_file: str = ""
    interface: str = ""
    rule_files: list[str] = field(default_factory=list)
    log_level: str = ""
    output_format: str = ""
    debug_mode: bool = False
    save_config: bool = False


class Config:
    """Flat key/value settings, with dotted keys for sections."""

    def __init__(self, file_path=None) -> None:
        self._settings: dict[str, Any] = {}
        self.validation_errors: list[str] = []
        if file_path is not None:
            with contextlib.suppress(OSError):
                self.load_from_file(file_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Value of key, or default if missing or of another type than default."""
        if key not in self._settings:
            return default
        value = self._settings[key]
        if not _type_matches(value, default):
            _log.debug(
                "Type mismatch for key %r: expected %s, found %s",
                key,
                type(default).__name__,
                type(value).__name__,
            )
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value

    def has_key(self, key: str) -> bool:
        return key in self._settings

    def remove(self, key: str) -> bool:
        """Remove key; return whether it was present."""
        return self._settings.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        self._settings.clear()

    def keys(self) -> list[str]:
        return list(self._settings)

    def load_from_file(self, file_path) -> None:
        """Load YAML-style settings from a file; raises OSError if unreadable."""
        with open(file_path, encoding="utf-8") as handle:
            content = handle.read()
        self.load_from_yaml(content)

    def load_from_yaml(self, yaml_content: str) -> None:
        """Read simple "section:" / "key: value" lines."""
        section = ""
        for raw in yaml_content.split("\n"):
            line = trim(raw)
            if not line or line.startswith("#"):
                continue
            if line.endswith(":"):
                section = line[:-1]
                continue
            key, colon, value = line.partition(":")
            if not colon:
                continue
            key = trim(key)
            value = _strip_quotes(trim(value))
            full_key = f"{section}.{key}" if section else key
            self.set(full_key, _parse_value(key, value, timeouts_signed=True))

    def load_from_json(self, json_content: str) -> None:
        """Read one "key": value pair per line from JSON-like text."""
        for raw in json_content.split("\n"):
            line = trim(raw)
            if not line or line[0] in "/#":
                continue
            key, colon, value = line.partition(":")
            if not colon:
                continue
            key = trim(key)
            value = trim(value)
            if value.endswith(","):
                value = value[:-1]
            value = _strip_quotes(value)
            self.set(key, _parse_value(key, value, timeouts_signed=False))

    def save_to_file(self, file_path) -> None:
        """Write the settings as YAML; raises OSError on failure."""
        with open(file_path, "w", encoding="utf-8") as handle:
            handle.write(self.to_yaml())

    def to_yaml(self) -> str:
        """YAML text grouped by the part of each key before its first dot."""
        sections: dict[str, list[tuple[str, Any]]] = {"": []}
        for key, value in self._settings.items():
            section, dot, subkey = key.partition(".")
            if dot:
                sections.setdefault(section, []).append((subkey, value))
            else:
                sections[""].append((key, value))

        lines = []
        for section, pairs in sections.items():
            if section:
                lines.append(f"{section}:\n")
            indent = "  " if section else ""
            lines.extend(f"{indent}{key}: {_format_value(value)}\n" for key, value in pairs)
            if section:
                lines.append("\n")
        return "".join(lines)

    def __str__(self) -> str:
        return self.to_yaml()

    def validate(self) -> bool:
        """Check known settings; errors are left in validation_errors."""
        errors = []
        if self.has_key("capture.interface") and not self.get("capture.interface", ""):
            errors.append("Capture interface cannot be empty")
        if self.has_key("capture.timeout_ms") and self.get("capture.timeout_ms", 1000) < 0:
            errors.append("Capture timeout must be non-negative")
        if self.has_key("capture.snaplen"):
            snaplen = self.get("capture.snaplen", 65535)
            if snaplen <= 0 or snaplen > 65535:
                errors.append("Capture snaplen must be between 1 and 65535")
        if self.has_key("logging.level"):
            level = self.get("logging.level", "")
            if level not in VALID_LOG_LEVELS:
                errors.append(f"Invalid logging level: {level}")
        if self.has_key("logging.format"):
            fmt = self.get("logging.format", "")
            if fmt not in VALID_LOG_FORMATS:
                errors.append(f"Invalid logging format: {fmt}")
        self.validation_errors = errors
        return not errors

    def apply_command_line_options(self, options: CommandLineOptions) -> None:
        """Override settings with those given on the command line."""
        if options.interface:
            self.set("capture.interface", options.interface)
        if options.log_level:
            self.set("logging.level", options.log_level)
        if options.output_format:
            self.set("logging.format", options.output_format)
        if options.debug_mode:
            self.set("logging.level", "DEBUG")
        if options.rule_files:
            self.set("rules.rule_files.0", options.rule_files[0])


_MISSING = object()


@dataclass
class CaptureConfig:
    interface: str = "eth0"
    buffer_size: int = 65536
    timeout_ms: int = 1000
    snaplen: int = 65535
    promiscuous: bool = True
    filter: str = ""

    @classmethod
    def from_config(cls, config: Config) -> "CaptureConfig":
        return cls(
            interface=config.get("capture.interface", "eth0"),
            buffer_size=config.get("capture.buffer_size", 65536),
            timeout_ms=config.get("capture.timeout_ms", 1000),
            snaplen=config.get("capture.snaplen", 65535),
            promiscuous=config.get("capture.promiscuous", True),
            filter=config.get("capture.filter", ""),
        )


@dataclass
class RuleConfig:
    rule_files: list[str] = field(default_factory=list)
    auto_reload: bool = True
    reload_interval: int = 300

    @classmethod
    def from_config(cls, config: Config) -> "RuleConfig":
        return cls(
            auto_reload=config.get("rules.auto_reload", True),
            reload_interval=config.get("rules.reload_interval", 300),
        )


@dataclass
class PerformanceConfig:
    worker_threads: int = 4
    queue_size: int = 10000
    batch_size: int = 100
    cpu_affinity: bool = True

    @classmethod
    def from_config(cls, config: Config) -> "PerformanceConfig":
        return cls(
            queue_size=config.get("performance.queue_size", 10000),
            batch_size=config.get("performance.batch_size", 100),
            cpu_affinity=config.get("performance.cpu_affinity", True),
        )