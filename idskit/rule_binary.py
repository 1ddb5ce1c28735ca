"""Reading and writing the compiled binary rule format."""

from __future__ import annotations

import struct
import zlib
from typing import Iterable

from idskit.rule_model import (
    FILE_HEADER_FORMAT,
    FILE_HEADER_SIZE,
    FILE_MAGIC,
    FILE_VERSION,
    IP_FIELD_SIZE,
    LENGTH_PREFIX_FORMAT,
    LENGTH_PREFIX_SIZE,
    RULE_HEADER_FORMAT,
    RULE_HEADER_SIZE,
    RULE_OPTION_FORMAT,
    RULE_OPTION_SIZE,
    Action,
    Direction,
    FileHeader,
    OptionType,
    Protocol,
    Rule,
    RuleHeader,
    RuleOption,
)

_U32 = 0xFFFFFFFF


class RuleFormatError(ValueError):
    """Raised when binary rule data cannot be written or read."""


def rule_binary_size(rule: Rule) -> int:
    """Number of bytes one rule takes in the binary format."""
    return rule.calculate_binary_size() & _U32


def rules_data_size(rules: Iterable[Rule]) -> int:
    """Number of bytes all rules take after the file header."""
    return sum(rule_binary_size(rule) for rule in rules) & _U32


def _encode_ip(ip: str) -> bytes:
    # The field keeps room for a terminating NUL; struct pads the rest.
    return ip.encode("utf-8")[: IP_FIELD_SIZE - 1]


def _pack_rule(rule: Rule) -> bytes:
    header = rule.header
    parts = [
        struct.pack(
            RULE_HEADER_FORMAT,
            int(header.action) & 0xFF,
            int(header.protocol) & 0xFF,
            _encode_ip(header.src_ip),
            _encode_ip(header.dst_ip),
            header.src_port & 0xFFFF,
            header.dst_port & 0xFFFF,
            int(header.direction) & 0xFF,
            header.option_count & _U32,
            header.rule_size & _U32,
        )
    ]
    for option in rule.options:
        value = option.value.encode("utf-8")
        parts.append(
            struct.pack(RULE_OPTION_FORMAT, int(option.type) & _U32, option.value_len & _U32)
        )
        parts.append(struct.pack(LENGTH_PREFIX_FORMAT, len(value)))
        parts.append(value)
    return b"".join(parts)


def serialize(rules: Iterable[Rule]) -> bytes:
    """Encode rules as a binary rule file, checksum included."""
    rules = list(rules)
    body = b"".join(_pack_rule(rule) for rule in rules)
    header = FileHeader(
        rule_count=len(rules),
        data_size=rules_data_size(rules),
        checksum=zlib.crc32(body),
    )
    head = struct.pack(
        FILE_HEADER_FORMAT,
        header.magic,
        header.version,
        header.timestamp,
        header.rule_count,
        header.header_size,
        header.data_size,
        header.checksum,
    )
    return head + body


def serialize_to_file(rules: Iterable[Rule], filename) -> None:
    """Write rules to a binary rule file."""
    data = serialize(rules)
    try:
        with open(filename, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise RuleFormatError(f"Cannot open file for writing: {filename}") from exc


class _Reader:
    """Sequential reader over a bytes object."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def take(self, size: int, error: str) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise RuleFormatError(error)
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def unpack(self, fmt: str, size: int, error: str) -> tuple:
        return struct.unpack(fmt, self.take(size, error))


def _enum_or_raw(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _decode_ip(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", "replace")


def _validate_header(header: FileHeader) -> None:
    if header.magic != FILE_MAGIC:
        raise RuleFormatError("Invalid file magic number")
    if header.version != FILE_VERSION:
        raise RuleFormatError("Unsupported file version")
    if header.header_size != FILE_HEADER_SIZE:
        raise RuleFormatError("Invalid header size")


def _read_rule(reader: _Reader) -> Rule:
    (
        action,
        protocol,
        src_ip,
        dst_ip,
        src_port,
        dst_port,
        direction,
        option_count,
        rule_size,
    ) = reader.unpack(RULE_HEADER_FORMAT, RULE_HEADER_SIZE, "Failed to read rule header")
    header = RuleHeader(
        action=_enum_or_raw(Action, action),
        protocol=_enum_or_raw(Protocol, protocol),
        src_ip=_decode_ip(src_ip),
        dst_ip=_decode_ip(dst_ip),
        src_port=src_port,
        dst_port=dst_port,
        direction=_enum_or_raw(Direction, direction),
        option_count=option_count,
        rule_size=rule_size,
    )
    options = []
    for _ in range(option_count):
        option_type, value_len = reader.unpack(
            RULE_OPTION_FORMAT, RULE_OPTION_SIZE, "Failed to read rule option"
        )
        (length,) = reader.unpack(
            LENGTH_PREFIX_FORMAT, LENGTH_PREFIX_SIZE, "Failed to read string length"
        )
        value = reader.take(length, "Failed to read string data").decode("utf-8", "replace")
        options.append(RuleOption(_enum_or_raw(OptionType, option_type), value_len, value))
    return Rule(header=header, options=options)


def _decode(data: bytes) -> list[Rule]:
    reader = _Reader(data)
    fields = reader.unpack(FILE_HEADER_FORMAT, FILE_HEADER_SIZE, "Failed to read file header")
    header = FileHeader(*fields)
    _validate_header(header)
    return [_read_rule(reader) for _ in range(header.rule_count)]


def deserialize(data: bytes) -> list[Rule]:
    """Decode the rules held in binary rule data."""
    data = bytes(data)
    if len(data) < FILE_HEADER_SIZE:
        raise RuleFormatError("Data too small for file header")
    return _decode(data)


def deserialize_from_file(filename) -> list[Rule]:
    """Read the rules held in a binary rule file."""
    try:
        with open(filename, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise RuleFormatError(f"Cannot open file: {filename}") from exc
    return _decode(data)