"""Data model for rules in the compiled binary rule format."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, field
from enum import IntEnum

FILE_MAGIC = 0x534E5254
"""Magic number that opens every binary rule file ("SNRT")."""

FILE_VERSION = 0x00010000
"""Binary format version 1.0."""

# Little-endian layouts of the fixed-size records in a binary rule file.
FILE_HEADER_FORMAT = "<IIQIIII"
RULE_HEADER_FORMAT = "<BB16s16sHHBxII"
RULE_OPTION_FORMAT = "<II"
LENGTH_PREFIX_FORMAT = "<I"

FILE_HEADER_SIZE = struct.calcsize(FILE_HEADER_FORMAT)
RULE_HEADER_SIZE = struct.calcsize(RULE_HEADER_FORMAT)
RULE_OPTION_SIZE = struct.calcsize(RULE_OPTION_FORMAT)
LENGTH_PREFIX_SIZE = struct.calcsize(LENGTH_PREFIX_FORMAT)

IP_FIELD_SIZE = 16
"""Bytes reserved for an IP string in a rule header, terminator included."""


class Action(IntEnum):
    ALERT = 0
    LOG = 1
    PASS = 2
    DROP = 3


class Protocol(IntEnum):
    TCP = 0
    UDP = 1
    ICMP = 2
    IP = 3


class Direction(IntEnum):
    UNI = 0
    BI = 1


class OptionType(IntEnum):
    CONTENT = 0
    MSG = 1
    SID = 2
    REV = 3
    CLASSTYPE = 4
    PRIORITY = 5
    METADATA = 6
    FLOW = 7
    FLAGS = 8


@dataclass
class FileHeader:
    """Header at the start of a binary rule file."""

    magic: int = FILE_MAGIC
    version: int = FILE_VERSION
    timestamp: int = field(default_factory=lambda: int(time.time()))
    rule_count: int = 0
    header_size: int = FILE_HEADER_SIZE
    data_size: int = 0
    checksum: int = 0


@dataclass
class RuleOption:
    """One rule option: its type, declared value length and string value."""

    type: OptionType
    value_len: int
    value: str = ""


@dataclass
class RuleHeader:
    """Fixed part of a rule: action, protocol, endpoints and direction."""

    action: Action = Action.ALERT
    protocol: Protocol = Protocol.TCP
    src_ip: str = ""
    dst_ip: str = ""
    src_port: int = 0
    dst_port: int = 0
    direction: Direction = Direction.UNI
    option_count: int = 0
    rule_size: int = 0


@dataclass
class Rule:
    """A complete rule: header plus its options."""

    header: RuleHeader = field(default_factory=RuleHeader)
    options: list[RuleOption] = field(default_factory=list)

    @property
    def string_data(self) -> list[str]:
        """The string values of the options, in order."""
        return [option.value for option in self.options]

    def calculate_binary_size(self) -> int:
        """Number of bytes this rule occupies in the binary format."""
        return RULE_HEADER_SIZE + sum(
            RULE_OPTION_SIZE + LENGTH_PREFIX_SIZE + len(option.value.encode("utf-8"))
            for option in self.options
        )


_ACTION_NAMES = {
    Action.ALERT: "alert",
    Action.LOG: "log",
    Action.PASS: "pass",
    Action.DROP: "drop",
}

_PROTOCOL_NAMES = {
    Protocol.TCP: "tcp",
    Protocol.UDP: "udp",
    Protocol.ICMP: "icmp",
    Protocol.IP: "ip",
}

_DIRECTION_NAMES = {
    Direction.UNI: "uni",
    Direction.BI: "bi",
}

_OPTION_TYPE_NAMES = {
    OptionType.CONTENT: "content",
    OptionType.MSG: "msg",
    OptionType.SID: "sid",
    OptionType.REV: "rev",
    OptionType.CLASSTYPE: "classtype",
    OptionType.PRIORITY: "priority",
    OptionType.METADATA: "metadata",
    OptionType.FLOW: "flow",
    OptionType.FLAGS: "flags",
}


def _name_of(enum_cls, names, value) -> str:
    try:
        return names[enum_cls(value)]
    except (ValueError, KeyError):
        return "unknown"


def action_to_string(action) -> str:
    return _name_of(Action, _ACTION_NAMES, action)


def protocol_to_string(protocol) -> str:
    return _name_of(Protocol, _PROTOCOL_NAMES, protocol)


def direction_to_string(direction) -> str:
    return _name_of(Direction, _DIRECTION_NAMES, direction)


def option_type_to_string(option_type) -> str:
    return _name_of(OptionType, _OPTION_TYPE_NAMES, option_type)