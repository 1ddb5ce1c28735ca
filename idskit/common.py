"""Shared enumerations used across the intrusion detection components."""

from __future__ import annotations

from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Error codes grouped by subsystem (hundreds digit)."""

    SUCCESS = 0

    INVALID_CONFIG = 100
    CONFIG_FILE_NOT_FOUND = 101
    CONFIG_PARSE_ERROR = 102

    PERMISSION_DENIED = 200
    INTERFACE_NOT_FOUND = 201
    SOCKET_ERROR = 202
    PACKET_CAPTURE_ERROR = 203
    CAPTURE_TIMEOUT = 204

    PROTOCOL_PARSE_ERROR = 300
    UNKNOWN_PROTOCOL = 301
    INVALID_PROTOCOL_DATA = 302
    PLUGIN_LOAD_ERROR = 303

    RULE_PARSE_ERROR = 400
    INVALID_RULE_SYNTAX = 401
    RULE_FILE_NOT_FOUND = 402
    RULE_VALIDATION_ERROR = 403

    LOG_INIT_ERROR = 500
    LOG_WRITE_ERROR = 501
    LOG_FILE_ERROR = 502

    MEMORY_ALLOCATION_ERROR = 600
    INVALID_ARGUMENT = 601
    NOT_IMPLEMENTED = 602
    INTERNAL_ERROR = 603


class ProtocolLayer(IntEnum):
    """Layers of the TCP/IP model."""

    LINK_LAYER = 1
    NETWORK_LAYER = 2
    TRANSPORT_LAYER = 3
    APPLICATION_LAYER = 4


class LogLevel(IntEnum):
    """Log severities, from least to most severe."""

    LOG_DEBUG = 0
    LOG_INFO = 1
    LOG_WARNING = 2
    LOG_ERROR = 3
    LOG_ALERT = 4


class RuleAction(Enum):
    """What to do when a rule matches."""

    ALERT = 0
    LOG = 1
    DROP = 2
    PASS = 3
    REJECT = 4


class RuleDirection(Enum):
    """Traffic direction a rule applies to."""

    UNIDIRECTIONAL = 0  # ->
    BIDIRECTIONAL = 1  # <>
    REVERSE = 2  # <-