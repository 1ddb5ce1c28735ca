"""Base types shared by protocol parsers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum


class ProtocolType(IntEnum):
    """Protocol identifiers; ICMP shares its value with ETHERNET and is an alias."""

    UNKNOWN = 0
    ETHERNET = 1
    IP = 2
    ICMP = 1
    TCP = 6
    UDP = 17
    ARP = 63
    HTTP = 80
    DNS = 53
    DHCP = 67
    FTP = 21
    SMTP = 25
    POP3 = 110
    IMAP = 143
    SSL = 443
    TLS = 12345


@dataclass
class ParsingResult:
    """Outcome of parsing a packet, with ordered key/value findings."""

    protocol_type: ProtocolType = ProtocolType.UNKNOWN
    is_valid: bool = False
    description: str = ""
    findings: list[tuple[str, str]] = field(default_factory=list)

    def add_finding(self, key: str, value: str) -> None:
        self.findings.append((key, value))

    def clear_findings(self) -> None:
        """Drop findings and description and mark the result invalid."""
        self.findings.clear()
        self.description = ""
        self.is_valid = False

    def get_finding(self, key: str) -> str:
        """Value of the first finding with this key, or "" if none."""
        return next((value for name, value in self.findings if name == key), "")

    def has_finding(self, key: str) -> bool:
        return any(name == key for name, _ in self.findings)


class ProtocolParser(ABC):
    """Interface every protocol parser implements."""

    version = "1.0.0"
    description = "Protocol parser"
    enabled = True
    min_packet_size = 0
    priority = 0

    @property
    @abstractmethod
    def protocol_type(self) -> ProtocolType:
        """The protocol this parser handles."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Parser name for identification."""

    @abstractmethod
    def parse(self, packet_data: bytes) -> ParsingResult:
        """Parse packet data and report what was found."""

    @abstractmethod
    def can_parse(self, packet_data: bytes) -> bool:
        """Whether this parser can handle the packet data."""

    def validate_packet_size(self, packet_data: bytes, required_size: int) -> bool:
        return len(packet_data) >= required_size

    def extract_uint16_be(self, data: bytes) -> int:
        """Big-endian 16-bit value from the first two bytes."""
        if len(data) < 2:
            raise ValueError("need at least 2 bytes")
        return int.from_bytes(bytes(data[:2]), "big")

    def extract_uint32_be(self, data: bytes) -> int:
        """Big-endian 32-bit value from the first four bytes."""
        if len(data) < 4:
            raise ValueError("need at least 4 bytes")
        return int.from_bytes(bytes(data[:4]), "big")

    def format_hex(self, value: int, width: int = 4) -> str:
        """Value as 0x followed by upper-case hex, zero-padded to width."""
        return f"0x{value:0{width}X}"