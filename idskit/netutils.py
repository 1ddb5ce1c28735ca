"""Network, checksum, time, string and hex helpers.

IPv4 addresses are handled as integers in host byte order, so the first
octet of the dotted form is the most significant byte.
"""

from __future__ import annotations

import re
import signal
import socket
import time
from typing import Callable

INADDR_NONE = 0xFFFFFFFF

_SERVICE_NAMES = {
    20: "FTP",
    21: "FTP",
    22: "SSH",
    23: "Telnet",
    25: "SMTP",
    53: "DNS",
    80: "HTTP",
    110: "POP3",
    143: "IMAP",
    443: "HTTPS",
    993: "IMAPS",
    995: "POP3S",
}

_PROTOCOL_NAMES = {1: "ICMP", 6: "TCP", 17: "UDP"}
_PROTOCOL_NUMBERS = {name: number for number, name in _PROTOCOL_NAMES.items()}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_LEADING_HEX = re.compile(r"\s*([+-]?[0-9a-fA-F]+)", re.ASCII)
_TO_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")
_TO_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


# Network utilities

def ip_to_string(ip: int) -> str:
    """Dotted-quad form of an IPv4 address."""
    return socket.inet_ntoa((ip & 0xFFFFFFFF).to_bytes(4, "big"))


def string_to_ip(ip: str) -> int:
    """Parse an IPv4 address in any form inet_aton accepts."""
    try:
        packed = socket.inet_aton(ip)
    except (OSError, ValueError) as exc:
        raise ValueError(f"invalid IPv4 address: {ip!r}") from exc
    return int.from_bytes(packed, "big")


def is_valid_ip(ip: str) -> bool:
    """True if the text parses to an address other than INADDR_NONE."""
    try:
        return string_to_ip(ip) != INADDR_NONE
    except ValueError:
        return False


def is_private_ip(ip: int) -> bool:
    """True for 10.0.0.0/8, 172.16.0.0/12 and 192.168.0.0/16."""
    return (
        (ip & 0xFF000000) == 0x0A000000
        or (ip & 0xFFF00000) == 0xAC100000
        or (ip & 0xFFFF0000) == 0xC0A80000
    )


def is_broadcast_ip(ip: int) -> bool:
    return ip == 0xFFFFFFFF


def is_multicast_ip(ip: int) -> bool:
    """True for 224.0.0.0/4."""
    return (ip & 0xF0000000) == 0xE0000000


def mac_to_string(mac: bytes) -> str:
    """Colon-separated lower-case hex form of a six-byte MAC address."""
    return ":".join(f"{b:02x}" for b in bytes(mac[:6]))


def is_valid_mac(mac: str) -> bool:
    """True for text of the form xx:xx:xx:xx:xx:xx with hex digits."""
    if len(mac) != 17:
        return False
    return all(
        (ch == ":") if i % 3 == 2 else (ch in _HEX_DIGITS) for i, ch in enumerate(mac)
    )


def is_broadcast_mac(mac: bytes) -> bool:
    return all(b == 0xFF for b in bytes(mac[:6]))


def is_multicast_mac(mac: bytes) -> bool:
    """True if the group bit of the first octet is set."""
    return bool(mac[0] & 0x01)


def is_valid_port(port: int) -> bool:
    return 0 < port <= 0xFFFF


def is_well_known_port(port: int) -> bool:
    return 1 <= port <= 1023


def is_registered_port(port: int) -> bool:
    return 1024 <= port <= 49151


def get_service_name(port: int) -> str:
    return _SERVICE_NAMES.get(port, "Unknown")


def get_protocol_name(protocol: int) -> str:
    return _PROTOCOL_NAMES.get(protocol, "Unknown")


def get_protocol_number(name: str) -> int:
    """IP protocol number for ICMP, TCP or UDP (any case); 0 otherwise."""
    return _PROTOCOL_NUMBERS.get(to_upper(name), 0)


def is_valid_protocol(protocol: str) -> bool:
    return get_protocol_number(protocol) != 0


# Checksum utilities

def _ones_complement_sum(data: bytes, initial: int = 0) -> int:
    data = bytes(data)
    total = initial
    even = len(data) - len(data) % 2
    for index in range(0, even, 2):
        total += (data[index] << 8) | data[index + 1]
    if len(data) % 2:
        total += data[-1] << 8
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return total


def calculate_checksum(data: bytes) -> int:
    """Internet checksum (one's complement of the one's complement sum)."""
    return ~_ones_complement_sum(data) & 0xFFFF


def calculate_ip_checksum(ip_header: bytes) -> int:
    return calculate_checksum(ip_header)


def verify_checksum(data: bytes, checksum: int) -> bool:
    """True if the checksum matches the data."""
    return _ones_complement_sum(data, checksum & 0xFFFF) == 0xFFFF


# Time utilities

def format_timestamp(sec: int, usec: int) -> str:
    """Local time as YYYY-MM-DD HH:MM:SS.uuuuuu."""
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(sec))
    return f"{stamp}.{usec:06d}"


def format_duration(seconds: float) -> str:
    """Duration in seconds, minutes or hours with two decimals."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    if seconds < 3600:
        return f"{seconds / 60:.2f}m"
    return f"{seconds / 3600:.2f}h"


def get_current_timestamp() -> str:
    now = time.time()
    sec = int(now)
    usec = int((now - sec) * 1_000_000)
    return format_timestamp(sec, usec)


# String utilities

def split(text: str, delimiter: str) -> list[str]:
    """Split on a delimiter; a trailing empty field is dropped."""
    parts = text.split(delimiter)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def trim(text: str) -> str:
    """Strip leading and trailing spaces (spaces only)."""
    return text.strip(" ")


def to_lower(text: str) -> str:
    """Lower-case ASCII letters only."""
    return text.translate(_TO_LOWER)


def to_upper(text: str) -> str:
    """Upper-case ASCII letters only."""
    return text.translate(_TO_UPPER)


def starts_with(text: str, prefix: str) -> bool:
    return text.startswith(prefix)


def ends_with(text: str, suffix: str) -> bool:
    return text.endswith(suffix)


# Hex utilities

def to_hex(data: bytes) -> str:
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    """Decode hex two characters at a time; each pair is read like strtol."""
    result = bytearray()
    for start in range(0, len(text), 2):
        pair = text[start : start + 2]
        match = _LEADING_HEX.match(pair)
        if match is None:
            raise ValueError(f"invalid hex byte: {pair!r}")
        result.append(int(match.group(1), 16) & 0xFF)
    return bytes(result)


def format_hex_dump(data: bytes, bytes_per_line: int = 16) -> str:
    """Classic hex dump: offset, hex bytes and printable ASCII."""
    if bytes_per_line <= 0:
        raise ValueError("bytes_per_line must be positive")
    data = bytes(data)
    lines = []
    for start in range(0, len(data), bytes_per_line):
        row = data[start : start + bytes_per_line]
        cells = []
        for j in range(bytes_per_line):
            cells.append(f"{row[j]:02x} " if j < len(row) else "   ")
            if j == 7:
                cells.append(" ")
        text = "".join(chr(b) if 32 <= b <= 126 else "." for b in row)
        lines.append(f"{start:08x}  {''.join(cells)} |{text}|\n")
    return "".join(lines)


# Signal handling utilities

def setup_signal_handler(signum: int, handler: Callable) -> None:
    signal.signal(signum, handler)


def setup_standard_signal_handlers(handler: Callable) -> None:
    """Install the handler for SIGINT, SIGTERM, SIGHUP and SIGUSR1."""
    for name in ("SIGINT", "SIGTERM", "SIGHUP", "SIGUSR1"):
        signum = getattr(signal, name, None)
        if signum is not None:
            setup_signal_handler(signum, handler)