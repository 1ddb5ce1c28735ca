"""A captured network packet: raw bytes plus capture metadata."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

_HEX_PREVIEW_BYTES = 32


@dataclass
class Packet:
    """Raw packet data with its capture time, interface and link protocol."""

    data: bytearray = field(default_factory=bytearray)
    capture_time_sec: int = 0
    capture_time_usec: int = 0
    interface_index: int = 0
    protocol: int = 0

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)

    @property
    def length(self) -> int:
        """Packet length in bytes."""
        return len(self.data)

    def data_at(self, offset: int, size: int | None = None) -> bytes | None:
        """Bytes from offset (size of them if given), or None if out of bounds."""
        if size is None:
            if offset >= self.length:
                return None
            return bytes(self.data[offset:])
        if offset + size > self.length:
            return None
        return bytes(self.data[offset : offset + size])

    def extract_uint16(self, offset: int) -> int:
        """Big-endian 16-bit value at offset; 0 if it does not fit."""
        if offset + 2 > self.length:
            return 0
        return int.from_bytes(self.data[offset : offset + 2], "big")

    def extract_uint32(self, offset: int) -> int:
        """Big-endian 32-bit value at offset; 0 if it does not fit."""
        if offset + 4 > self.length:
            return 0
        return int.from_bytes(self.data[offset : offset + 4], "big")

    def set_current_time(self) -> None:
        """Stamp the packet with the current wall-clock time."""
        now_us = time.time_ns() // 1000
        self.capture_time_sec = (now_us // 1_000_000) & 0xFFFFFFFF
        self.capture_time_usec = now_us % 1_000_000

    def to_hex_string(self) -> str:
        """Hex bytes of the first 32 bytes, with "..." if there are more."""
        text = "".join(f"{b:02x} " for b in self.data[:_HEX_PREVIEW_BYTES])
        if self.length > _HEX_PREVIEW_BYTES:
            text += "..."
        return text

    def info(self) -> str:
        """One-line summary of length, interface and link protocol."""
        return (
            f"Packet: {self.length} bytes, "
            f"Interface: {self.interface_index}, "
            f"Protocol: 0x{self.protocol:04x}"
        )

    def is_valid(self) -> bool:
        return self.length > 0

    def remaining_length(self, offset: int) -> int:
        """Bytes left from offset to the end, 0 past the end."""
        return self.length - offset if offset < self.length else 0

    def clear(self) -> None:
        """Drop the data and reset all metadata."""
        self.data = bytearray()
        self.capture_time_sec = 0
        self.capture_time_usec = 0
        self.interface_index = 0
        self.protocol = 0

    def resize(self, size: int) -> None:
        """Truncate or zero-pad the data to size bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size <= self.length:
            del self.data[size:]
        else:
            self.data.extend(bytes(size - self.length))

    def append(self, new_data: bytes) -> None:
        self.data.extend(new_data)