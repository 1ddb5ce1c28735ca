import time

import pytest

from idskit.packet import Packet


def test_length_follows_data():
    packet = Packet(b"\x01\x02\x03")
    assert packet.length == 3
    packet.append(b"\x04\x05")
    assert packet.length == 5
    assert bytes(packet.data) == b"\x01\x02\x03\x04\x05"


def test_data_at_without_size():
    packet = Packet(b"abcdef")
    assert packet.data_at(2) == b"cdef"
    assert packet.data_at(6) is None


def test_data_at_with_size():
    packet = Packet(b"abcdef")
    assert packet.data_at(1, 3) == b"bcd"
    assert packet.data_at(4, 2) == b"ef"
    assert packet.data_at(4, 3) is None


def test_extract_integers_big_endian():
    packet = Packet(b"\x12\x34\x56\x78")
    assert packet.extract_uint16(0) == 0x1234
    assert packet.extract_uint16(2) == 0x5678
    assert packet.extract_uint32(0) == 0x12345678


def test_extract_out_of_bounds_gives_zero():
    packet = Packet(b"\x12\x34\x56")
    assert packet.extract_uint16(2) == 0
    assert packet.extract_uint32(0) == 0


def test_to_hex_string_short():
    assert Packet(b"\x00\xab\x10").to_hex_string() == "00 ab 10 "


def test_to_hex_string_truncates_after_32_bytes():
    text = Packet(bytes(40)).to_hex_string()
    assert text.endswith("...")
    assert text.count("00 ") == 32


def test_info():
    packet = Packet(b"\x00" * 4, interface_index=2, protocol=0x0800)
    assert packet.info() == "Packet: 4 bytes, Interface: 2, Protocol: 0x0800"


def test_is_valid():
    assert Packet(b"x").is_valid() is True
    assert Packet().is_valid() is False


def test_remaining_length():
    packet = Packet(b"abcdef")
    assert packet.remaining_length(2) == 4
    assert packet.remaining_length(6) == 0
    assert packet.remaining_length(10) == 0


def test_clear_resets_everything():
    packet = Packet(b"abc", capture_time_sec=5, capture_time_usec=6, interface_index=7, protocol=8)
    packet.clear()
    assert packet == Packet()


def test_resize_grows_with_zeros_and_shrinks():
    packet = Packet(b"ab")
    packet.resize(4)
    assert bytes(packet.data) == b"ab\x00\x00"
    packet.resize(1)
    assert bytes(packet.data) == b"a"
    with pytest.raises(ValueError):
        packet.resize(-1)


def test_set_current_time():
    packet = Packet()
    before = int(time.time())
    packet.set_current_time()
    after = int(time.time())
    assert before <= packet.capture_time_sec <= after
    assert 0 <= packet.capture_time_usec < 1_000_000