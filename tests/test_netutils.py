import signal
from datetime import datetime

import pytest

from idskit import netutils


def test_ip_round_trip():
    for text in ("192.168.1.1", "10.0.0.254", "8.8.4.4"):
        assert netutils.ip_to_string(netutils.string_to_ip(text)) == text


def test_string_to_ip_rejects_garbage():
    with pytest.raises(ValueError):
        netutils.string_to_ip("not-an-ip")


def test_is_valid_ip():
    assert netutils.is_valid_ip("127.0.0.1")
    assert not netutils.is_valid_ip("999.1.1.1")
    assert not netutils.is_valid_ip("hello")
    # The broadcast address collides with INADDR_NONE.
    assert not netutils.is_valid_ip("255.255.255.255")


@pytest.mark.parametrize(
    "text, private",
    [
        ("10.1.2.3", True),
        ("172.16.5.5", True),
        ("172.31.255.255", True),
        ("172.32.0.1", False),
        ("192.168.0.1", True),
        ("8.8.8.8", False),
    ],
)
def test_is_private_ip(text, private):
    assert netutils.is_private_ip(netutils.string_to_ip(text)) is private


def test_broadcast_and_multicast_ip():
    assert netutils.is_broadcast_ip(0xFFFFFFFF)
    assert not netutils.is_broadcast_ip(netutils.string_to_ip("10.0.0.255"))
    assert netutils.is_multicast_ip(netutils.string_to_ip("224.0.0.1"))
    assert netutils.is_multicast_ip(netutils.string_to_ip("239.255.255.250"))
    assert not netutils.is_multicast_ip(netutils.string_to_ip("192.168.1.1"))


def test_mac_to_string_is_valid_mac():
    mac = bytes([0x02, 0x00, 0x5E, 0xAB, 0xCD, 0xEF])
    text = netutils.mac_to_string(mac)
    assert netutils.is_valid_mac(text)
    assert text == text.lower()
    assert bytes.fromhex(text.replace(":", "")) == mac


def test_is_valid_mac_rejects_bad_forms():
    assert not netutils.is_valid_mac("02:00:5e:ab:cd")
    assert not netutils.is_valid_mac("02-00-5e-ab-cd-ef")
    assert not netutils.is_valid_mac("02:00:5e:ab:cd:eg")


def test_broadcast_and_multicast_mac():
    assert netutils.is_broadcast_mac(b"\xff" * 6)
    assert not netutils.is_broadcast_mac(b"\xff" * 5 + b"\xfe")
    assert netutils.is_multicast_mac(b"\x01\x00\x5e\x00\x00\x01")
    assert not netutils.is_multicast_mac(b"\x02\x00\x00\x00\x00\x01")


def test_port_classes():
    assert not netutils.is_valid_port(0)
    assert netutils.is_valid_port(65535)
    assert netutils.is_well_known_port(1023)
    assert not netutils.is_well_known_port(1024)
    assert netutils.is_registered_port(1024)
    assert netutils.is_registered_port(49151)
    assert not netutils.is_registered_port(49152)


@pytest.mark.parametrize(
    "port, name",
    [(20, "FTP"), (21, "FTP"), (22, "SSH"), (80, "HTTP"), (443, "HTTPS"), (995, "POP3S"), (8080, "Unknown")],
)
def test_get_service_name(port, name):
    assert netutils.get_service_name(port) == name


def test_protocol_names_and_numbers_round_trip():
    for number in (1, 6, 17):
        name = netutils.get_protocol_name(number)
        assert netutils.get_protocol_number(name) == number
    assert netutils.get_protocol_name(2) == "Unknown"
    assert netutils.get_protocol_number("tcp") == 6
    assert netutils.is_valid_protocol("Udp")
    assert not netutils.is_valid_protocol("sctp")


IP_HEADER = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")


def test_checksum_of_header_with_checksum_is_zero():
    checksum = netutils.calculate_ip_checksum(IP_HEADER)
    filled = IP_HEADER[:10] + checksum.to_bytes(2, "big") + IP_HEADER[12:]
    assert netutils.calculate_checksum(filled) == 0
    assert checksum == 0xB861


def test_verify_checksum_round_trip():
    for data in (IP_HEADER, b"abc", b"\x00\x01\x02\x03\x04"):
        checksum = netutils.calculate_checksum(data)
        assert netutils.verify_checksum(data, checksum)
        assert not netutils.verify_checksum(data, checksum ^ 0x0100)


def test_format_timestamp_matches_local_time():
    sec = 1_700_000_000
    text = netutils.format_timestamp(sec, 42)
    stamp, _, micros = text.partition(".")
    assert micros == "000042"
    assert datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S") == datetime.fromtimestamp(sec)


def test_get_current_timestamp_shape():
    text = netutils.get_current_timestamp()
    stamp, _, micros = text.partition(".")
    assert len(micros) == 6 and micros.isdigit()
    datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S")
    assert stamp[:2] == "20"


def test_format_duration_units():
    assert netutils.format_duration(30) == "30.00s"
    assert netutils.format_duration(90) == "1.50m"
    assert netutils.format_duration(7200) == "2.00h"


def test_split_drops_only_trailing_empty_field():
    assert netutils.split("a,b,c", ",") == ["a", "b", "c"]
    assert netutils.split("a,b,", ",") == ["a", "b"]
    assert netutils.split(",a", ",") == ["", "a"]
    assert netutils.split("", ",") == []


def test_trim_strips_spaces_only():
    assert netutils.trim("  hello  ") == "hello"
    assert netutils.trim("\thello ") == "\thello"
    assert netutils.trim("   ") == ""


def test_case_conversion_is_ascii_only():
    assert netutils.to_upper("tcp") == "TCP"
    assert netutils.to_lower("MiXeD") == "mixed"
    assert netutils.to_upper("é") == "é"


def test_starts_and_ends_with():
    assert netutils.starts_with("capture.interface", "capture.")
    assert not netutils.starts_with("cap", "capture")
    assert netutils.ends_with("rules.bin", ".bin")
    assert not netutils.ends_with("bin", "rules.bin")


def test_hex_round_trip():
    data = bytes(range(0, 256, 7))
    assert netutils.from_hex(netutils.to_hex(data)) == data
    assert netutils.to_hex(b"\x00\xff") == "00ff"


def test_from_hex_invalid_pair_raises():
    with pytest.raises(ValueError):
        netutils.from_hex("zz")


def test_format_hex_dump_layout():
    data = b"Hello, world!\x00\x01\x02ABC"
    dump = netutils.format_hex_dump(data, 16)
    lines = dump.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("00000000  48 65 6c 6c")
    assert lines[1].startswith("00000010  ")
    assert lines[0].endswith("|Hello, world!...|")
    assert lines[1].endswith("|ABC|")
    assert all(len(line.split(" |")[0]) == len(lines[0].split(" |")[0]) for line in lines)


def test_format_hex_dump_rejects_zero_width():
    with pytest.raises(ValueError):
        netutils.format_hex_dump(b"abc", 0)


def test_setup_signal_handler_installs_handler():
    def handler(signum, frame):
        pass

    previous = signal.getsignal(signal.SIGINT)
    try:
        netutils.setup_signal_handler(signal.SIGINT, handler)
        assert signal.getsignal(signal.SIGINT) is handler
    finally:
        signal.signal(signal.SIGINT, previous)


def test_setup_standard_signal_handlers():
    def handler(signum, frame):
        pass

    names = [n for n in ("SIGINT", "SIGTERM", "SIGHUP", "SIGUSR1") if hasattr(signal, n)]
    previous = {n: signal.getsignal(getattr(signal, n)) for n in names}
    try:
        netutils.setup_standard_signal_handlers(handler)
        assert all(signal.getsignal(getattr(signal, n)) is handler for n in names)
    finally:
        for n, old in previous.items():
            signal.signal(getattr(signal, n), old)