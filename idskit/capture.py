"""Raw link-layer packet capture with human-readable packet dumps."""

from __future__ import annotations

import os
import socket
import struct
import sys
from typing import Iterator

BUFFER_SIZE = 65536
ETH_HLEN = 14
ETH_P_ALL = 0x0003
ETH_P_IP = 0x0800
ETH_P_ARP = 0x0806

IPPROTO_ICMP = 1
IPPROTO_TCP = 6
IPPROTO_UDP = 17

UDP_HLEN = 8
ICMP_HLEN = 8
ARP_HLEN = 8

PAYLOAD_DISPLAY_LIMIT = 256
HTTP_DISPLAY_LIMIT = 1024
HTTP_PORTS = frozenset({80, 443, 8080})

_ARP_OPERATIONS = {
    1: "(ARP请求)",
    2: "(ARP响应)",
    3: "(RARP请求)",
    4: "(RARP响应)",
}

_ICMP_TYPES = {
    0: "Echo Reply",
    8: "Echo Request",
}


class CaptureError(OSError):
    """Raised when the capture socket cannot be set up."""


def _unpack(fmt: str, data: bytes, offset: int) -> tuple:
    """Unpack a big-endian record at offset; missing bytes read as zero."""
    size = struct.calcsize(fmt)
    chunk = bytes(data[offset : offset + size]).ljust(size, b"\0")
    return struct.unpack(fmt, chunk)


def _is_printable(byte: int) -> bool:
    return 0x20 <= byte <= 0x7E


def _mac(raw: bytes) -> str:
    return ":".join(f"{b:02x}" for b in raw)


def _ipv4(raw: bytes) -> str:
    return ".".join(str(b) for b in raw)


def _ethertype(data: bytes) -> int:
    return _unpack("!H", data, 12)[0]


def _ip_header_length(data: bytes) -> int:
    return (_unpack("!B", data, ETH_HLEN)[0] & 0x0F) * 4


def format_ethernet_header(data: bytes) -> str:
    """Describe the Ethernet header of a frame."""
    dest, source, proto = _unpack("!6s6sH", data, 0)
    return (
        "以太网头部:\n"
        f"   源MAC地址: {_mac(source)}\n"
        f"   目的MAC地址: {_mac(dest)}\n"
        f"   协议类型: 0x{proto:04x}\n"
    )


def format_ip_header(data: bytes) -> str:
    """Describe the IPv4 header that follows the Ethernet header."""
    (version_ihl, tos, tot_len, ident, _frag, ttl, protocol, check, saddr, daddr) = _unpack(
        "!BBHHHBBH4s4s", data, ETH_HLEN
    )
    ihl = version_ihl & 0x0F
    return (
        "IP头部:\n"
        f"   版本: {version_ihl >> 4}\n"
        f"   首部长度: {ihl} DWORDS / {ihl * 4} 字节\n"
        f"   服务类型: {tos}\n"
        f"   总长度: {tot_len} 字节\n"
        f"   标识符: {ident}\n"
        f"   生存时间: {ttl}\n"
        f"   协议: {protocol}\n"
        f"   首部校验和: {check}\n"
        f"   源IP地址: {_ipv4(saddr)}\n"
        f"   目的IP地址: {_ipv4(daddr)}\n"
    )


def format_tcp_packet(data: bytes) -> str:
    """Describe the TCP header and payload of a frame."""
    iphdrlen = _ip_header_length(data)
    offset = ETH_HLEN + iphdrlen
    source, dest, seq, ack_seq, doff_byte, flags, window, check, urg_ptr = _unpack(
        "!HHIIBBHHH", data, offset
    )
    doff = doff_byte >> 4
    flag_names = [
        name
        for name, bit in (
            ("URG", 0x20),
            ("ACK", 0x10),
            ("PSH", 0x08),
            ("RST", 0x04),
            ("SYN", 0x02),
            ("FIN", 0x01),
        )
        if flags & bit
    ]
    parts = [
        "TCP头部:\n",
        f"   源端口: {source}\n",
        f"   目的端口: {dest}\n",
        f"   序列号: {seq}\n",
        f"   确认号: {ack_seq}\n",
        f"   头部长度: {doff} DWORDS / {doff * 4} 字节\n",
        "   标志位: " + "".join(f"{name} " for name in flag_names) + "\n",
        f"   窗口大小: {window}\n",
        f"   校验和: {check}\n",
        f"   紧急指针: {urg_ptr}\n",
    ]

    payload_start = offset + doff * 4
    payload_size = len(data) - payload_start
    if payload_size > 0:
        payload = bytes(data[payload_start:])
        parts.append(f"TCP 负载 ({payload_size} 字节):\n")
        if source in HTTP_PORTS or dest in HTTP_PORTS:
            parts.append(format_http_payload(payload))
        else:
            parts.append(format_payload(payload))
    return "".join(parts)


def format_udp_packet(data: bytes) -> str:
    """Describe the UDP header and payload of a frame."""
    offset = ETH_HLEN + _ip_header_length(data)
    source, dest, length, check = _unpack("!HHHH", data, offset)
    parts = [
        "UDP头部:\n",
        f"   源端口: {source}\n",
        f"   目的端口: {dest}\n",
        f"   UDP长度: {length}\n",
        f"   校验和: {check}\n",
    ]
    payload_start = offset + UDP_HLEN
    payload_size = len(data) - payload_start
    if payload_size > 0:
        parts.append(f"UDP 负载 ({payload_size} 字节):\n")
        parts.append(format_payload(bytes(data[payload_start:])))
    return "".join(parts)


def format_icmp_packet(data: bytes) -> str:
    """Describe the ICMP header and payload of a frame."""
    offset = ETH_HLEN + _ip_header_length(data)
    icmp_type, code, checksum = _unpack("!BBH", data, offset)
    parts = [
        "ICMP头部:\n",
        f"   ICMP类型: {icmp_type}\n",
        f"   ICMP代码: {code}\n",
        f"   校验和: {checksum}\n",
        f"   ICMP类型描述: {_ICMP_TYPES.get(icmp_type, '其他')}\n",
    ]
    payload_start = offset + ICMP_HLEN
    payload_size = len(data) - payload_start
    if payload_size > 0:
        parts.append(f"ICMP 负载 ({payload_size} 字节):\n")
        parts.append(format_payload(bytes(data[payload_start:])))
    return "".join(parts)


def format_arp_packet(data: bytes) -> str:
    """Describe the ARP header and payload of a frame."""
    hrd, pro, hln, pln, op = _unpack("!HHBBH", data, ETH_HLEN)
    parts = [
        "ARP协议头部:\n",
        f"   硬件类型: {hrd}\n",
        f"   协议类型: 0x{pro:04x}\n",
        f"   硬件地址长度: {hln}\n",
        f"   协议地址长度: {pln}\n",
        f"   操作码: {op} {_ARP_OPERATIONS.get(op, '(未知操作)')}\n",
    ]
    payload_start = ETH_HLEN + ARP_HLEN
    payload_size = len(data) - payload_start
    if payload_size > 0:
        parts.append(f"ARP负载数据 ({payload_size} 字节):\n")
        parts.append(format_payload(bytes(data[payload_start:])))
    return "".join(parts)


def format_payload(data: bytes) -> str:
    """Hex and ASCII dump of up to 256 bytes, noting how many were left out."""
    shown = bytes(data[:PAYLOAD_DISPLAY_LIMIT])
    lines = []
    for start in range(0, len(shown), 16):
        row = shown[start : start + 16]
        cells = [f"{b:02x} " for b in row] + ["   "] * (16 - len(row))
        hex_part = "".join(cells[:8]) + " " + "".join(cells[8:])
        text = "".join(chr(b) if _is_printable(b) else "." for b in row)
        lines.append(f"   {start:04x}: {hex_part}  {text}\n")
    if len(data) > PAYLOAD_DISPLAY_LIMIT:
        lines.append(f"   ... ({len(data) - PAYLOAD_DISPLAY_LIMIT} 字节剩余未显示)\n")
    return "".join(lines)


def format_http_payload(data: bytes) -> str:
    """Show HTTP headers as text and the body as a dump, up to 1024 bytes."""
    data = bytes(data)
    display = data[:HTTP_DISPLAY_LIMIT]
    parts = ["HTTP 数据:\n"]

    marker = display.find(b"\r\n\r\n")
    if marker >= 0:
        header_end = marker + 4
        parts.append("HTTP 头部:\n")
        parts.append(
            "".join(
                chr(b) if _is_printable(b) or b in (0x0D, 0x0A) else "."
                for b in display[:header_end]
            )
        )
        if len(display) > header_end:
            parts.append(f"\nHTTP 内容 ({len(display) - header_end} 字节):\n")
            parts.append(format_payload(display[header_end:]))
    else:
        parts.append(format_payload(display))

    if len(data) > HTTP_DISPLAY_LIMIT:
        parts.append(f"   ... ({len(data) - HTTP_DISPLAY_LIMIT} 字节剩余未显示)\n")
    return "".join(parts)


def format_packet(data: bytes) -> str:
    """Describe a whole Ethernet frame, layer by layer."""
    data = bytes(data)
    parts = [format_ethernet_header(data)]
    ethertype = _ethertype(data)

    if ethertype == ETH_P_IP:
        parts.append(format_ip_header(data))
        protocol = _unpack("!B", data, ETH_HLEN + 9)[0]
        if protocol == IPPROTO_TCP:
            parts.append(format_tcp_packet(data))
        elif protocol == IPPROTO_UDP:
            parts.append(format_udp_packet(data))
        elif protocol == IPPROTO_ICMP:
            parts.append(format_icmp_packet(data))
        else:
            parts.append(f"其他 IP 协议: {protocol}\n")
    elif ethertype == ETH_P_ARP:
        parts.append(format_arp_packet(data))
    else:
        parts.append(f"非IP数据包，协议类型: 0x{ethertype:04x}\n")
        payload_size = len(data) - ETH_HLEN
        if payload_size > 0:
            parts.append(f"负载数据 ({payload_size} 字节):\n")
            parts.append(format_payload(data[ETH_HLEN:]))
    return "".join(parts)


def _open_socket(interface: str) -> socket.socket:
    """Open a raw packet socket bound to the named interface."""
    family = getattr(socket, "AF_PACKET", None)
    if family is None:
        raise CaptureError("创建原始套接字失败: AF_PACKET not supported on this platform")
    try:
        sock = socket.socket(family, socket.SOCK_RAW, socket.htons(ETH_P_ALL))
    except OSError as exc:
        raise CaptureError(f"创建原始套接字失败: {exc.strerror or exc}") from exc

    try:
        socket.if_nametoindex(interface)
    except OSError as exc:
        sock.close()
        raise CaptureError(f"获取接口索引失败: {exc.strerror or exc}") from exc

    try:
        sock.bind((interface, ETH_P_ALL))
    except OSError as exc:
        sock.close()
        raise CaptureError(f"绑定套接字失败: {exc.strerror or exc}") from exc
    return sock


def capture(interface: str) -> Iterator[bytes]:
    """Yield every frame received on the interface until receiving fails."""
    with _open_socket(interface) as sock:
        while True:
            yield sock.recv(BUFFER_SIZE)


def main(argv=None) -> int:
    """Capture on the interface named in the arguments and print each frame."""
    if argv is None:
        program_name = os.path.basename(sys.argv[0]) or "raw_socket_capture"
        args = sys.argv[1:]
    else:
        program_name = "raw_socket_capture"
        args = list(argv)

    if len(args) != 1:
        print(f"用法: {program_name} <网络接口名>")
        print(f"例如: {program_name} eth0")
        return 1

    interface = args[0]
    try:
        sock = _open_socket(interface)
    except CaptureError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"RAW_SOCKET 抓包程序运行在接口 {interface} 上")
    print("按 Ctrl+C 停止程序\n")

    packet_count = 0
    with sock:
        try:
            while True:
                try:
                    frame = sock.recv(BUFFER_SIZE)
                except OSError as exc:
                    print(f"接收数据包失败: {exc.strerror or exc}", file=sys.stderr)
                    break
                packet_count += 1
                print(f"========== 数据包 {packet_count} ==========")
                print(format_packet(frame))
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())