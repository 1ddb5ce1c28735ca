"""Parser for text rules in the Snort3 style."""

from __future__ import annotations

import re

from idskit.rule_model import (
    IP_FIELD_SIZE,
    Action,
    Direction,
    OptionType,
    Protocol,
    Rule,
    RuleOption,
)

_TRIM_CHARS = " \t\n\r"
_DIRECTIONS = ("->", "<>")
_IP_PATTERN = re.compile(r"(\d{1,3}\.){3}\d{1,3}(/\d{1,2})?", re.ASCII)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1
_NUMERIC_VALUE_LEN = 4

_ACTIONS = {
    "alert": Action.ALERT,
    "log": Action.LOG,
    "pass": Action.PASS,
    "drop": Action.DROP,
}

_PROTOCOLS = {
    "tcp": Protocol.TCP,
    "udp": Protocol.UDP,
    "icmp": Protocol.ICMP,
    "ip": Protocol.IP,
}

# Option keyword -> (type, whether the value is stored as a 32-bit number)
_OPTION_KEYS = {
    "content": (OptionType.CONTENT, False),
    "msg": (OptionType.MSG, False),
    "sid": (OptionType.SID, True),
    "rev": (OptionType.REV, True),
    "classtype": (OptionType.CLASSTYPE, False),
    "priority": (OptionType.PRIORITY, True),
    "metadata": (OptionType.METADATA, False),
    "flow": (OptionType.FLOW, False),
    "flags": (OptionType.FLAGS, False),
}


class RuleParseError(ValueError):
    """Raised when rule text cannot be parsed."""


def _trim(text: str) -> str:
    return text.strip(_TRIM_CHARS)


def _to_int(text: str) -> int:
    """Read a leading decimal integer the way stoi does."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def parse_action(action_str: str) -> Action:
    """Map an action keyword to an Action; unknown keywords mean alert."""
    return _ACTIONS.get(action_str, Action.ALERT)


def parse_protocol(proto_str: str) -> Protocol:
    """Map a protocol keyword to a Protocol; unknown keywords mean tcp."""
    return _PROTOCOLS.get(proto_str, Protocol.TCP)


def parse_port(port_str: str) -> int:
    """Parse a port; "any" and unparsable text give 0."""
    if port_str == "any":
        return 0
    try:
        return _to_int(port_str) & 0xFFFF
    except ValueError:
        return 0


def is_valid_ip(ip: str) -> bool:
    """Accept "any", dotted IPv4 addresses and IPv4 CIDR blocks."""
    if ip in ("any", "0.0.0.0"):
        return True
    return _IP_PATTERN.fullmatch(ip) is not None


def is_valid_port(port: str) -> bool:
    if port == "any":
        return True
    try:
        value = _to_int(port)
    except ValueError:
        return False
    return 0 <= value <= 65535


def _parse_ip_and_port(ip_port: str) -> tuple[str, int] | None:
    if ip_port == "any":
        ip, port = "0.0.0.0", 0
    else:
        ip, colon, port_str = ip_port.partition(":")
        port = parse_port(port_str) if colon else 0
    if not is_valid_ip(ip):
        return None
    return ip[: IP_FIELD_SIZE - 1], port


class RuleParser:
    """Turns rule text into Rule objects."""

    def parse_rule(self, rule_text: str) -> Rule | None:
        """Parse one rule line; return None if it is blank or only a comment."""
        clean = _trim(rule_text.split("#", 1)[0])
        if not clean:
            return None

        start = clean.find("(")
        end = clean.rfind(")")
        if start < 0 or end < 0:
            raise RuleParseError("Invalid rule format: missing parentheses")

        header_part = clean[:start]
        options_part = clean[start + 1 : end] if end > start else clean[start + 1 :]

        rule = Rule()
        self._parse_header(header_part, rule)
        self._parse_options(options_part, rule)
        return rule

    def parse_rules_from_file(self, filename) -> list[Rule]:
        """Parse every rule in a file, skipping blanks and option-less rules."""
        try:
            with open(filename, encoding="utf-8") as handle:
                lines = handle.read().split("\n")
        except OSError as exc:
            raise RuleParseError(f"Cannot open file: {filename}") from exc

        rules = []
        for line_num, line in enumerate(lines, start=1):
            try:
                rule = self.parse_rule(line)
            except RuleParseError as exc:
                raise RuleParseError(f"Error at line {line_num}: {exc}") from exc
            if rule is not None and rule.header.option_count > 0:
                rules.append(rule)
        return rules

    def parse_rules_from_string(self, rules_text: str) -> list[Rule]:
        """Parse one rule per line, skipping blanks and option-less rules."""
        rules = []
        for line in rules_text.split("\n"):
            rule = self.parse_rule(line)
            if rule is not None and rule.header.option_count > 0:
                rules.append(rule)
        return rules

    def _parse_header(self, header_part: str, rule: Rule) -> None:
        parts = header_part.split()
        if len(parts) < 7:
            raise RuleParseError(
                f"Invalid rule header: expected 7 parts, got {len(parts)}"
            )

        header = rule.header
        header.action = parse_action(parts[0])
        header.protocol = parse_protocol(parts[1])

        src = parts[2]
        if parts[3] not in _DIRECTIONS:
            src += ":" + parts[3]
        parsed = _parse_ip_and_port(src)
        if parsed is None:
            raise RuleParseError(f"Invalid source IP/port: {src}")
        header.src_ip, header.src_port = parsed

        if parts[3] in _DIRECTIONS:
            direction = parts[3]
        elif parts[4] in _DIRECTIONS:
            direction = parts[4]
        else:
            raise RuleParseError("Invalid direction, expected '->' or '<>'")
        header.direction = Direction.UNI if direction == "->" else Direction.BI

        dst, dst_port = parts[-2], parts[-1]
        if dst_port not in _DIRECTIONS:
            dst += ":" + dst_port
        parsed = _parse_ip_and_port(dst)
        if parsed is None:
            raise RuleParseError(f"Invalid destination IP/port: {dst}")
        header.dst_ip, header.dst_port = parsed

    def _parse_options(self, options_part: str, rule: Rule) -> None:
        for raw in options_part.split(";"):
            option_str = _trim(raw)
            if option_str:
                self._parse_option(option_str, rule)
        rule.header.option_count = len(rule.options)

    def _parse_option(self, option_str: str, rule: Rule) -> None:
        key, colon, value = option_str.partition(":")
        if not colon:
            raise RuleParseError(f"Invalid option format: {option_str}")
        key = _trim(key)
        value = _trim(value)
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]

        entry = _OPTION_KEYS.get(key)
        if entry is None:
            return
        option_type, numeric = entry
        value_len = _NUMERIC_VALUE_LEN if numeric else len(value.encode("utf-8"))
        rule.options.append(RuleOption(option_type, value_len, value))