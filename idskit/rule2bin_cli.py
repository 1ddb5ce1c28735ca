"""Command line tool that compiles text rules to the binary format."""

from __future__ import annotations

import os
import sys

from idskit.rule_binary import RuleFormatError, deserialize_from_file, serialize_to_file
from idskit.rule_model import (
    Rule,
    action_to_string,
    direction_to_string,
    option_type_to_string,
    protocol_to_string,
)
from idskit.rule_text import RuleParseError, RuleParser


def usage(program_name: str) -> str:
    """Help text for the command."""
    return (
        "Snort3 Rule to Binary Translator\n"
        f"Usage: {program_name} <command> [options]\n"
        "\nCommands:\n"
        "  convert <input_file> <output_file>  Convert Snort3 rules to binary format\n"
        "  info <binary_file>                  Display information about binary file\n"
        "  help                                Show this help message\n"
        "\nExamples:\n"
        f"  {program_name} convert rules.txt rules.bin\n"
        f"  {program_name} info rules.bin\n"
    )


def format_rule_info(rule: Rule, index: int) -> str:
    """Human-readable description of one rule."""
    header = rule.header
    lines = [
        f"Rule #{index}:",
        f"  Action: {action_to_string(header.action)}",
        f"  Protocol: {protocol_to_string(header.protocol)}",
        f"  Source: {header.src_ip}:{header.src_port}",
        f"  Destination: {header.dst_ip}:{header.dst_port}",
        f"  Direction: {direction_to_string(header.direction)}",
        f"  Options: {header.option_count}",
    ]
    lines.extend(
        f"    - {option_type_to_string(option.type)}: {option.value}"
        for option in rule.options
    )
    return "\n".join(lines) + "\n\n"


def convert_rules(input_file, output_file) -> int:
    """Compile a text rule file to a binary rule file; return an exit status."""
    print(f"Parsing rules from: {input_file}")
    try:
        rules = RuleParser().parse_rules_from_file(input_file)
    except RuleParseError as exc:
        print(f"Error parsing rules: {exc}", file=sys.stderr)
        return 1
    print(f"Successfully parsed {len(rules)} rules")

    print(f"Serializing to binary: {output_file}")
    try:
        serialize_to_file(rules, output_file)
    except RuleFormatError as exc:
        print(f"Error serializing rules: {exc}", file=sys.stderr)
        return 1
    print(f"Successfully created binary file: {output_file}")
    return 0


def show_binary_info(binary_file) -> int:
    """Print the rules held in a binary rule file; return an exit status."""
    print(f"Reading binary file: {binary_file}")
    try:
        rules = deserialize_from_file(binary_file)
    except RuleFormatError as exc:
        print(f"Error reading binary file: {exc}", file=sys.stderr)
        return 1
    print(f"File contains {len(rules)} rules\n")
    for index, rule in enumerate(rules, start=1):
        print(format_rule_info(rule, index), end="")
    return 0


def main(argv=None) -> int:
    """Run the command with the given arguments (program name excluded)."""
    if argv is None:
        program_name = os.path.basename(sys.argv[0]) or "rule2bin"
        args = sys.argv[1:]
    else:
        program_name = "rule2bin"
        args = list(argv)

    if not args:
        print(usage(program_name), end="")
        return 1

    command = args[0]
    if command == "convert":
        if len(args) != 3:
            print("Error: convert command requires input and output files", file=sys.stderr)
            print(usage(program_name), end="")
            return 1
        return convert_rules(args[1], args[2])
    if command == "info":
        if len(args) != 2:
            print("Error: info command requires a binary file", file=sys.stderr)
            print(usage(program_name), end="")
            return 1
        return show_binary_info(args[1])
    if command == "help":
        print(usage(program_name), end="")
        return 0

    print(f"Error: Unknown command '{command}'", file=sys.stderr)
    print(usage(program_name), end="")
    return 1


if __name__ == "__main__":
    sys.exit(main())