"""Command line options for the detection engine and loading its configuration."""

from __future__ import annotations

import getopt
import sys

from idskit.config import CommandLineOptions, Config

PROGRAM_NAME = "ids"

_SHORT_OPTIONS = "c:i:r:l:o:dsvh"
_LONG_OPTIONS = [
    "config=",
    "interface=",
    "rules=",
    "log-level=",
    "output=",
    "debug",
    "save-config",
    "version",
    "help",
]


class CommandLineExit(Exception):
    """Processing stops here: status is the exit status, message what to show."""

    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def usage_text(program_name: str) -> str:
    """Help text for the command."""
    return (
        f"Usage: {program_name} [OPTIONS]\n"
        "IDS - Intrusion Detection System\n\n"
        "Options:\n"
        "  -c, --config FILE       Configuration file path (default: ./ids.yaml)\n"
        "  -i, --interface IF      Network interface to monitor (overrides config)\n"
        "  -r, --rules FILE        Rule file path (can be specified multiple times)\n"
        "  -l, --log-level LEVEL   Log level (DEBUG, INFO, WARNING, ERROR, ALERT)\n"
        "  -o, --output FORMAT     Output format (tcpdump, json, csv)\n"
        "  -d, --debug             Enable debug mode\n"
        "  -s, --save-config       Save command line options to config file\n"
        "  -v, --version           Show version information\n"
        "  -h, --help              Show this help message\n\n"
        "Examples:\n"
        f"  {program_name} -c /path/to/config.yaml\n"
        f"  {program_name} -i eth0 -l DEBUG\n"
        f"  {program_name} -r local.rules -r community.rules\n\n"
        "Signals:\n"
        "  SIGINT, SIGTERM    Graceful shutdown\n"
        "  SIGHUP             Reload configuration\n"
        "  SIGUSR1            Print statistics\n"
    )


def version_text() -> str:
    return "IDS version 1.0.0\n"


def parse_command_line(argv) -> CommandLineOptions:
    """Parse arguments (program name excluded) into CommandLineOptions.

    Raises CommandLineExit with status 0 for --help and --version and with
    status 1 for an unknown option or a missing argument.
    """
    try:
        pairs, _rest = getopt.gnu_getopt(list(argv), _SHORT_OPTIONS, _LONG_OPTIONS)
    except getopt.GetoptError as exc:
        raise CommandLineExit(1, f"{PROGRAM_NAME}: {exc.msg}") from exc

    options = CommandLineOptions()
    for flag, value in pairs:
        if flag in ("-c", "--config"):
            options.config_file = value
        elif flag in ("-i", "--interface"):
            options.interface = value
        elif flag in ("-r", "--rules"):
            options.rule_files.append(value)
        elif flag in ("-l", "--log-level"):
            options.log_level = value
        elif flag in ("-o", "--output"):
            options.output_format = value
        elif flag in ("-d", "--debug"):
            options.debug_mode = True
        elif flag in ("-s", "--save-config"):
            options.save_config = True
        elif flag in ("-v", "--version"):
            raise CommandLineExit(0, version_text())
        elif flag in ("-h", "--help"):
            raise CommandLineExit(0, usage_text(PROGRAM_NAME))
    return options


def process_configuration(argv, config: Config) -> CommandLineOptions:
    """Parse arguments, load the config file, apply overrides and validate.

    Returns the parsed options; raises CommandLineExit when processing stops.
    """
    options = parse_command_line(argv)

    try:
        config.load_from_file(options.config_file)
    except OSError as exc:
        raise CommandLineExit(
            1, f"Error: Cannot load configuration file: {options.config_file}"
        ) from exc

    config.apply_command_line_options(options)

    if options.save_config:
        try:
            config.save_to_file(options.config_file)
        except OSError:
            print(
                f"Warning: Failed to save configuration to {options.config_file}",
                file=sys.stderr,
            )
        else:
            print(f"Configuration saved to {options.config_file}")

    if not config.validate():
        lines = ["Error: Invalid configuration"]
        lines.extend(f"  - {error}" for error in config.validation_errors)
        raise CommandLineExit(1, "\n".join(lines))

    return options