# idskit

A small toolkit for intrusion-detection work:

- compile Snort-style rule files into a compact binary format and inspect
  the result;
- watch the traffic on a Linux network interface and print each frame
  dissected layer by layer (Ethernet, IPv4, TCP, UDP, ICMP, ARP), with hex
  dumps of payloads and readable HTTP headers;
- helpers for IDS programs: network and string utilities, Internet
  checksums, a simple key/value configuration with YAML-like files,
  command line option handling, a packet container and a protocol-parser
  interface.

The package has no third-party dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Compiling rules

A rule file holds one rule per line; `#` starts a comment:

```
alert tcp any any -> 192.168.1.0/24 80 (msg:"Web access"; content:"GET"; sid:1000001; rev:1;)
drop udp 10.0.0.1 53 <> any any (msg:"DNS"; sid:1000002;)
```

Supported options are `content`, `msg`, `sid`, `rev`, `classtype`,
`priority`, `metadata`, `flow` and `flags`; other options are skipped, and
rules left with no supported option are dropped. Addresses must be `any`
or dotted IPv4 addresses, optionally with a `/nn` prefix length.

Convert a rule file to the binary format:

```
idskit-rule2bin convert rules.txt rules.bin
```

Show what a binary file holds:

```
idskit-rule2bin info rules.bin
```

`idskit-rule2bin help` prints the usage text.

The same work from Python, with `idskit.rule_text` and `idskit.rule_binary`:

```python
from idskit.rule_text import RuleParser
from idskit.rule_binary import serialize, deserialize

rules = RuleParser().parse_rules_from_string(
    'alert tcp any any -> 192.168.1.1 80 (msg:"test"; sid:1;)\n'
)
blob = serialize(rules)
assert deserialize(blob)[0].header.dst_port == 80
```

`serialize_to_file` and `deserialize_from_file` do the same with files.
The data model (`Rule`, `RuleHeader`, `RuleOption`, `FileHeader` and the
`Action`, `Protocol`, `Direction` and `OptionType` enumerations) lives in
`idskit.rule_model`.

Malformed rules raise `RuleParseError`; binary data that is truncated or
has a wrong magic number, version or header size raises `RuleFormatError`.

## Watching an interface

```
idskit-capture eth0
```

Opening a raw packet socket needs root or the `CAP_NET_RAW` capability, and
works on Linux only. Stop with Ctrl+C. From Python, `idskit.capture.capture`
yields the raw frames received on an interface. The dissecting functions
(`format_packet`, `format_payload`, `format_http_payload` and the
per-protocol formatters such as `format_tcp_packet`) take raw frame bytes
and return text, so they work on frames from any source. Payload dumps show
at most 256 bytes, HTTP data at most 1024, and note how much was left out.

## Configuration

`idskit.config.Config` reads simple `section:` / `key: value` files:

```python
from idskit.config import Config, CaptureConfig

config = Config()
config.load_from_yaml("capture:\n  interface: eth1\n  timeout_ms: 500\n")
capture = CaptureConfig.from_config(config)
print(capture.interface, capture.timeout_ms)
print(config.validate())
```

`validate` checks the capture interface, timeout and snaplen and the
logging level and format, leaving messages in `validation_errors`.
`to_yaml` and `save_to_file` write the settings back out; `load_from_json`
reads one `"key": value` pair per line. `RuleConfig` and
`PerformanceConfig` give typed views of their sections.

`idskit.options.parse_command_line` understands `-c/--config`,
`-i/--interface`, `-r/--rules`, `-l/--log-level`, `-o/--output`,
`-d/--debug`, `-s/--save-config`, `-v/--version` and `-h/--help`, and
`process_configuration` combines them with a configuration file. Both
raise `CommandLineExit` when processing should stop (help, version or an
error), carrying the exit status and the message to show.

## Utilities

`idskit.netutils` offers address helpers (`ip_to_string`, `is_private_ip`,
`mac_to_string`, `get_service_name`, ...), `calculate_checksum` and
`verify_checksum` for the Internet checksum, string helpers and
`format_hex_dump`. `idskit.packet.Packet` holds captured bytes with
bounds-checked big-endian readers. `idskit.protocol_parser` defines the
abstract `ProtocolParser` base class, `ParsingResult` and `ProtocolType`
for writing protocol dissectors. `idskit.common` holds shared enumerations
such as `ErrorCode` and `LogLevel`.

## What it does not do

- There is no detection engine: nothing matches rules against packets, and
  no command runs an IDS with the options and configuration described
  above.
- `ProtocolParser` is an interface only; the package ships no concrete
  parser classes for it.
- Reading a binary rule file does not verify the CRC-32 checksum written
  into its header.