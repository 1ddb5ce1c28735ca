"""Rule compiler, packet dissector and support code for intrusion detection."""

__version__ = "1.0.0"