"""Parse and build CoAP messages directly on their binary form."""

__version__ = "0.1.0"
__all__ = ["options", "pdu", "protocol"]