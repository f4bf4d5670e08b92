"""KISS framing, host frame parsing and a command that decodes KISS byte streams."""

__version__ = "0.1.0"
__all__ = ["protocol", "host", "cli"]