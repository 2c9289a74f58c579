"""Local MIoT device layer for smart home bridges."""

__version__ = "0.1.0"
