"""Dual-stack DHCP server configuration."""

__version__ = "0.1.0"
