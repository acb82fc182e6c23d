"""Ciphers, digests, an MDict text-source loader and key-block writers for MDict-style dictionaries."""

__version__ = "0.5.0"