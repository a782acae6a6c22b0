"""Encoding and decoding of nftables netlink attributes, expressions, flowtables and generation messages."""

__version__ = "0.1.0"