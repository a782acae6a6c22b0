"""Netlink attribute encoding and decoding helpers."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable

NLA_F_NESTED = 0x8000
NLA_F_NET_BYTEORDER = 0x4000
NLA_TYPE_MASK = ~(NLA_F_NESTED | NLA_F_NET_BYTEORDER) & 0xFFFF
NLA_HDRLEN = 4
NLA_ALIGNTO = 4

NLM_F_REQUEST = 0x1
NLM_F_ACK = 0x4
NLM_F_ECHO = 0x8
NLM_F_DUMP = 0x300
NLM_F_CREATE = 0x400

NFNL_SUBSYS_NFTABLES = 10
NFNETLINK_V0 = 0

# Attribute headers use the host byte order, as the kernel does.
_ATTR_HEADER = struct.Struct("=HH")


class NetlinkError(ValueError):
    """Raised when netlink data cannot be encoded or decoded."""


@dataclass(frozen=True)
class Attribute:
    """A single netlink attribute: a type (possibly with flags) and its payload."""

    type: int
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def kind(self) -> int:
        """The attribute type with the nested and byte-order flags removed."""
        return self.type & NLA_TYPE_MASK

    @property
    def nested(self) -> bool:
        return bool(self.type & NLA_F_NESTED)


@dataclass
class Message:
    """A netlink message: header fields and payload."""

    type: int
    flags: int = 0
    data: bytes = b""
    sequence: int = 0
    pid: int = 0


def _align(length: int) -> int:
    return (length + NLA_ALIGNTO - 1) & ~(NLA_ALIGNTO - 1)


def marshal_attributes(attrs: Iterable[Attribute]) -> bytes:
    """Encode attributes into their padded wire form."""
    out = bytearray()
    for attr in attrs:
        length = NLA_HDRLEN + len(attr.data)
        if length > 0xFFFF:
            raise NetlinkError(f"attribute {attr.kind} too large: {length} bytes")
        if not 0 <= attr.type <= 0xFFFF:
            raise NetlinkError(f"invalid attribute type {attr.type}")
        out += _ATTR_HEADER.pack(length, attr.type)
        out += attr.data
        out += bytes(_align(length) - length)
    return bytes(out)


def parse_attributes(data: bytes) -> list[Attribute]:
    """Decode a buffer of consecutive attributes."""
    buf = bytes(data)
    attrs: list[Attribute] = []
    offset = 0
    while offset < len(buf):
        if len(buf) - offset < NLA_HDRLEN:
            raise NetlinkError("insufficient data for attribute header")
        length, attr_type = _ATTR_HEADER.unpack_from(buf, offset)
        if length < NLA_HDRLEN:
            raise NetlinkError(f"invalid attribute length {length}")
        if offset + length > len(buf):
            raise NetlinkError(f"attribute length {length} exceeds buffer")
        attrs.append(Attribute(attr_type, buf[offset + NLA_HDRLEN:offset + length]))
        offset += _align(length)
    return attrs


def be_u16(value: int) -> bytes:
    return struct.pack(">H", value & 0xFFFF)


def be_u32(value: int) -> bytes:
    return struct.pack(">I", value & 0xFFFFFFFF)


def be_u64(value: int) -> bytes:
    return struct.pack(">Q", value & 0xFFFFFFFFFFFFFFFF)


def _read(fmt: str, data: bytes, name: str) -> int:
    size = struct.calcsize(fmt)
    if len(data) != size:
        raise NetlinkError(f"{name}: unexpected length {len(data)}, want {size}")
    return struct.unpack(fmt, data)[0]


def read_u8(data: bytes) -> int:
    return _read(">B", data, "uint8")


def read_u16(data: bytes) -> int:
    return _read(">H", data, "uint16")


def read_u32(data: bytes) -> int:
    return _read(">I", data, "uint32")


def read_u64(data: bytes) -> int:
    return _read(">Q", data, "uint64")


def read_string(data: bytes) -> str:
    """Decode a string attribute, dropping one trailing NUL byte."""
    raw = bytes(data)
    if raw.endswith(b"\x00"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="surrogateescape")


def extra_header(family: int, res_id: int) -> bytes:
    """The nfgenmsg header that precedes nftables message attributes."""
    return bytes([family & 0xFF, NFNETLINK_V0]) + be_u16(res_id)