"""The socket expression: matches on properties of the packet's socket."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_SOCKET_KEY = 1
NFTA_SOCKET_DREG = 2
NFTA_SOCKET_LEVEL = 3

NFT_SOCKET_TRANSPARENT = 0
NFT_SOCKET_MARK = 1
NFT_SOCKET_WILDCARD = 2
NFT_SOCKET_CGROUPV2 = 3


class SocketKey(IntEnum):
    TRANSPARENT = NFT_SOCKET_TRANSPARENT
    MARK = NFT_SOCKET_MARK
    WILDCARD = NFT_SOCKET_WILDCARD
    CGROUPV2 = NFT_SOCKET_CGROUPV2


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Socket(Expr, name="socket", parseable=False):
    """Loads socket information into a register.

    ``level`` only matters for the cgroupv2 key but is always encoded.
    """

    key: SocketKey | int = SocketKey.TRANSPARENT
    level: int = 0
    register: int = 0

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_SOCKET_DREG, be_u32(self.register)),
            Attribute(NFTA_SOCKET_KEY, be_u32(self.key)),
            Attribute(NFTA_SOCKET_LEVEL, be_u32(self.level)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Socket":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_SOCKET_DREG:
                expr.register = read_u32(attr.data)
            elif attr.kind == NFTA_SOCKET_KEY:
                expr.key = _as_enum(SocketKey, read_u32(attr.data))
            elif attr.kind == NFTA_SOCKET_LEVEL:
                expr.level = read_u32(attr.data)
        return expr