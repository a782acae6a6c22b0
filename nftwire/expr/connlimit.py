"""The connlimit expression: matches on the number of connections."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_CONNLIMIT_UNSPEC = 0
NFTA_CONNLIMIT_COUNT = 1
NFTA_CONNLIMIT_FLAGS = 2
NFT_CONNLIMIT_F_INV = 1


@dataclass
class Connlimit(Expr, name="connlimit"):
    """Limits the number of connections; ``NFT_CONNLIMIT_F_INV`` inverts the match."""

    count: int = 0
    flags: int = 0

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_CONNLIMIT_COUNT, be_u32(self.count)),
            Attribute(NFTA_CONNLIMIT_FLAGS, be_u32(self.flags)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Connlimit":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CONNLIMIT_COUNT:
                expr.count = read_u32(attr.data)
            elif attr.kind == NFTA_CONNLIMIT_FLAGS:
                expr.flags = read_u32(attr.data)
        return expr