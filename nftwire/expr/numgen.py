"""The numgen expression: generates incremental or random numbers."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr, ExprError
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_NG_DREG = 1
NFTA_NG_MODULUS = 2
NFTA_NG_TYPE = 3
NFTA_NG_OFFSET = 4

NFT_NG_INCREMENTAL = 0
NFT_NG_RANDOM = 1


@dataclass
class Numgen(Expr, name="numgen"):
    """Writes ``n % modulus + offset`` into a register."""

    register: int = 0
    modulus: int = 0
    type: int = NFT_NG_INCREMENTAL
    offset: int = 0

    def marshal_data(self, fam: int) -> bytes:
        if self.type not in (NFT_NG_INCREMENTAL, NFT_NG_RANDOM):
            raise ExprError(f"unsupported numgen type {self.type}")
        return marshal_attributes([
            Attribute(NFTA_NG_DREG, be_u32(self.register)),
            Attribute(NFTA_NG_MODULUS, be_u32(self.modulus)),
            Attribute(NFTA_NG_TYPE, be_u32(self.type)),
            Attribute(NFTA_NG_OFFSET, be_u32(self.offset)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Numgen":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_NG_DREG:
                expr.register = read_u32(attr.data)
            elif attr.kind == NFTA_NG_MODULUS:
                expr.modulus = read_u32(attr.data)
            elif attr.kind == NFTA_NG_TYPE:
                expr.type = read_u32(attr.data)
            elif attr.kind == NFTA_NG_OFFSET:
                expr.offset = read_u32(attr.data)
        return expr