"""The quota expression: a byte threshold."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import (
    Attribute,
    be_u32,
    be_u64,
    marshal_attributes,
    parse_attributes,
    read_u32,
    read_u64,
)

NFTA_QUOTA_BYTES = 1
NFTA_QUOTA_FLAGS = 2
NFTA_QUOTA_CONSUMED = 4

NFT_QUOTA_F_INV = 1


@dataclass
class Quota(Expr, name="quota"):
    """Matches until ``bytes`` have passed; ``over`` inverts the match."""

    bytes: int = 0
    consumed: int = 0
    over: bool = False

    def marshal_data(self, fam: int) -> bytes:
        flags = NFT_QUOTA_F_INV if self.over else 0
        return marshal_attributes([
            Attribute(NFTA_QUOTA_BYTES, be_u64(self.bytes)),
            Attribute(NFTA_QUOTA_CONSUMED, be_u64(self.consumed)),
            Attribute(NFTA_QUOTA_FLAGS, be_u32(flags)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Quota":
        quota = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_QUOTA_BYTES:
                quota.bytes = read_u64(attr.data)
            elif attr.kind == NFTA_QUOTA_CONSUMED:
                quota.consumed = read_u64(attr.data)
            elif attr.kind == NFTA_QUOTA_FLAGS:
                quota.over = bool(read_u32(attr.data) & NFT_QUOTA_F_INV)
        return quota