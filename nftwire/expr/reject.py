"""The reject expression: rejects packets with an ICMP error or TCP reset."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import (
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u8,
    read_u32,
)

NFTA_REJECT_TYPE = 1
NFTA_REJECT_ICMP_CODE = 2


@dataclass
class Reject(Expr, name="reject"):
    """Rejects a packet with the given reject type and ICMP code."""

    type: int = 0
    code: int = 0

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_REJECT_TYPE, be_u32(self.type)),
            Attribute(NFTA_REJECT_ICMP_CODE, bytes([self.code & 0xFF])),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Reject":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_REJECT_TYPE:
                expr.type = read_u32(attr.data)
            elif attr.kind == NFTA_REJECT_ICMP_CODE:
                expr.code = read_u8(attr.data)
        return expr