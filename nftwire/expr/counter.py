"""The counter expression."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u64, marshal_attributes, parse_attributes, read_u64

NFTA_COUNTER_BYTES = 1
NFTA_COUNTER_PACKETS = 2


@dataclass
class Counter(Expr, name="counter"):
    """Counts bytes and packets that reach the rule."""

    bytes: int = 0
    packets: int = 0

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_COUNTER_BYTES, be_u64(self.bytes)),
            Attribute(NFTA_COUNTER_PACKETS, be_u64(self.packets)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Counter":
        counter = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_COUNTER_BYTES:
                counter.bytes = read_u64(attr.data)
            elif attr.kind == NFTA_COUNTER_PACKETS:
                counter.packets = read_u64(attr.data)
        return counter