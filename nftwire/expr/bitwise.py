"""The bitwise expression: masks and xors a register."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import NFTA_DATA_VALUE, Expr
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u32,
)

NFTA_BITWISE_SREG = 1
NFTA_BITWISE_DREG = 2
NFTA_BITWISE_LEN = 3
NFTA_BITWISE_MASK = 4
NFTA_BITWISE_XOR = 5


def _nested_value(data: bytes) -> bytes | None:
    value = None
    for attr in parse_attributes(data):
        if attr.kind == NFTA_DATA_VALUE:
            value = attr.data
    return value


@dataclass
class Bitwise(Expr, name="bitwise"):
    """Computes ``(source & mask) ^ xor`` into the destination register."""

    source_register: int = 0
    dest_register: int = 0
    length: int = 0
    mask: bytes = b""
    xor: bytes = b""

    def marshal_data(self, fam: int) -> bytes:
        mask = marshal_attributes([Attribute(NFTA_DATA_VALUE, self.mask)])
        xor = marshal_attributes([Attribute(NFTA_DATA_VALUE, self.xor)])
        return marshal_attributes([
            Attribute(NFTA_BITWISE_SREG, be_u32(self.source_register)),
            Attribute(NFTA_BITWISE_DREG, be_u32(self.dest_register)),
            Attribute(NFTA_BITWISE_LEN, be_u32(self.length)),
            Attribute(NLA_F_NESTED | NFTA_BITWISE_MASK, mask),
            Attribute(NLA_F_NESTED | NFTA_BITWISE_XOR, xor),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Bitwise":
        bitwise = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_BITWISE_SREG:
                bitwise.source_register = read_u32(attr.data)
            elif attr.kind == NFTA_BITWISE_DREG:
                bitwise.dest_register = read_u32(attr.data)
            elif attr.kind == NFTA_BITWISE_LEN:
                bitwise.length = read_u32(attr.data)
            elif attr.kind == NFTA_BITWISE_MASK:
                value = _nested_value(attr.data)
                if value is not None:
                    bitwise.mask = value
            elif attr.kind == NFTA_BITWISE_XOR:
                value = _nested_value(attr.data)
                if value is not None:
                    bitwise.xor = value
        return bitwise