"""The byteorder expression: converts register contents between byte orders."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_BYTEORDER_SREG = 1
NFTA_BYTEORDER_DREG = 2
NFTA_BYTEORDER_OP = 3
NFTA_BYTEORDER_LEN = 4
NFTA_BYTEORDER_SIZE = 5


class ByteorderOp(IntEnum):
    NTOH = 0
    HTON = 1


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Byteorder(Expr, name="byteorder", parseable=False):
    """Converts ``length`` bytes in units of ``size`` between network and host order."""

    source_register: int = 0
    dest_register: int = 0
    op: ByteorderOp | int = ByteorderOp.NTOH
    length: int = 0
    size: int = 0

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_BYTEORDER_SREG, be_u32(self.source_register)),
            Attribute(NFTA_BYTEORDER_DREG, be_u32(self.dest_register)),
            Attribute(NFTA_BYTEORDER_OP, be_u32(self.op)),
            Attribute(NFTA_BYTEORDER_LEN, be_u32(self.length)),
            Attribute(NFTA_BYTEORDER_SIZE, be_u32(self.size)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Byteorder":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_BYTEORDER_SREG:
                expr.source_register = read_u32(attr.data)
            elif attr.kind == NFTA_BYTEORDER_DREG:
                expr.dest_register = read_u32(attr.data)
            elif attr.kind == NFTA_BYTEORDER_OP:
                expr.op = _as_enum(ByteorderOp, read_u32(attr.data))
            elif attr.kind == NFTA_BYTEORDER_LEN:
                expr.length = read_u32(attr.data)
            elif attr.kind == NFTA_BYTEORDER_SIZE:
                expr.size = read_u32(attr.data)
        return expr