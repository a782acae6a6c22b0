"""The exthdr expression: reads or writes extension headers and TCP options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import (
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u8,
    read_u32,
)

NFTA_EXTHDR_DREG = 1
NFTA_EXTHDR_TYPE = 2
NFTA_EXTHDR_OFFSET = 3
NFTA_EXTHDR_LEN = 4
NFTA_EXTHDR_FLAGS = 5
NFTA_EXTHDR_OP = 6
NFTA_EXTHDR_SREG = 7


class ExthdrOp(IntEnum):
    IPV6 = 0
    TCPOPT = 1


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Exthdr(Expr, name="exthdr"):
    """Loads from or writes to an extension header.

    A non-zero ``source_register`` makes this a write; otherwise it loads into
    ``dest_register``. Mixing both is rejected by the kernel.
    """

    dest_register: int = 0
    type: int = 0
    offset: int = 0
    length: int = 0
    flags: int = 0
    op: ExthdrOp | int = ExthdrOp.IPV6
    source_register: int = 0

    def marshal_data(self, fam: int) -> bytes:
        if self.source_register:
            attrs = [Attribute(NFTA_EXTHDR_SREG, be_u32(self.source_register))]
        else:
            attrs = [Attribute(NFTA_EXTHDR_DREG, be_u32(self.dest_register))]
        attrs += [
            Attribute(NFTA_EXTHDR_TYPE, bytes([self.type & 0xFF])),
            Attribute(NFTA_EXTHDR_OFFSET, be_u32(self.offset)),
            Attribute(NFTA_EXTHDR_LEN, be_u32(self.length)),
            Attribute(NFTA_EXTHDR_OP, be_u32(self.op)),
        ]
        if self.dest_register:
            attrs.append(Attribute(NFTA_EXTHDR_FLAGS, be_u32(self.flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Exthdr":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_EXTHDR_DREG:
                expr.dest_register = read_u32(attr.data)
            elif attr.kind == NFTA_EXTHDR_TYPE:
                expr.type = read_u8(attr.data)
            elif attr.kind == NFTA_EXTHDR_OFFSET:
                expr.offset = read_u32(attr.data)
            elif attr.kind == NFTA_EXTHDR_LEN:
                expr.length = read_u32(attr.data)
            elif attr.kind == NFTA_EXTHDR_FLAGS:
                expr.flags = read_u32(attr.data)
            elif attr.kind == NFTA_EXTHDR_OP:
                expr.op = _as_enum(ExthdrOp, read_u32(attr.data))
            elif attr.kind == NFTA_EXTHDR_SREG:
                expr.source_register = read_u32(attr.data)
        return expr