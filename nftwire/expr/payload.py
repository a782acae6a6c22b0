"""The payload expression: loads from or writes to packet headers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_PAYLOAD_DREG = 1
NFTA_PAYLOAD_BASE = 2
NFTA_PAYLOAD_OFFSET = 3
NFTA_PAYLOAD_LEN = 4
NFTA_PAYLOAD_SREG = 5
NFTA_PAYLOAD_CSUM_TYPE = 6
NFTA_PAYLOAD_CSUM_OFFSET = 7
NFTA_PAYLOAD_CSUM_FLAGS = 8


class PayloadBase(IntEnum):
    LL_HEADER = 0
    NETWORK_HEADER = 1
    TRANSPORT_HEADER = 2


class PayloadCsumType(IntEnum):
    NONE = 0
    INET = 1


class PayloadOperationType(IntEnum):
    LOAD = 0
    WRITE = 1


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Payload(Expr, name="payload"):
    """Loads ``length`` bytes at ``offset`` from a header, or writes them back."""

    operation_type: PayloadOperationType = PayloadOperationType.LOAD
    dest_register: int = 0
    source_register: int = 0
    base: PayloadBase | int = PayloadBase.LL_HEADER
    offset: int = 0
    length: int = 0
    csum_type: PayloadCsumType | int = PayloadCsumType.NONE
    csum_offset: int = 0
    csum_flags: int = 0

    def marshal_data(self, fam: int) -> bytes:
        if self.operation_type == PayloadOperationType.WRITE:
            attrs = [Attribute(NFTA_PAYLOAD_SREG, be_u32(self.source_register))]
        else:
            attrs = [Attribute(NFTA_PAYLOAD_DREG, be_u32(self.dest_register))]
        attrs += [
            Attribute(NFTA_PAYLOAD_BASE, be_u32(self.base)),
            Attribute(NFTA_PAYLOAD_OFFSET, be_u32(self.offset)),
            Attribute(NFTA_PAYLOAD_LEN, be_u32(self.length)),
        ]
        if self.csum_type > 0:
            attrs += [
                Attribute(NFTA_PAYLOAD_CSUM_TYPE, be_u32(self.csum_type)),
                Attribute(NFTA_PAYLOAD_CSUM_OFFSET, be_u32(self.csum_offset)),
            ]
            if self.csum_flags > 0:
                attrs.append(Attribute(NFTA_PAYLOAD_CSUM_FLAGS, be_u32(self.csum_flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Payload":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_PAYLOAD_DREG:
                expr.dest_register = read_u32(attr.data)
            elif attr.kind == NFTA_PAYLOAD_SREG:
                expr.source_register = read_u32(attr.data)
                expr.operation_type = PayloadOperationType.WRITE
            elif attr.kind == NFTA_PAYLOAD_BASE:
                expr.base = _as_enum(PayloadBase, read_u32(attr.data))
            elif attr.kind == NFTA_PAYLOAD_OFFSET:
                expr.offset = read_u32(attr.data)
            elif attr.kind == NFTA_PAYLOAD_LEN:
                expr.length = read_u32(attr.data)
            elif attr.kind == NFTA_PAYLOAD_CSUM_TYPE:
                expr.csum_type = _as_enum(PayloadCsumType, read_u32(attr.data))
            elif attr.kind == NFTA_PAYLOAD_CSUM_OFFSET:
                expr.csum_offset = read_u32(attr.data)
            elif attr.kind == NFTA_PAYLOAD_CSUM_FLAGS:
                expr.csum_flags = read_u32(attr.data)
        return expr