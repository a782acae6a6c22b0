"""The range expression: compares a register against an inclusive range."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import NFTA_DATA_VALUE, Expr
from nftwire.expr.meta import CmpOp
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u32,
)

NFTA_RANGE_SREG = 1
NFTA_RANGE_OP = 2
NFTA_RANGE_FROM_DATA = 3
NFTA_RANGE_TO_DATA = 4


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _nested_value(attr_type: int, value: bytes) -> Attribute:
    return Attribute(
        NLA_F_NESTED | attr_type,
        marshal_attributes([Attribute(NFTA_DATA_VALUE, value)]),
    )


def _first_value(data: bytes) -> bytes | None:
    inner = parse_attributes(data)
    if inner and inner[0].kind == NFTA_DATA_VALUE:
        return inner[0].data
    return None


@dataclass
class Range(Expr, name="range"):
    """Matches when the register lies between ``from_data`` and ``to_data``."""

    op: CmpOp | int = CmpOp.EQ
    register: int = 0
    from_data: bytes = b""
    to_data: bytes = b""

    def marshal_data(self, fam: int) -> bytes:
        attrs: list[Attribute] = []
        if self.register > 0:
            attrs.append(Attribute(NFTA_RANGE_SREG, be_u32(self.register)))
        attrs.append(Attribute(NFTA_RANGE_OP, be_u32(self.op)))
        if self.from_data:
            attrs.append(_nested_value(NFTA_RANGE_FROM_DATA, self.from_data))
        if self.to_data:
            attrs.append(_nested_value(NFTA_RANGE_TO_DATA, self.to_data))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Range":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_RANGE_OP:
                expr.op = _as_enum(CmpOp, read_u32(attr.data))
            elif attr.kind == NFTA_RANGE_SREG:
                expr.register = read_u32(attr.data)
            elif attr.kind == NFTA_RANGE_FROM_DATA:
                value = _first_value(attr.data)
                if value is not None:
                    expr.from_data = value
            elif attr.kind == NFTA_RANGE_TO_DATA:
                value = _first_value(attr.data)
                if value is not None:
                    expr.to_data = value
        return expr