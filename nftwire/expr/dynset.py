"""The dynset expression: adds or updates set elements from packet data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from nftwire.expr.base import Expr, marshal
from nftwire.netlink import (
    Attribute,
    be_u32,
    be_u64,
    marshal_attributes,
    parse_attributes,
    read_string,
    read_u32,
    read_u64,
)

NFTA_DYNSET_SET_NAME = 1
NFTA_DYNSET_SET_ID = 2
NFTA_DYNSET_OP = 3
NFTA_DYNSET_SREG_KEY = 4
NFTA_DYNSET_SREG_DATA = 5
NFTA_DYNSET_TIMEOUT = 6
NFTA_DYNSET_EXPR = 7
NFTA_DYNSET_PAD = 8
NFTA_DYNSET_FLAGS = 9
NFTA_DYNSET_EXPRESSIONS = 0xA

NFT_DYNSET_F_INV = 1 << 0
NFT_DYNSET_F_EXPR = 1 << 1

NFT_DYNSET_OP_ADD = 0
NFT_DYNSET_OP_UPDATE = 1
NFT_DYNSET_OP_DELETE = 2

NFTA_LIST_ELEM = 1

_MILLISECOND = timedelta(milliseconds=1)


@dataclass
class Dynset(Expr, name="dynset"):
    """Dynamically adds or updates an element of a set or map from a packet.

    A single attached expression is sent on its own; several are sent as a list
    and flagged with ``NFT_DYNSET_F_EXPR``.
    """

    src_reg_key: int = 0
    src_reg_data: int = 0
    set_id: int = 0
    set_name: str = ""
    operation: int = NFT_DYNSET_OP_ADD
    timeout: timedelta = timedelta(0)
    invert: bool = False
    exprs: list[Expr] = field(default_factory=list)

    def marshal_data(self, fam: int) -> bytes:
        attrs = [Attribute(NFTA_DYNSET_SREG_KEY, be_u32(self.src_reg_key))]
        if self.src_reg_data:
            attrs.append(Attribute(NFTA_DYNSET_SREG_DATA, be_u32(self.src_reg_data)))
        attrs.append(Attribute(NFTA_DYNSET_OP, be_u32(self.operation)))
        if self.timeout:
            millis = self.timeout // _MILLISECOND
            attrs.append(Attribute(NFTA_DYNSET_TIMEOUT, be_u64(millis)))

        flags = NFT_DYNSET_F_INV if self.invert else 0
        attrs += [
            Attribute(NFTA_DYNSET_SET_NAME, self.set_name.encode() + b"\x00"),
            Attribute(NFTA_DYNSET_SET_ID, be_u32(self.set_id)),
        ]

        if len(self.exprs) == 1:
            attrs.append(Attribute(NFTA_DYNSET_EXPR, marshal(fam, self.exprs[0])))
        elif self.exprs:
            flags |= NFT_DYNSET_F_EXPR
            elems = marshal_attributes(
                Attribute(NFTA_LIST_ELEM, marshal(fam, expr)) for expr in self.exprs
            )
            attrs.append(Attribute(NFTA_DYNSET_EXPRESSIONS, elems))

        attrs.append(Attribute(NFTA_DYNSET_FLAGS, be_u32(flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Dynset":
        # Deferred: the parser imports every expression module, this one included.
        from nftwire.expr.parsing import exprs_from_bytes, parse_expr_msg

        dynset = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_DYNSET_SET_NAME:
                dynset.set_name = read_string(attr.data)
            elif attr.kind == NFTA_DYNSET_SET_ID:
                dynset.set_id = read_u32(attr.data)
            elif attr.kind == NFTA_DYNSET_SREG_KEY:
                dynset.src_reg_key = read_u32(attr.data)
            elif attr.kind == NFTA_DYNSET_SREG_DATA:
                dynset.src_reg_data = read_u32(attr.data)
            elif attr.kind == NFTA_DYNSET_OP:
                dynset.operation = read_u32(attr.data)
            elif attr.kind == NFTA_DYNSET_TIMEOUT:
                dynset.timeout = timedelta(milliseconds=read_u64(attr.data))
            elif attr.kind == NFTA_DYNSET_FLAGS:
                dynset.invert = bool(read_u32(attr.data) & NFT_DYNSET_F_INV)
            elif attr.kind == NFTA_DYNSET_EXPR:
                dynset.exprs = list(exprs_from_bytes(fam, attr.data))
            elif attr.kind == NFTA_DYNSET_EXPRESSIONS:
                dynset.exprs = list(parse_expr_msg(fam, attr.data))
        return dynset