"""The immediate expression: loads a constant into a register."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import NFTA_DATA_VALUE, Expr
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    NetlinkError,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u32,
)

NFTA_IMMEDIATE_DREG = 1
NFTA_IMMEDIATE_DATA = 2


@dataclass
class Immediate(Expr, name="immediate"):
    """Writes constant data into a destination register."""

    register: int = 0
    data: bytes = b""

    def marshal_data(self, fam: int) -> bytes:
        value = marshal_attributes([Attribute(NFTA_DATA_VALUE, self.data)])
        return marshal_attributes([
            Attribute(NFTA_IMMEDIATE_DREG, be_u32(self.register)),
            Attribute(NLA_F_NESTED | NFTA_IMMEDIATE_DATA, value),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Immediate":
        imm = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_IMMEDIATE_DREG:
                imm.register = read_u32(attr.data)
            elif attr.kind == NFTA_IMMEDIATE_DATA:
                try:
                    nested = parse_attributes(attr.data)
                except NetlinkError as exc:
                    raise NetlinkError(f"decoding immediate: {exc}") from exc
                for inner in nested:
                    if inner.kind == NFTA_DATA_VALUE:
                        imm.data = inner.data
        return imm