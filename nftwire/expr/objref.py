"""The objref expression: refers to a stateful object by name."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_string, read_u32

NFTA_OBJREF_IMM_TYPE = 1
NFTA_OBJREF_IMM_NAME = 2


@dataclass
class Objref(Expr, name="objref"):
    """References a named stateful object of the given type."""

    type: int = 0
    name: str = ""

    def marshal_data(self, fam: int) -> bytes:
        # The name is sent without a trailing NUL.
        return marshal_attributes([
            Attribute(NFTA_OBJREF_IMM_TYPE, be_u32(self.type)),
            Attribute(NFTA_OBJREF_IMM_NAME, self.name.encode()),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Objref":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_OBJREF_IMM_TYPE:
                expr.type = read_u32(attr.data)
            elif attr.kind == NFTA_OBJREF_IMM_NAME:
                expr.name = read_string(attr.data)
        return expr