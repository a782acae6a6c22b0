"""The lookup expression: matches register contents against a set."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_string, read_u32

NFTA_LOOKUP_SET = 1
NFTA_LOOKUP_SREG = 2
NFTA_LOOKUP_DREG = 3
NFTA_LOOKUP_SET_ID = 4
NFTA_LOOKUP_FLAGS = 5

NFT_LOOKUP_F_INV = 1


@dataclass
class Lookup(Expr, name="lookup"):
    """Looks up the source register in a set, optionally loading mapped data."""

    source_register: int = 0
    dest_register: int = 0
    is_dest_reg_set: bool = False
    set_id: int = 0
    set_name: str = ""
    invert: bool = False

    def marshal_data(self, fam: int) -> bytes:
        attrs: list[Attribute] = []
        if self.source_register:
            attrs.append(Attribute(NFTA_LOOKUP_SREG, be_u32(self.source_register)))
        if self.is_dest_reg_set:
            attrs.append(Attribute(NFTA_LOOKUP_DREG, be_u32(self.dest_register)))
        if self.invert:
            attrs.append(Attribute(NFTA_LOOKUP_FLAGS, be_u32(NFT_LOOKUP_F_INV)))
        attrs += [
            Attribute(NFTA_LOOKUP_SET, self.set_name.encode() + b"\x00"),
            Attribute(NFTA_LOOKUP_SET_ID, be_u32(self.set_id)),
        ]
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Lookup":
        lookup = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_LOOKUP_SET:
                lookup.set_name = read_string(attr.data)
            elif attr.kind == NFTA_LOOKUP_SET_ID:
                lookup.set_id = read_u32(attr.data)
            elif attr.kind == NFTA_LOOKUP_SREG:
                lookup.source_register = read_u32(attr.data)
            elif attr.kind == NFTA_LOOKUP_DREG:
                lookup.dest_register = read_u32(attr.data)
                lookup.is_dest_reg_set = True
            elif attr.kind == NFTA_LOOKUP_FLAGS:
                lookup.invert = bool(read_u32(attr.data) & NFT_LOOKUP_F_INV)
        return lookup