"""The dup expression: duplicates packets to another address."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_DUP_SREG_ADDR = 1
NFTA_DUP_SREG_DEV = 2


@dataclass
class Dup(Expr, name="dup", parseable=False):
    """Duplicates packets to the address in ``reg_addr``, optionally via ``reg_dev``."""

    reg_addr: int = 0
    reg_dev: int = 0
    is_reg_dev_set: bool = False

    def marshal_data(self, fam: int) -> bytes:
        attrs = [Attribute(NFTA_DUP_SREG_ADDR, be_u32(self.reg_addr))]
        if self.is_reg_dev_set:
            attrs.append(Attribute(NFTA_DUP_SREG_DEV, be_u32(self.reg_dev)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Dup":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_DUP_SREG_ADDR:
                expr.reg_addr = read_u32(attr.data)
            elif attr.kind == NFTA_DUP_SREG_DEV:
                expr.reg_dev = read_u32(attr.data)
        return expr