"""The tproxy expression: transparent proxying."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import (
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u8,
    read_u32,
)

NFTA_TPROXY_FAMILY = 0x01
NFTA_TPROXY_REG_ADDR = 0x02
NFTA_TPROXY_REG_PORT = 0x03


@dataclass
class TProxy(Expr, name="tproxy", parseable=False):
    """Redirects packets to a local socket at the address and port in registers.

    ``table_family`` is informational and not encoded.
    """

    family: int = 0
    table_family: int = 0
    reg_addr: int = 0
    reg_port: int = 0

    def marshal_data(self, fam: int) -> bytes:
        attrs = [
            Attribute(NFTA_TPROXY_FAMILY, be_u32(self.family)),
            Attribute(NFTA_TPROXY_REG_PORT, be_u32(self.reg_port)),
        ]
        if self.reg_addr:
            attrs.append(Attribute(NFTA_TPROXY_REG_ADDR, be_u32(self.reg_addr)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "TProxy":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_TPROXY_FAMILY:
                if len(attr.data) == 1:
                    expr.family = read_u8(attr.data)
                else:
                    expr.family = read_u32(attr.data) & 0xFF
            elif attr.kind == NFTA_TPROXY_REG_PORT:
                expr.reg_port = read_u32(attr.data)
            elif attr.kind == NFTA_TPROXY_REG_ADDR:
                expr.reg_addr = read_u32(attr.data)
        return expr