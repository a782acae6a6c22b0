"""The redir expression: redirects packets to the local machine."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_REDIR_REG_PROTO_MIN = 1
NFTA_REDIR_REG_PROTO_MAX = 2
NFTA_REDIR_FLAGS = 3


@dataclass
class Redir(Expr, name="redir"):
    """Redirects to a local port taken from the given registers.

    Each attribute is encoded only when its value is non-zero.
    """

    register_proto_min: int = 0
    register_proto_max: int = 0
    flags: int = 0

    def marshal_data(self, fam: int) -> bytes:
        attrs: list[Attribute] = []
        if self.register_proto_min > 0:
            attrs.append(Attribute(NFTA_REDIR_REG_PROTO_MIN, be_u32(self.register_proto_min)))
        if self.register_proto_max > 0:
            attrs.append(Attribute(NFTA_REDIR_REG_PROTO_MAX, be_u32(self.register_proto_max)))
        if self.flags > 0:
            attrs.append(Attribute(NFTA_REDIR_FLAGS, be_u32(self.flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Redir":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_REDIR_REG_PROTO_MIN:
                expr.register_proto_min = read_u32(attr.data)
            elif attr.kind == NFTA_REDIR_REG_PROTO_MAX:
                expr.register_proto_max = read_u32(attr.data)
            elif attr.kind == NFTA_REDIR_FLAGS:
                expr.flags = read_u32(attr.data)
        return expr