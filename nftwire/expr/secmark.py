"""The secmark expression: sets a security mark."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, marshal_attributes, parse_attributes, read_string

NFTA_SECMARK_CTX = 0x01


@dataclass
class SecMark(Expr, name="secmark"):
    """A security mark with the given security context."""

    ctx: str = ""

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([Attribute(NFTA_SECMARK_CTX, self.ctx.encode())])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "SecMark":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_SECMARK_CTX:
                expr.ctx = read_string(attr.data)
        return expr