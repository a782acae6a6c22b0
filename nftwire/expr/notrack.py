"""The notrack expression: disables connection tracking for a packet."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import NFTA_EXPR_NAME, Expr
from nftwire.netlink import Attribute, marshal_attributes, parse_attributes


@dataclass
class Notrack(Expr, name="notrack", parseable=False):
    """Skips connection tracking; the expression carries no data."""

    def marshal(self, fam: int) -> bytes:
        return marshal_attributes([Attribute(NFTA_EXPR_NAME, b"notrack\x00")])

    def marshal_data(self, fam: int) -> bytes:
        return b"notrack\x00"

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Notrack":
        parse_attributes(data)
        return cls()