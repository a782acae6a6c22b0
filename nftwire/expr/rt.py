"""The rt expression: loads routing information."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_RT_DREG = 1
NFTA_RT_KEY = 2


class RtKey(IntEnum):
    """Which piece of routing information to load."""

    CLASSID = 0
    NEXTHOP4 = 1
    NEXTHOP6 = 2
    TCPMSS = 3


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Rt(Expr, name="rt", parseable=False):
    """Loads the routing information selected by ``key`` into a register."""

    register: int = 0
    key: RtKey | int = RtKey.CLASSID

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_RT_KEY, be_u32(self.key)),
            Attribute(NFTA_RT_DREG, be_u32(self.register)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Rt":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_RT_KEY:
                expr.key = _as_enum(RtKey, read_u32(attr.data))
            elif attr.kind == NFTA_RT_DREG:
                expr.register = read_u32(attr.data)
        return expr