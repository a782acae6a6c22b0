"""The nat expression: source and destination network address translation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.expr.meta import (
    NF_NAT_RANGE_PERSISTENT,
    NF_NAT_RANGE_PREFIX,
    NF_NAT_RANGE_PROTO_RANDOM,
    NF_NAT_RANGE_PROTO_RANDOM_FULLY,
    NF_NAT_RANGE_PROTO_SPECIFIED,
)
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_NAT_TYPE = 1
NFTA_NAT_FAMILY = 2
NFTA_NAT_REG_ADDR_MIN = 3
NFTA_NAT_REG_ADDR_MAX = 4
NFTA_NAT_REG_PROTO_MIN = 5
NFTA_NAT_REG_PROTO_MAX = 6
NFTA_NAT_FLAGS = 7


class NATType(IntEnum):
    SOURCE_NAT = 0
    DEST_NAT = 1


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class NAT(Expr, name="nat"):
    """Rewrites addresses and ports from the given registers.

    The maximum registers are only encoded when the matching minimum is set.
    """

    type: NATType | int = NATType.SOURCE_NAT
    family: int = 0
    reg_addr_min: int = 0
    reg_addr_max: int = 0
    reg_proto_min: int = 0
    reg_proto_max: int = 0
    random: bool = False
    fully_random: bool = False
    persistent: bool = False
    prefix: bool = False
    specified: bool = False

    def _flags(self) -> int:
        flags = 0
        for enabled, bit in (
            (self.random, NF_NAT_RANGE_PROTO_RANDOM),
            (self.fully_random, NF_NAT_RANGE_PROTO_RANDOM_FULLY),
            (self.persistent, NF_NAT_RANGE_PERSISTENT),
            (self.prefix, NF_NAT_RANGE_PREFIX),
            (self.specified, NF_NAT_RANGE_PROTO_SPECIFIED),
        ):
            if enabled:
                flags |= bit
        return flags

    def marshal_data(self, fam: int) -> bytes:
        attrs = [
            Attribute(NFTA_NAT_TYPE, be_u32(self.type)),
            Attribute(NFTA_NAT_FAMILY, be_u32(self.family)),
        ]
        if self.reg_addr_min:
            attrs.append(Attribute(NFTA_NAT_REG_ADDR_MIN, be_u32(self.reg_addr_min)))
            if self.reg_addr_max:
                attrs.append(Attribute(NFTA_NAT_REG_ADDR_MAX, be_u32(self.reg_addr_max)))
        if self.reg_proto_min:
            attrs.append(Attribute(NFTA_NAT_REG_PROTO_MIN, be_u32(self.reg_proto_min)))
            if self.reg_proto_max:
                attrs.append(Attribute(NFTA_NAT_REG_PROTO_MAX, be_u32(self.reg_proto_max)))
        flags = self._flags()
        if flags:
            attrs.append(Attribute(NFTA_NAT_FLAGS, be_u32(flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "NAT":
        nat = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_NAT_TYPE:
                nat.type = _as_enum(NATType, read_u32(attr.data))
            elif attr.kind == NFTA_NAT_FAMILY:
                nat.family = read_u32(attr.data)
            elif attr.kind == NFTA_NAT_REG_ADDR_MIN:
                nat.reg_addr_min = read_u32(attr.data)
            elif attr.kind == NFTA_NAT_REG_ADDR_MAX:
                nat.reg_addr_max = read_u32(attr.data)
            elif attr.kind == NFTA_NAT_REG_PROTO_MIN:
                nat.reg_proto_min = read_u32(attr.data)
            elif attr.kind == NFTA_NAT_REG_PROTO_MAX:
                nat.reg_proto_max = read_u32(attr.data)
            elif attr.kind == NFTA_NAT_FLAGS:
                flags = read_u32(attr.data)
                nat.persistent = bool(flags & NF_NAT_RANGE_PERSISTENT)
                nat.random = bool(flags & NF_NAT_RANGE_PROTO_RANDOM)
                nat.fully_random = bool(flags & NF_NAT_RANGE_PROTO_RANDOM_FULLY)
                nat.prefix = bool(flags & NF_NAT_RANGE_PREFIX)
                nat.specified = bool(flags & NF_NAT_RANGE_PROTO_SPECIFIED)
        return nat