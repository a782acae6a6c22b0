"""Meta, masquerade and compare expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import NFTA_DATA_VALUE, Expr
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u32,
)

NFTA_META_DREG = 1
NFTA_META_KEY = 2
NFTA_META_SREG = 3

NFTA_MASQ_FLAGS = 1
NFTA_MASQ_REG_PROTO_MIN = 2
NFTA_MASQ_REG_PROTO_MAX = 3

NFTA_CMP_SREG = 1
NFTA_CMP_OP = 2
NFTA_CMP_DATA = 3

NF_NAT_RANGE_PROTO_SPECIFIED = 0x02
NF_NAT_RANGE_PROTO_RANDOM = 0x04
NF_NAT_RANGE_PERSISTENT = 0x08
NF_NAT_RANGE_PROTO_RANDOM_FULLY = 0x10
NF_NAT_RANGE_PREFIX = 0x40


class MetaKey(IntEnum):
    """Which piece of packet meta information to load."""

    LEN = 0
    PROTOCOL = 1
    PRIORITY = 2
    MARK = 3
    IIF = 4
    OIF = 5
    IIFNAME = 6
    OIFNAME = 7
    IIFTYPE = 8
    OIFTYPE = 9
    SKUID = 10
    SKGID = 11
    NFTRACE = 12
    RTCLASSID = 13
    SECMARK = 14
    NFPROTO = 15
    L4PROTO = 16
    BRIIIFNAME = 17
    BRIOIFNAME = 18
    PKTTYPE = 19
    CPU = 20
    IIFGROUP = 21
    OIFGROUP = 22
    CGROUP = 23
    PRANDOM = 24


class CmpOp(IntEnum):
    """Comparison operators."""

    EQ = 0
    NEQ = 1
    LT = 2
    LTE = 3
    GT = 4
    GTE = 5


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Meta(Expr, name="meta"):
    """Loads packet meta information into, or sets it from, a register."""

    key: MetaKey | int = MetaKey.LEN
    source_register: bool = False
    register: int = 0

    def marshal_data(self, fam: int) -> bytes:
        reg_type = NFTA_META_SREG if self.source_register else NFTA_META_DREG
        return marshal_attributes([
            Attribute(NFTA_META_KEY, be_u32(self.key)),
            Attribute(reg_type, be_u32(self.register)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Meta":
        meta = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_META_SREG:
                meta.register = read_u32(attr.data)
                meta.source_register = True
            elif attr.kind == NFTA_META_DREG:
                meta.register = read_u32(attr.data)
            elif attr.kind == NFTA_META_KEY:
                meta.key = _as_enum(MetaKey, read_u32(attr.data))
        return meta


@dataclass
class Masq(Expr, name="masq"):
    """Source NAT to the address of the output interface."""

    random: bool = False
    fully_random: bool = False
    persistent: bool = False
    to_ports: bool = False
    reg_proto_min: int = 0
    reg_proto_max: int = 0

    def marshal_data(self, fam: int) -> bytes:
        attrs: list[Attribute] = []
        if not self.to_ports:
            flags = 0
            if self.random:
                flags |= NF_NAT_RANGE_PROTO_RANDOM
            if self.fully_random:
                flags |= NF_NAT_RANGE_PROTO_RANDOM_FULLY
            if self.persistent:
                flags |= NF_NAT_RANGE_PERSISTENT
            if flags:
                attrs.append(Attribute(NFTA_MASQ_FLAGS, be_u32(flags)))
        else:
            attrs.append(Attribute(NFTA_MASQ_REG_PROTO_MIN, be_u32(self.reg_proto_min)))
            if self.reg_proto_max:
                attrs.append(Attribute(NFTA_MASQ_REG_PROTO_MAX, be_u32(self.reg_proto_max)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Masq":
        masq = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_MASQ_REG_PROTO_MIN:
                masq.to_ports = True
                masq.reg_proto_min = read_u32(attr.data)
            elif attr.kind == NFTA_MASQ_REG_PROTO_MAX:
                masq.reg_proto_max = read_u32(attr.data)
            elif attr.kind == NFTA_MASQ_FLAGS:
                flags = read_u32(attr.data)
                masq.persistent = bool(flags & NF_NAT_RANGE_PERSISTENT)
                masq.random = bool(flags & NF_NAT_RANGE_PROTO_RANDOM)
                masq.fully_random = bool(flags & NF_NAT_RANGE_PROTO_RANDOM_FULLY)
        return masq


@dataclass
class Cmp(Expr, name="cmp"):
    """Compares a register with a constant."""

    op: CmpOp | int = CmpOp.EQ
    register: int = 0
    data: bytes = b""

    def marshal_data(self, fam: int) -> bytes:
        value = marshal_attributes([Attribute(NFTA_DATA_VALUE, self.data)])
        return marshal_attributes([
            Attribute(NFTA_CMP_SREG, be_u32(self.register)),
            Attribute(NFTA_CMP_OP, be_u32(self.op)),
            Attribute(NLA_F_NESTED | NFTA_CMP_DATA, value),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Cmp":
        cmp = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CMP_SREG:
                cmp.register = read_u32(attr.data)
            elif attr.kind == NFTA_CMP_OP:
                cmp.op = _as_enum(CmpOp, read_u32(attr.data))
            elif attr.kind == NFTA_CMP_DATA:
                inner = parse_attributes(attr.data)
                if inner and inner[0].kind == NFTA_DATA_VALUE:
                    cmp.data = inner[0].data
        return cmp