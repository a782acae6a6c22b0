"""Connection tracking expressions: ct, ct helper, ct expectation and ct timeout."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from nftwire.expr.base import Expr
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    be_u16,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_string,
    read_u8,
    read_u16,
    read_u32,
)

NFTA_CT_DREG = 1
NFTA_CT_KEY = 2
NFTA_CT_DIRECTION = 3
NFTA_CT_SREG = 4

NFTA_CT_HELPER_NAME = 1
NFTA_CT_HELPER_L3PROTO = 2
NFTA_CT_HELPER_L4PROTO = 3

NFTA_CT_EXPECT_L3PROTO = 0x01
NFTA_CT_EXPECT_L4PROTO = 0x02
NFTA_CT_EXPECT_DPORT = 0x03
NFTA_CT_EXPECT_TIMEOUT = 0x04
NFTA_CT_EXPECT_SIZE = 0x05

NFTA_CT_TIMEOUT_L3PROTO = 0x01
NFTA_CT_TIMEOUT_L4PROTO = 0x02
NFTA_CT_TIMEOUT_DATA = 0x03

IPPROTO_UDP = 17

CT_STATE_BIT_INVALID = 1
CT_STATE_BIT_ESTABLISHED = 2
CT_STATE_BIT_RELATED = 4
CT_STATE_BIT_NEW = 8
CT_STATE_BIT_UNTRACKED = 64

CT_STATE_TCP_SYN_SENT = 0
CT_STATE_TCP_SYN_RECV = 1
CT_STATE_TCP_ESTABLISHED = 2
CT_STATE_TCP_FIN_WAIT = 3
CT_STATE_TCP_CLOSE_WAIT = 4
CT_STATE_TCP_LAST_ACK = 5
CT_STATE_TCP_TIME_WAIT = 6
CT_STATE_TCP_CLOSE = 7
CT_STATE_TCP_SYN_SENT2 = 8
CT_STATE_TCP_RETRANS = 9
CT_STATE_TCP_UNACK = 10

CT_STATE_UDP_UNREPLIED = 0
CT_STATE_UDP_REPLIED = 1

CT_DIR_ORIGINAL = 0
CT_DIR_REPLY = 1

CT_STATE_TCP_TIMEOUT_DEFAULTS: Mapping[int, int] = MappingProxyType({
    CT_STATE_TCP_SYN_SENT: 120,
    CT_STATE_TCP_SYN_RECV: 60,
    CT_STATE_TCP_ESTABLISHED: 43200,
    CT_STATE_TCP_FIN_WAIT: 120,
    CT_STATE_TCP_CLOSE_WAIT: 60,
    CT_STATE_TCP_LAST_ACK: 30,
    CT_STATE_TCP_TIME_WAIT: 120,
    CT_STATE_TCP_CLOSE: 10,
    CT_STATE_TCP_SYN_SENT2: 120,
    CT_STATE_TCP_RETRANS: 300,
    CT_STATE_TCP_UNACK: 300,
})

CT_STATE_UDP_TIMEOUT_DEFAULTS: Mapping[int, int] = MappingProxyType({
    CT_STATE_UDP_UNREPLIED: 30,
    CT_STATE_UDP_REPLIED: 180,
})


class CtKey(IntEnum):
    """Which piece of conntrack information to load."""

    STATE = 0
    DIRECTION = 1
    STATUS = 2
    MARK = 3
    SECMARK = 4
    EXPIRATION = 5
    HELPER = 6
    L3PROTOCOL = 7
    SRC = 8
    DST = 9
    PROTOCOL = 10
    PROTOSRC = 11
    PROTODST = 12
    LABELS = 13
    PKTS = 14
    BYTES = 15
    AVGPKT = 16
    ZONE = 17
    EVENTMASK = 18
    SRCIP = 19
    DSTIP = 20
    SRCIP6 = 21
    DSTIP6 = 22
    ID = 23


# Keys whose direction is encoded only when explicitly requested.
_OPTIONAL_DIRECTION_KEYS = frozenset({
    CtKey.PKTS, CtKey.BYTES, CtKey.AVGPKT, CtKey.L3PROTOCOL, CtKey.PROTOCOL,
})
# Keys whose direction is always encoded.
_DIRECTION_KEYS = frozenset({
    CtKey.SRC, CtKey.DST, CtKey.PROTOSRC, CtKey.PROTODST,
    CtKey.SRCIP, CtKey.DSTIP, CtKey.SRCIP6, CtKey.DSTIP6,
})


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _timeout_defaults(l4proto: int) -> Mapping[int, int]:
    if l4proto == IPPROTO_UDP:
        return CT_STATE_UDP_TIMEOUT_DEFAULTS
    return CT_STATE_TCP_TIMEOUT_DEFAULTS


@dataclass
class Ct(Expr, name="ct"):
    """Loads conntrack information into, or sets it from, a register."""

    register: int = 0
    source_register: bool = False
    key: CtKey | int = CtKey.STATE
    direction: int = 0
    opt_direction: bool = False

    def marshal_data(self, fam: int) -> bytes:
        reg_type = NFTA_CT_SREG if self.source_register else NFTA_CT_DREG
        attrs = [
            Attribute(NFTA_CT_KEY, be_u32(self.key)),
            Attribute(reg_type, be_u32(self.register)),
        ]
        if self.key in _DIRECTION_KEYS or (
            self.key in _OPTIONAL_DIRECTION_KEYS and self.opt_direction
        ):
            attrs.append(Attribute(NFTA_CT_DIRECTION, bytes([self.direction & 0xFF])))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Ct":
        ct = cls()
        has_direction = False
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CT_KEY:
                ct.key = _as_enum(CtKey, read_u32(attr.data))
            elif attr.kind == NFTA_CT_DREG:
                ct.register = read_u32(attr.data)
            elif attr.kind == NFTA_CT_DIRECTION:
                ct.direction = read_u8(attr.data)
                has_direction = True
            elif attr.kind == NFTA_CT_SREG:
                ct.source_register = True
                ct.register = read_u32(attr.data)
        if ct.key in _OPTIONAL_DIRECTION_KEYS:
            ct.opt_direction = has_direction
        return ct


@dataclass
class CtHelper(Expr, name="cthelper"):
    """A conntrack helper object."""

    name: str = ""
    l3proto: int = 0
    l4proto: int = 0

    def marshal_data(self, fam: int) -> bytes:
        attrs = [Attribute(NFTA_CT_HELPER_NAME, self.name.encode())]
        if self.l3proto:
            attrs.append(Attribute(NFTA_CT_HELPER_L3PROTO, be_u16(self.l3proto)))
        if self.l4proto:
            attrs.append(Attribute(NFTA_CT_HELPER_L4PROTO, bytes([self.l4proto & 0xFF])))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "CtHelper":
        helper = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CT_HELPER_NAME:
                helper.name = read_string(attr.data)
            elif attr.kind == NFTA_CT_HELPER_L3PROTO:
                helper.l3proto = read_u16(attr.data)
            elif attr.kind == NFTA_CT_HELPER_L4PROTO:
                helper.l4proto = read_u8(attr.data)
        return helper


@dataclass
class CtExpect(Expr, name="ctexpect"):
    """A conntrack expectation object."""

    l3proto: int = 0
    l4proto: int = 0
    dport: int = 0
    timeout: int = 0
    size: int = 0

    def marshal_data(self, fam: int) -> bytes:
        # Every field but l3proto is required; l3proto defaults to the table family.
        attrs = [
            Attribute(NFTA_CT_EXPECT_L4PROTO, bytes([self.l4proto & 0xFF])),
            Attribute(NFTA_CT_EXPECT_DPORT, be_u16(self.dport)),
            Attribute(NFTA_CT_EXPECT_TIMEOUT, be_u32(self.timeout)),
            Attribute(NFTA_CT_EXPECT_SIZE, bytes([self.size & 0xFF])),
        ]
        if self.l3proto:
            attrs.append(Attribute(NFTA_CT_EXPECT_L3PROTO, be_u16(self.l3proto)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "CtExpect":
        expect = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CT_EXPECT_L3PROTO:
                expect.l3proto = read_u16(attr.data)
            elif attr.kind == NFTA_CT_EXPECT_L4PROTO:
                expect.l4proto = read_u8(attr.data)
            elif attr.kind == NFTA_CT_EXPECT_DPORT:
                expect.dport = read_u16(attr.data)
            elif attr.kind == NFTA_CT_EXPECT_TIMEOUT:
                expect.timeout = read_u32(attr.data)
            elif attr.kind == NFTA_CT_EXPECT_SIZE:
                expect.size = read_u8(attr.data)
        return expect


@dataclass
class CtTimeout(Expr, name="cttimeout"):
    """A conntrack timeout policy; unset states take the protocol defaults."""

    l3proto: int = 0
    l4proto: int = 0
    policy: dict[int, int] = field(default_factory=dict)

    def effective_policy(self) -> dict[int, int]:
        """The protocol defaults overlaid with this object's policy."""
        policy = dict(_timeout_defaults(self.l4proto))
        policy.update(self.policy)
        return policy

    def marshal_data(self, fam: int) -> bytes:
        policy_data = marshal_attributes(
            Attribute(state + 1, be_u32(timeout))
            for state, timeout in sorted(self.effective_policy().items())
        )
        return marshal_attributes([
            Attribute(NFTA_CT_TIMEOUT_L3PROTO, be_u16(self.l3proto)),
            Attribute(NFTA_CT_TIMEOUT_L4PROTO, bytes([self.l4proto & 0xFF])),
            Attribute(NLA_F_NESTED | NFTA_CT_TIMEOUT_DATA, policy_data),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "CtTimeout":
        timeout = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_CT_TIMEOUT_L3PROTO:
                timeout.l3proto = read_u16(attr.data)
            elif attr.kind == NFTA_CT_TIMEOUT_L4PROTO:
                timeout.l4proto = read_u8(attr.data)
            elif attr.kind == NFTA_CT_TIMEOUT_DATA:
                entries = parse_attributes(attr.data)
                if entries:
                    policy = dict(_timeout_defaults(timeout.l4proto))
                    for entry in entries:
                        policy[entry.kind - 1] = read_u32(entry.data)
                    timeout.policy = policy
        return timeout