"""The synproxy expression: answers TCP handshakes on behalf of a server."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import (
    Attribute,
    be_u16,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u8,
    read_u16,
    read_u32,
)

NFTA_SYNPROXY_MSS = 0x01
NFTA_SYNPROXY_WSCALE = 0x02
NFTA_SYNPROXY_FLAGS = 0x03

NF_SYNPROXY_OPT_MSS = 0x01
NF_SYNPROXY_OPT_WSCALE = 0x02
NF_SYNPROXY_OPT_SACK_PERM = 0x04
NF_SYNPROXY_OPT_TIMESTAMP = 0x08
NF_SYNPROXY_OPT_ECN = 0x10


@dataclass
class SynProxy(Expr, name="synproxy"):
    """SYN proxy options.

    ``mss_value_set`` and ``wscale_value_set`` mark zero as an intended value;
    a non-zero value is always treated as set.
    """

    mss: int = 0
    wscale: int = 0
    timestamp: bool = False
    sack_perm: bool = False
    ecn: bool = False
    mss_value_set: bool = False
    wscale_value_set: bool = False

    def _flags(self) -> int:
        flags = 0
        for enabled, bit in (
            (self.mss != 0 or self.mss_value_set, NF_SYNPROXY_OPT_MSS),
            (self.wscale != 0 or self.wscale_value_set, NF_SYNPROXY_OPT_WSCALE),
            (self.sack_perm, NF_SYNPROXY_OPT_SACK_PERM),
            (self.timestamp, NF_SYNPROXY_OPT_TIMESTAMP),
            (self.ecn, NF_SYNPROXY_OPT_ECN),
        ):
            if enabled:
                flags |= bit
        return flags

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTA_SYNPROXY_MSS, be_u16(self.mss)),
            Attribute(NFTA_SYNPROXY_WSCALE, bytes([self.wscale & 0xFF])),
            Attribute(NFTA_SYNPROXY_FLAGS, be_u32(self._flags())),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "SynProxy":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_SYNPROXY_MSS:
                expr.mss = read_u16(attr.data)
            elif attr.kind == NFTA_SYNPROXY_WSCALE:
                expr.wscale = read_u8(attr.data)
            elif attr.kind == NFTA_SYNPROXY_FLAGS:
                flags = read_u32(attr.data)
                expr.mss_value_set = flags & NF_SYNPROXY_OPT_MSS == NF_SYNPROXY_OPT_MSS
                expr.wscale_value_set = flags & NF_SYNPROXY_OPT_WSCALE == NF_SYNPROXY_OPT_WSCALE
                expr.sack_perm = flags & NF_SYNPROXY_OPT_SACK_PERM == NF_SYNPROXY_OPT_SACK_PERM
                expr.timestamp = flags & NF_SYNPROXY_OPT_TIMESTAMP == NF_SYNPROXY_OPT_TIMESTAMP
                expr.ecn = flags & NF_SYNPROXY_OPT_ECN == NF_SYNPROXY_OPT_ECN
        return expr