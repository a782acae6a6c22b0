"""The log expression."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from nftwire.expr.base import Expr, ExprError
from nftwire.netlink import (
    Attribute,
    be_u16,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u16,
    read_u32,
)

NFTA_LOG_GROUP = 1
NFTA_LOG_PREFIX = 2
NFTA_LOG_SNAPLEN = 3
NFTA_LOG_QTHRESHOLD = 4
NFTA_LOG_LEVEL = 5
NFTA_LOG_FLAGS = 6


class LogLevel(IntEnum):
    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7
    AUDIT = 8


class LogFlags(IntFlag):
    TCPSEQ = 0x01
    TCPOPT = 0x02
    IPOPT = 0x04
    UID = 0x08
    NFLOG = 0x10
    MACDECODE = 0x20
    MASK = 0x2F


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Log(Expr, name="log"):
    """Logs matching packets.

    ``key`` marks which options are present: bit ``1 << NFTA_LOG_*`` is set
    for each attribute to encode.
    """

    level: LogLevel | int = LogLevel.EMERG
    flags: LogFlags | int = LogFlags(0)
    key: int = 0
    snaplen: int = 0
    group: int = 0
    qthreshold: int = 0
    data: bytes = b""

    def _has(self, attr_type: int) -> bool:
        return bool(self.key & (1 << attr_type))

    def marshal_data(self, fam: int) -> bytes:
        attrs: list[Attribute] = []
        if self._has(NFTA_LOG_GROUP):
            attrs.append(Attribute(NFTA_LOG_GROUP, be_u16(self.group)))
        if self._has(NFTA_LOG_PREFIX):
            attrs.append(Attribute(NFTA_LOG_PREFIX, bytes(self.data) + b"\x00"))
        if self._has(NFTA_LOG_SNAPLEN):
            attrs.append(Attribute(NFTA_LOG_SNAPLEN, be_u32(self.snaplen)))
        if self._has(NFTA_LOG_QTHRESHOLD):
            attrs.append(Attribute(NFTA_LOG_QTHRESHOLD, be_u16(self.qthreshold)))
        if self._has(NFTA_LOG_LEVEL):
            attrs.append(Attribute(NFTA_LOG_LEVEL, be_u32(self.level)))
        if self._has(NFTA_LOG_FLAGS):
            attrs.append(Attribute(NFTA_LOG_FLAGS, be_u32(self.flags)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Log":
        log = cls()
        for attr in parse_attributes(data):
            log.key |= 1 << attr.kind
            if attr.kind == NFTA_LOG_GROUP:
                log.group = read_u16(attr.data)
            elif attr.kind == NFTA_LOG_PREFIX:
                if not attr.data:
                    raise ExprError("expr: empty log prefix attribute")
                log.data = attr.data[:-1]
            elif attr.kind == NFTA_LOG_SNAPLEN:
                log.snaplen = read_u32(attr.data)
            elif attr.kind == NFTA_LOG_QTHRESHOLD:
                log.qthreshold = read_u16(attr.data)
            elif attr.kind == NFTA_LOG_LEVEL:
                log.level = _as_enum(LogLevel, read_u32(attr.data))
            elif attr.kind == NFTA_LOG_FLAGS:
                log.flags = LogFlags(read_u32(attr.data))
        return log