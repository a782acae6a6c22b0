"""The limit expression: rate limiting by packets or bytes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr, ExprError
from nftwire.netlink import (
    Attribute,
    be_u32,
    be_u64,
    marshal_attributes,
    parse_attributes,
    read_u32,
    read_u64,
)

NFTA_LIMIT_RATE = 1
NFTA_LIMIT_UNIT = 2
NFTA_LIMIT_BURST = 3
NFTA_LIMIT_TYPE = 4
NFTA_LIMIT_FLAGS = 5

NFT_LIMIT_F_INV = 1


class LimitType(IntEnum):
    """Whether the rate counts packets or bytes."""

    PKTS = 0
    PKT_BYTES = 1


class LimitTime(IntEnum):
    """The time unit of the rate, in seconds."""

    SECOND = 1
    MINUTE = 60
    HOUR = 60 * 60
    DAY = 60 * 60 * 24
    WEEK = 60 * 60 * 24 * 7


def _limit_time(value: int) -> LimitTime:
    try:
        return LimitTime(value)
    except ValueError:
        raise ExprError(f"expr: invalid limit unit value {value}") from None


def _limit_type(value: int) -> LimitType:
    try:
        return LimitType(value)
    except ValueError:
        raise ExprError(f"expr: invalid limit type {value}") from None


@dataclass
class Limit(Expr, name="limit"):
    """Matches until ``rate`` per ``unit`` is reached; ``over`` inverts the match."""

    type: LimitType = LimitType.PKTS
    rate: int = 0
    over: bool = False
    unit: LimitTime = LimitTime.SECOND
    burst: int = 0

    def marshal_data(self, fam: int) -> bytes:
        flags = NFT_LIMIT_F_INV if self.over else 0
        return marshal_attributes([
            Attribute(NFTA_LIMIT_RATE, be_u64(self.rate)),
            Attribute(NFTA_LIMIT_UNIT, be_u64(self.unit)),
            Attribute(NFTA_LIMIT_BURST, be_u32(self.burst)),
            Attribute(NFTA_LIMIT_TYPE, be_u32(self.type)),
            Attribute(NFTA_LIMIT_FLAGS, be_u32(flags)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Limit":
        limit = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_LIMIT_RATE:
                limit.rate = read_u64(attr.data)
            elif attr.kind == NFTA_LIMIT_UNIT:
                limit.unit = _limit_time(read_u64(attr.data))
            elif attr.kind == NFTA_LIMIT_BURST:
                limit.burst = read_u32(attr.data)
            elif attr.kind == NFTA_LIMIT_TYPE:
                limit.type = _limit_type(read_u32(attr.data))
            elif attr.kind == NFTA_LIMIT_FLAGS:
                limit.over = bool(read_u32(attr.data) & NFT_LIMIT_F_INV)
            else:
                raise ExprError("expr: unhandled limit netlink attribute")
        return limit