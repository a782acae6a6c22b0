"""The queue expression: passes packets to userspace."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u16, marshal_attributes, parse_attributes, read_u16

NFTA_QUEUE_NUM = 1
NFTA_QUEUE_TOTAL = 2
NFTA_QUEUE_FLAGS = 3


class QueueFlag(IntFlag):
    BYPASS = 0x01
    FANOUT = 0x02
    MASK = 0x03


@dataclass
class Queue(Expr, name="queue"):
    """Queues packets to ``num`` (spread over ``total`` queues)."""

    num: int = 0
    total: int = 0
    flag: QueueFlag | int = QueueFlag(0)

    def marshal_data(self, fam: int) -> bytes:
        if not self.total:
            self.total = 1  # the kernel's default
        return marshal_attributes([
            Attribute(NFTA_QUEUE_NUM, be_u16(self.num)),
            Attribute(NFTA_QUEUE_TOTAL, be_u16(self.total)),
            Attribute(NFTA_QUEUE_FLAGS, be_u16(self.flag)),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Queue":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_QUEUE_NUM:
                expr.num = read_u16(attr.data)
            elif attr.kind == NFTA_QUEUE_TOTAL:
                expr.total = read_u16(attr.data)
            elif attr.kind == NFTA_QUEUE_FLAGS:
                expr.flag = QueueFlag(read_u16(attr.data))
        return expr