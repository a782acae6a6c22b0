"""Flowtables: fast-path offload tables, and their netlink messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag

from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    Message,
    NetlinkError,
    be_u32,
    extra_header,
    marshal_attributes,
    parse_attributes,
    read_string,
    read_u32,
    read_u64,
)

NFNL_SUBSYS_NFTABLES = 10

NFT_MSG_NEWFLOWTABLE = 0x16
NFT_MSG_GETFLOWTABLE = 0x17
NFT_MSG_DELFLOWTABLE = 0x18

NFTA_FLOWTABLE_TABLE = 1
NFTA_FLOWTABLE_NAME = 2
NFTA_FLOWTABLE_HOOK = 3
NFTA_FLOWTABLE_USE = 4
NFTA_FLOWTABLE_HANDLE = 5
NFTA_FLOWTABLE_PAD = 6
NFTA_FLOWTABLE_FLAGS = 7

NFTA_FLOWTABLE_HOOK_NUM = 1
NFTA_FLOWTABLE_PRIORITY = 2
NFTA_FLOWTABLE_DEVS = 3

NFTA_DEVICE_NAME = 1

# Only the ingress hook is supported by the kernel for flowtables.
FLOWTABLE_HOOK_INGRESS = 0
# "filter" stands for priority 0.
FLOWTABLE_PRIORITY_FILTER = 0

_NLM_F_REQUEST = 0x1
_NLM_F_ACK = 0x4
_NLM_F_CREATE = 0x400

NEW_FLOWTABLE_TYPE = (NFNL_SUBSYS_NFTABLES << 8) | NFT_MSG_NEWFLOWTABLE
DEL_FLOWTABLE_TYPE = (NFNL_SUBSYS_NFTABLES << 8) | NFT_MSG_DELFLOWTABLE


class FlowtableFlags(IntFlag):
    HW_OFFLOAD = 1
    COUNTER = 2
    MASK = HW_OFFLOAD | COUNTER


def _signed32(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass
class Flowtable:
    """A flowtable in the table ``table_name`` of address family ``family``."""

    table_name: str = ""
    family: int = 0
    name: str = ""
    hooknum: int | None = None
    priority: int | None = None
    devices: list[str] = field(default_factory=list)
    use: int = 0
    flags: FlowtableFlags | int = FlowtableFlags(0)
    handle: int = 0

    def add_message(self) -> Message:
        """Build the request creating this flowtable.

        An unset hook becomes ingress and an unset priority becomes filter;
        both are stored back on the flowtable.
        """
        if self.hooknum is None:
            self.hooknum = FLOWTABLE_HOOK_INGRESS
        if self.priority is None:
            self.priority = FLOWTABLE_PRIORITY_FILTER

        hook_attrs = [
            Attribute(NFTA_FLOWTABLE_HOOK_NUM, be_u32(self.hooknum)),
            Attribute(NFTA_FLOWTABLE_PRIORITY, be_u32(self.priority & 0xFFFFFFFF)),
        ]
        if self.devices:
            devs = marshal_attributes(
                Attribute(NFTA_DEVICE_NAME, device.encode()) for device in self.devices
            )
            hook_attrs.append(Attribute(NLA_F_NESTED | NFTA_FLOWTABLE_DEVS, devs))

        data = marshal_attributes([
            Attribute(NFTA_FLOWTABLE_TABLE, self.table_name.encode()),
            Attribute(NFTA_FLOWTABLE_NAME, self.name.encode()),
            Attribute(NFTA_FLOWTABLE_FLAGS, be_u32(self.flags)),
            Attribute(NLA_F_NESTED | NFTA_FLOWTABLE_HOOK, marshal_attributes(hook_attrs)),
        ])
        return Message(
            type=NEW_FLOWTABLE_TYPE,
            flags=_NLM_F_REQUEST | _NLM_F_ACK | _NLM_F_CREATE,
            data=extra_header(self.family, 0) + data,
        )

    def delete_message(self) -> Message:
        """Build the request deleting this flowtable."""
        data = marshal_attributes([
            Attribute(NFTA_FLOWTABLE_TABLE, self.table_name.encode()),
            Attribute(NFTA_FLOWTABLE_NAME, self.name.encode()),
        ])
        return Message(
            type=DEL_FLOWTABLE_TYPE,
            flags=_NLM_F_REQUEST | _NLM_F_ACK,
            data=extra_header(self.family, 0) + data,
        )


def _devices_from_attrs(data: bytes) -> list[str]:
    return [read_string(a.data) for a in parse_attributes(data) if a.kind == NFTA_DEVICE_NAME]


def _hook_from_attrs(data: bytes) -> tuple[int, int, list[str]]:
    hooknum = 0
    priority = 0
    devices: list[str] = []
    for attr in parse_attributes(data):
        if attr.kind == NFTA_FLOWTABLE_HOOK_NUM:
            hooknum = read_u32(attr.data)
        elif attr.kind == NFTA_FLOWTABLE_PRIORITY:
            priority = _signed32(read_u32(attr.data))
        elif attr.kind == NFTA_FLOWTABLE_DEVS:
            devices = _devices_from_attrs(attr.data)
    return hooknum, priority, devices


def flowtable_from_message(msg: Message) -> Flowtable:
    """Decode a flowtable from a new-flowtable message."""
    if msg.type != NEW_FLOWTABLE_TYPE:
        raise NetlinkError(
            f"unexpected header type: got {msg.type}, want {NEW_FLOWTABLE_TYPE}"
        )
    if len(msg.data) < 4:
        raise NetlinkError("flowtable message too short")

    flowtable = Flowtable(family=msg.data[0])
    for attr in parse_attributes(msg.data[4:]):
        if attr.kind == NFTA_FLOWTABLE_TABLE:
            flowtable.table_name = read_string(attr.data)
        elif attr.kind == NFTA_FLOWTABLE_NAME:
            flowtable.name = read_string(attr.data)
        elif attr.kind == NFTA_FLOWTABLE_USE:
            flowtable.use = read_u32(attr.data)
        elif attr.kind == NFTA_FLOWTABLE_HANDLE:
            flowtable.handle = read_u64(attr.data)
        elif attr.kind == NFTA_FLOWTABLE_FLAGS:
            flowtable.flags = FlowtableFlags(read_u32(attr.data))
        elif attr.kind == NFTA_FLOWTABLE_HOOK:
            flowtable.hooknum, flowtable.priority, flowtable.devices = _hook_from_attrs(
                attr.data
            )
    return flowtable