"""Ruleset generation messages."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.netlink import Message, NetlinkError, parse_attributes, read_string, read_u32

NFNL_SUBSYS_NFTABLES = 10
NFT_MSG_NEWGEN = 15

NFTA_GEN_ID = 1
NFTA_GEN_PROC_PID = 2
NFTA_GEN_PROC_NAME = 3

GEN_HEADER_TYPE = (NFNL_SUBSYS_NFTABLES << 8) | NFT_MSG_NEWGEN


@dataclass
class GenMsg:
    """A ruleset generation and the process that produced it.

    ``proc_comm`` holds at most 16 bytes, the kernel's task name length.
    """

    id: int = 0
    proc_pid: int = 0
    proc_comm: str = ""


def gen_from_message(msg: Message) -> GenMsg:
    """Decode a new-generation message; unknown attributes are an error."""
    if msg.type != GEN_HEADER_TYPE:
        raise NetlinkError(f"unexpected header type: got {msg.type}, want {GEN_HEADER_TYPE}")
    if len(msg.data) < 4:
        raise NetlinkError("generation message too short")

    gen = GenMsg()
    for attr in parse_attributes(msg.data[4:]):
        if attr.kind == NFTA_GEN_ID:
            gen.id = read_u32(attr.data)
        elif attr.kind == NFTA_GEN_PROC_PID:
            gen.proc_pid = read_u32(attr.data)
        elif attr.kind == NFTA_GEN_PROC_NAME:
            gen.proc_comm = read_string(attr.data)
        else:
            raise NetlinkError(f"Unknown attribute: {attr.kind} {attr.data!r}")
    return gen