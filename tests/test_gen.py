import pytest

from nftwire.gen import (
    GEN_HEADER_TYPE,
    NFTA_GEN_ID,
    NFTA_GEN_PROC_NAME,
    NFTA_GEN_PROC_PID,
    GenMsg,
    gen_from_message,
)
from nftwire.netlink import Attribute, Message, NetlinkError, be_u32, extra_header, marshal_attributes


def _message(attrs, msg_type=GEN_HEADER_TYPE):
    return Message(type=msg_type, flags=0, data=extra_header(0, 0) + marshal_attributes(attrs))


def test_header_type_fixed_by_protocol():
    msg = _message([Attribute(NFTA_GEN_ID, be_u32(3))], msg_type=(10 << 8) | 15)
    assert gen_from_message(msg) == GenMsg(id=3)


def test_decodes_all_attributes():
    msg = _message([
        Attribute(NFTA_GEN_ID, be_u32(7)),
        Attribute(NFTA_GEN_PROC_PID, be_u32(1234)),
        Attribute(NFTA_GEN_PROC_NAME, b"nft\x00"),
    ])
    assert gen_from_message(msg) == GenMsg(id=7, proc_pid=1234, proc_comm="nft")


def test_empty_message_gives_defaults():
    assert gen_from_message(_message([])) == GenMsg()


def test_unknown_attribute_raises():
    with pytest.raises(NetlinkError):
        gen_from_message(_message([Attribute(9, be_u32(1))]))


def test_wrong_header_type_raises():
    with pytest.raises(NetlinkError):
        gen_from_message(_message([Attribute(NFTA_GEN_ID, be_u32(1))], msg_type=GEN_HEADER_TYPE + 1))