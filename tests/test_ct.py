import pytest

from nftwire.expr.base import NFTA_EXPR_DATA, expr_class_for_name
from nftwire.expr.ct import (
    CT_DIR_ORIGINAL,
    CT_DIR_REPLY,
    CT_STATE_TCP_ESTABLISHED,
    CT_STATE_TCP_TIMEOUT_DEFAULTS,
    CT_STATE_UDP_REPLIED,
    CT_STATE_UDP_TIMEOUT_DEFAULTS,
    IPPROTO_UDP,
    NFTA_CT_DIRECTION,
    NFTA_CT_EXPECT_L3PROTO,
    Ct,
    CtExpect,
    CtHelper,
    CtKey,
    CtTimeout,
)
from nftwire.netlink import NetlinkError, parse_attributes


def _roundtrip(expr, cls):
    for attr in parse_attributes(expr.marshal(0)):
        if attr.kind == NFTA_EXPR_DATA:
            return cls.unmarshal(0, attr.data)
    raise AssertionError("no expression data attribute")


@pytest.mark.parametrize(
    "ct",
    [
        Ct(register=1, key=CtKey.STATUS),
        Ct(register=1, key=CtKey.PROTODST, direction=0),
        Ct(register=1, key=CtKey.SRC, direction=1),
        Ct(register=1, key=CtKey.SRC, source_register=True),
        Ct(register=1, key=CtKey.SRCIP, direction=0),
        Ct(register=1, key=CtKey.SRCIP, direction=1),
        Ct(register=1, key=CtKey.SRCIP6, direction=0),
        Ct(register=1, key=CtKey.DSTIP6, direction=1),
        Ct(register=1, key=CtKey.PKTS, direction=CT_DIR_ORIGINAL, opt_direction=True),
        Ct(register=1, key=CtKey.BYTES),
    ],
)
def test_ct_roundtrip(ct):
    assert _roundtrip(ct, Ct) == ct


def test_ct_optional_direction_omitted_without_flag():
    attrs = parse_attributes(Ct(register=1, key=CtKey.BYTES, direction=CT_DIR_REPLY).marshal_data(0))
    assert NFTA_CT_DIRECTION not in [a.kind for a in attrs]


def test_ct_direction_encoded_for_address_keys():
    attrs = parse_attributes(Ct(register=1, key=CtKey.DST, direction=CT_DIR_REPLY).marshal_data(0))
    directions = [a.data for a in attrs if a.kind == NFTA_CT_DIRECTION]
    assert directions == [bytes([CT_DIR_REPLY])]


def test_ct_name_and_registry():
    first = parse_attributes(Ct().marshal(0))[0]
    assert first.data == b"ct\x00"
    assert expr_class_for_name("ct") is Ct
    assert expr_class_for_name("cthelper") is CtHelper
    assert expr_class_for_name("ctexpect") is CtExpect
    assert expr_class_for_name("cttimeout") is CtTimeout


def test_ct_truncated_data_raises():
    with pytest.raises(NetlinkError):
        Ct.unmarshal(0, Ct(register=1).marshal_data(0)[:-2])


def test_cthelper_roundtrip():
    helper = CtHelper(name="ftp-standard", l3proto=2, l4proto=6)
    assert _roundtrip(helper, CtHelper) == helper


def test_cthelper_zero_protocols_omitted():
    attrs = parse_attributes(CtHelper(name="sip").marshal_data(0))
    assert [a.data for a in attrs] == [b"sip"]


def test_ctexpect_roundtrip_with_and_without_l3proto():
    full = CtExpect(l3proto=2, l4proto=6, dport=22, timeout=5000, size=8)
    partial = CtExpect(l4proto=17, dport=53, timeout=100, size=1)
    assert _roundtrip(full, CtExpect) == full
    assert _roundtrip(partial, CtExpect) == partial
    kinds = [a.kind for a in parse_attributes(partial.marshal_data(0))]
    assert NFTA_CT_EXPECT_L3PROTO not in kinds


def test_cttimeout_tcp_defaults_roundtrip():
    timeout = CtTimeout(l3proto=2, l4proto=6)
    decoded = _roundtrip(timeout, CtTimeout)
    assert decoded.l3proto == 2
    assert decoded.l4proto == 6
    assert decoded.policy == dict(CT_STATE_TCP_TIMEOUT_DEFAULTS)


def test_cttimeout_udp_override_roundtrip():
    timeout = CtTimeout(l3proto=2, l4proto=IPPROTO_UDP, policy={CT_STATE_UDP_REPLIED: 999})
    decoded = _roundtrip(timeout, CtTimeout)
    expected = dict(CT_STATE_UDP_TIMEOUT_DEFAULTS)
    expected[CT_STATE_UDP_REPLIED] = 999
    assert decoded.policy == expected


def test_cttimeout_marshal_leaves_defaults_untouched():
    before = dict(CT_STATE_TCP_TIMEOUT_DEFAULTS)
    decoded = _roundtrip(CtTimeout(l4proto=6, policy={CT_STATE_TCP_ESTABLISHED: 7}), CtTimeout)
    assert decoded.policy[CT_STATE_TCP_ESTABLISHED] == 7
    assert dict(CT_STATE_TCP_TIMEOUT_DEFAULTS) == before
    assert CT_STATE_TCP_TIMEOUT_DEFAULTS[CT_STATE_TCP_ESTABLISHED] == 43200