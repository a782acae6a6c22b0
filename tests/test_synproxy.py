import pytest

from nftwire.expr.base import NFTA_EXPR_DATA, NFTA_EXPR_NAME, expr_class_for_name
from nftwire.expr.synproxy import (
    NF_SYNPROXY_OPT_ECN,
    NF_SYNPROXY_OPT_MSS,
    NF_SYNPROXY_OPT_SACK_PERM,
    NF_SYNPROXY_OPT_TIMESTAMP,
    NF_SYNPROXY_OPT_WSCALE,
    NFTA_SYNPROXY_FLAGS,
    SynProxy,
)
from nftwire.netlink import parse_attributes, read_u32


def _expr_data(blob: bytes) -> bytes:
    for attr in parse_attributes(blob):
        if attr.kind == NFTA_EXPR_DATA:
            return attr.data
    raise AssertionError("no expression data")


def _flags(proxy: SynProxy) -> int:
    for attr in parse_attributes(proxy.marshal_data(0)):
        if attr.kind == NFTA_SYNPROXY_FLAGS:
            return read_u32(attr.data)
    raise AssertionError("no flags attribute")


def test_name_attribute():
    attrs = parse_attributes(SynProxy().marshal(0))
    assert attrs[0].kind == NFTA_EXPR_NAME
    assert attrs[0].data == b"synproxy\x00"


@pytest.mark.parametrize(
    "proxy",
    [
        SynProxy(),
        SynProxy(mss=1460, mss_value_set=True, wscale=7, wscale_value_set=True),
        SynProxy(mss=0, mss_value_set=True, timestamp=True, sack_perm=True),
        SynProxy(ecn=True, wscale=0, wscale_value_set=True),
    ],
)
def test_round_trip(proxy):
    assert SynProxy.unmarshal(0, _expr_data(proxy.marshal(0))) == proxy


def test_nonzero_values_imply_set():
    decoded = SynProxy.unmarshal(0, SynProxy(mss=1460, wscale=7).marshal_data(0))
    assert decoded.mss == 1460
    assert decoded.wscale == 7
    assert decoded.mss_value_set
    assert decoded.wscale_value_set


def test_no_options_no_flags():
    assert _flags(SynProxy()) == 0


def test_flag_bits():
    flags = _flags(SynProxy(mss_value_set=True, timestamp=True, sack_perm=True, ecn=True))
    expected = (NF_SYNPROXY_OPT_MSS | NF_SYNPROXY_OPT_SACK_PERM
                | NF_SYNPROXY_OPT_TIMESTAMP | NF_SYNPROXY_OPT_ECN)
    assert flags == expected
    assert flags & NF_SYNPROXY_OPT_WSCALE == 0


def test_registered_for_parsing():
    assert expr_class_for_name("synproxy") is SynProxy