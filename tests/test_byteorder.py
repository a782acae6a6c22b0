import pytest

from nftwire.expr.base import NFTA_EXPR_DATA, expr_class_for_name
from nftwire.expr.byteorder import (
    NFTA_BYTEORDER_DREG,
    NFTA_BYTEORDER_LEN,
    NFTA_BYTEORDER_OP,
    NFTA_BYTEORDER_SIZE,
    NFTA_BYTEORDER_SREG,
    Byteorder,
    ByteorderOp,
)
from nftwire.netlink import NetlinkError, be_u32, parse_attributes


def _roundtrip(expr):
    for attr in parse_attributes(expr.marshal(0)):
        if attr.kind == NFTA_EXPR_DATA:
            return Byteorder.unmarshal(0, attr.data)
    raise AssertionError("no expression data attribute")


@pytest.mark.parametrize("op", [ByteorderOp.NTOH, ByteorderOp.HTON])
def test_roundtrip(op):
    expr = Byteorder(source_register=1, dest_register=2, op=op, length=4, size=2)
    assert _roundtrip(expr) == expr


def test_attribute_order():
    expr = Byteorder(source_register=1, dest_register=2, op=ByteorderOp.HTON, length=4, size=2)
    attrs = [(a.kind, a.data) for a in parse_attributes(expr.marshal_data(0))]
    assert attrs == [
        (NFTA_BYTEORDER_SREG, be_u32(1)),
        (NFTA_BYTEORDER_DREG, be_u32(2)),
        (NFTA_BYTEORDER_OP, be_u32(ByteorderOp.HTON)),
        (NFTA_BYTEORDER_LEN, be_u32(4)),
        (NFTA_BYTEORDER_SIZE, be_u32(2)),
    ]


def test_name_and_not_registered():
    assert parse_attributes(Byteorder().marshal(0))[0].data == b"byteorder\x00"
    assert expr_class_for_name("byteorder") is None


def test_truncated_data_raises():
    with pytest.raises(NetlinkError):
        Byteorder.unmarshal(0, Byteorder(size=2).marshal_data(0)[:-1])