import pytest

from nftwire.expr.base import NFTA_EXPR_DATA, NFTA_EXPR_NAME, expr_class_for_name
from nftwire.expr.lookup import (
    NFTA_LOOKUP_DREG,
    NFTA_LOOKUP_FLAGS,
    NFTA_LOOKUP_SET,
    NFTA_LOOKUP_SET_ID,
    NFTA_LOOKUP_SREG,
    Lookup,
)
from nftwire.netlink import parse_attributes


def _data(expr):
    return next(a.data for a in parse_attributes(expr.marshal(0)) if a.kind == NFTA_EXPR_DATA)


def test_name_attribute():
    attrs = parse_attributes(Lookup(set_name="s").marshal(0))
    assert attrs[0].kind == NFTA_EXPR_NAME
    assert attrs[0].data == b"lookup\x00"


def test_registered():
    assert expr_class_for_name("lookup") is Lookup


@pytest.mark.parametrize(
    "expr",
    [
        Lookup(source_register=1, set_id=3, set_name="allowed"),
        Lookup(source_register=1, dest_register=0, is_dest_reg_set=True, set_name="map", set_id=1),
        Lookup(source_register=2, set_name="blocked", invert=True),
    ],
)
def test_round_trip(expr):
    assert Lookup.unmarshal(0, _data(expr)) == expr


def test_minimal_attributes():
    kinds = [a.kind for a in parse_attributes(Lookup(set_name="s").marshal_data(0))]
    assert kinds == [NFTA_LOOKUP_SET, NFTA_LOOKUP_SET_ID]


def test_full_attribute_order():
    expr = Lookup(source_register=1, is_dest_reg_set=True, invert=True, set_name="s")
    kinds = [a.kind for a in parse_attributes(expr.marshal_data(0))]
    assert kinds == [
        NFTA_LOOKUP_SREG, NFTA_LOOKUP_DREG, NFTA_LOOKUP_FLAGS,
        NFTA_LOOKUP_SET, NFTA_LOOKUP_SET_ID,
    ]


def test_set_name_nul_terminated():
    attrs = {a.kind: a.data for a in parse_attributes(Lookup(set_name="allowed").marshal_data(0))}
    assert attrs[NFTA_LOOKUP_SET] == b"allowed\x00"