from nftwire.expr.base import NFTA_EXPR_DATA, NFTA_EXPR_NAME, expr_class_for_name
from nftwire.expr.flow_offload import NFTNL_EXPR_FLOW_TABLE_NAME, FlowOffload
from nftwire.netlink import Attribute, marshal_attributes, parse_attributes


def _data(expr):
    return next(a.data for a in parse_attributes(expr.marshal(0)) if a.kind == NFTA_EXPR_DATA)


def test_name_attribute():
    attrs = parse_attributes(FlowOffload(name="ft").marshal(0))
    assert attrs[0].kind == NFTA_EXPR_NAME
    assert attrs[0].data == b"flow_offload\x00"


def test_registered():
    assert expr_class_for_name("flow_offload") is FlowOffload


def test_table_name_not_nul_terminated():
    attrs = parse_attributes(FlowOffload(name="ft").marshal_data(0))
    assert attrs == [Attribute(NFTNL_EXPR_FLOW_TABLE_NAME, b"ft")]


def test_round_trip():
    expr = FlowOffload(name="myflowtable")
    assert FlowOffload.unmarshal(0, _data(expr)) == expr


def test_unmarshal_drops_trailing_nul():
    data = marshal_attributes([Attribute(NFTNL_EXPR_FLOW_TABLE_NAME, b"ft\x00")])
    assert FlowOffload.unmarshal(0, data).name == "ft"