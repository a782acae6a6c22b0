from datetime import timedelta

from nftwire.expr.dynset import (
    NFT_DYNSET_F_EXPR,
    NFT_DYNSET_F_INV,
    NFT_DYNSET_OP_UPDATE,
    NFTA_DYNSET_EXPR,
    NFTA_DYNSET_EXPRESSIONS,
    NFTA_DYNSET_FLAGS,
    NFTA_DYNSET_OP,
    NFTA_DYNSET_SET_ID,
    NFTA_DYNSET_SET_NAME,
    NFTA_DYNSET_SREG_KEY,
    Dynset,
)
from nftwire.expr.lookup import Lookup
from nftwire.expr.quota import Quota
from nftwire.netlink import parse_attributes, read_u32


def _flags(data: bytes) -> int:
    return next(read_u32(a.data) for a in parse_attributes(data) if a.kind == NFTA_DYNSET_FLAGS)


def test_round_trip_plain():
    dynset = Dynset(src_reg_key=1, set_id=7, set_name="myset", operation=NFT_DYNSET_OP_UPDATE)
    assert Dynset.unmarshal(0, dynset.marshal_data(0)) == dynset


def test_round_trip_timeout_and_invert():
    dynset = Dynset(
        src_reg_key=1,
        src_reg_data=2,
        set_name="myset",
        timeout=timedelta(seconds=30),
        invert=True,
    )
    restored = Dynset.unmarshal(0, dynset.marshal_data(0))
    assert restored == dynset
    assert _flags(dynset.marshal_data(0)) == NFT_DYNSET_F_INV


def test_attribute_order_without_optional_fields():
    data = Dynset(src_reg_key=1, set_name="s", exprs=[Quota(bytes=10)]).marshal_data(0)
    kinds = [attr.kind for attr in parse_attributes(data)]
    assert kinds == [
        NFTA_DYNSET_SREG_KEY,
        NFTA_DYNSET_OP,
        NFTA_DYNSET_SET_NAME,
        NFTA_DYNSET_SET_ID,
        NFTA_DYNSET_EXPR,
        NFTA_DYNSET_FLAGS,
    ]


def test_single_expression_round_trip():
    dynset = Dynset(src_reg_key=1, set_name="s", exprs=[Quota(bytes=1000, over=True)])
    data = dynset.marshal_data(0)
    assert _flags(data) == 0
    assert Dynset.unmarshal(0, data).exprs == [Quota(bytes=1000, over=True)]


def test_multiple_expressions_use_list_and_flag():
    exprs = [Quota(bytes=5), Lookup(source_register=1, set_name="other")]
    dynset = Dynset(src_reg_key=1, set_name="s", exprs=exprs)
    data = dynset.marshal_data(0)
    kinds = [attr.kind for attr in parse_attributes(data)]
    assert NFTA_DYNSET_EXPRESSIONS in kinds
    assert NFTA_DYNSET_EXPR not in kinds
    assert _flags(data) == NFT_DYNSET_F_EXPR
    assert Dynset.unmarshal(0, data).exprs == exprs


def test_full_marshal_round_trip_via_expression_wrapper():
    dynset = Dynset(src_reg_key=1, set_name="s")
    attrs = parse_attributes(dynset.marshal(0))
    data = next(a.data for a in attrs if a.kind == 2)
    assert Dynset.unmarshal(0, data) == dynset