import pytest

from nftwire.expr.base import NFTA_DATA_VALUE, NFTA_EXPR_DATA
from nftwire.expr.meta import (
    NFTA_CMP_DATA,
    NFTA_CMP_OP,
    NFTA_CMP_SREG,
    NFTA_META_DREG,
    NFTA_META_KEY,
    NFTA_META_SREG,
    Cmp,
    CmpOp,
    Masq,
    Meta,
    MetaKey,
)
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    NetlinkError,
    be_u32,
    marshal_attributes,
    parse_attributes,
)


def _expr_data(encoded):
    for attr in parse_attributes(encoded):
        if attr.kind == NFTA_EXPR_DATA:
            return attr.data
    raise AssertionError("no expression data")


@pytest.mark.parametrize(
    "meta",
    [
        Meta(key=1, source_register=False, register=1),
        Meta(key=1, source_register=True, register=1),
    ],
    ids=["dest register", "source register"],
)
def test_meta_round_trip(meta):
    assert Meta.unmarshal(0, _expr_data(meta.marshal(0))) == meta


def test_meta_register_attribute_choice():
    dreg = parse_attributes(Meta(key=MetaKey.MARK, register=1).marshal_data(0))
    sreg = parse_attributes(Meta(key=MetaKey.MARK, source_register=True, register=1).marshal_data(0))
    assert [a.kind for a in dreg] == [NFTA_META_KEY, NFTA_META_DREG]
    assert [a.kind for a in sreg] == [NFTA_META_KEY, NFTA_META_SREG]


def test_meta_key_decoded_as_enum():
    meta = Meta.unmarshal(0, Meta(key=MetaKey.L4PROTO, register=1).marshal_data(0))
    assert meta.key is MetaKey.L4PROTO


def test_meta_unknown_key_kept_as_int():
    data = marshal_attributes([Attribute(NFTA_META_KEY, be_u32(200))])
    assert Meta.unmarshal(0, data).key == 200


def test_meta_bad_register_length():
    data = marshal_attributes([Attribute(NFTA_META_DREG, b"\x01")])
    with pytest.raises(NetlinkError):
        Meta.unmarshal(0, data)


@pytest.mark.parametrize(
    "masq",
    [
        Masq(),
        Masq(random=True, persistent=True),
        Masq(fully_random=True),
        Masq(to_ports=True, reg_proto_min=1),
        Masq(to_ports=True, reg_proto_min=1, reg_proto_max=2),
    ],
)
def test_masq_round_trip(masq):
    assert Masq.unmarshal(0, _expr_data(masq.marshal(0))) == masq


def test_masq_without_options_is_empty():
    assert Masq().marshal_data(0) == b""


def test_masq_to_ports_ignores_flags():
    masq = Masq(random=True, to_ports=True, reg_proto_min=1)
    decoded = Masq.unmarshal(0, masq.marshal_data(0))
    assert decoded.random is False
    assert decoded.to_ports is True


@pytest.mark.parametrize("op", list(CmpOp))
def test_cmp_round_trip(op):
    cmp = Cmp(op=op, register=1, data=b"\x0a\x00\x00\x01")
    assert Cmp.unmarshal(0, _expr_data(cmp.marshal(0))) == cmp


def test_cmp_layout():
    attrs = parse_attributes(Cmp(op=CmpOp.NEQ, register=1, data=b"ab").marshal_data(0))
    assert [a.kind for a in attrs] == [NFTA_CMP_SREG, NFTA_CMP_OP, NFTA_CMP_DATA]
    assert attrs[2].nested
    assert parse_attributes(attrs[2].data) == [Attribute(NFTA_DATA_VALUE, b"ab")]


def test_cmp_only_first_nested_value_counts():
    nested = marshal_attributes([Attribute(5, b"zz"), Attribute(NFTA_DATA_VALUE, b"ab")])
    data = marshal_attributes([Attribute(NLA_F_NESTED | NFTA_CMP_DATA, nested)])
    assert Cmp.unmarshal(0, data).data == b""