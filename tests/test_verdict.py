import pytest

from nftwire.expr.base import NFT_REG_VERDICT, NFTA_DATA_VERDICT, NFTA_EXPR_DATA, NFTA_EXPR_NAME
from nftwire.expr.verdict import (
    NFTA_IMMEDIATE_DATA,
    NFTA_IMMEDIATE_DREG,
    NFTA_VERDICT_CHAIN,
    NFTA_VERDICT_CODE,
    Verdict,
    VerdictKind,
)
from nftwire.netlink import NetlinkError, parse_attributes, read_u32


def _expr_data(blob: bytes) -> bytes:
    for attr in parse_attributes(blob):
        if attr.kind == NFTA_EXPR_DATA:
            return attr.data
    raise AssertionError("no expression data")


def _verdict_attrs(verdict: Verdict):
    attrs = parse_attributes(verdict.marshal_data(0))
    imm = next(a for a in attrs if a.kind == NFTA_IMMEDIATE_DATA)
    nested = parse_attributes(imm.data)
    assert nested[0].kind == NFTA_DATA_VERDICT
    return parse_attributes(nested[0].data)


def test_marshals_as_immediate():
    attrs = parse_attributes(Verdict(kind=VerdictKind.ACCEPT).marshal(0))
    assert attrs[0].kind == NFTA_EXPR_NAME
    assert attrs[0].data == b"immediate\x00"


def test_writes_verdict_register():
    attrs = parse_attributes(Verdict(kind=VerdictKind.DROP).marshal_data(0))
    assert attrs[0].kind == NFTA_IMMEDIATE_DREG
    assert read_u32(attrs[0].data) == NFT_REG_VERDICT
    assert attrs[1].nested


def test_negative_code_wire_form():
    inner = _verdict_attrs(Verdict(kind=VerdictKind.JUMP, chain="base"))
    assert inner[0].kind == NFTA_VERDICT_CODE
    assert inner[0].data == b"\xff\xff\xff\xfd"
    assert inner[1].kind == NFTA_VERDICT_CHAIN
    assert inner[1].data == b"base\x00"


def test_chain_omitted_when_empty():
    inner = _verdict_attrs(Verdict(kind=VerdictKind.ACCEPT))
    assert [a.kind for a in inner] == [NFTA_VERDICT_CODE]


@pytest.mark.parametrize(
    "verdict",
    [Verdict(kind=kind) for kind in VerdictKind]
    + [
        Verdict(kind=VerdictKind.JUMP, chain="input"),
        Verdict(kind=VerdictKind.GOTO, chain="forward-chain"),
    ],
)
def test_round_trip(verdict):
    decoded = Verdict.unmarshal(0, _expr_data(verdict.marshal(0)))
    assert decoded == verdict
    assert isinstance(decoded.kind, VerdictKind)


def test_truncated_data_raises():
    data = Verdict(kind=VerdictKind.ACCEPT).marshal_data(0)
    with pytest.raises(NetlinkError):
        Verdict.unmarshal(0, data[:-2])