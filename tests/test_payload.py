from nftwire.expr.payload import (
    NFTA_PAYLOAD_CSUM_FLAGS,
    NFTA_PAYLOAD_CSUM_OFFSET,
    NFTA_PAYLOAD_CSUM_TYPE,
    NFTA_PAYLOAD_DREG,
    NFTA_PAYLOAD_SREG,
    Payload,
    PayloadBase,
    PayloadCsumType,
    PayloadOperationType,
)
from nftwire.netlink import parse_attributes


def _kinds(expr):
    return [a.kind for a in parse_attributes(expr.marshal_data(0))]


def test_load_roundtrip():
    expr = Payload(dest_register=1, base=PayloadBase.NETWORK_HEADER, offset=12, length=4)
    assert Payload.unmarshal(0, expr.marshal_data(0)) == expr


def test_write_roundtrip_with_checksum():
    expr = Payload(
        operation_type=PayloadOperationType.WRITE,
        source_register=1,
        base=PayloadBase.TRANSPORT_HEADER,
        offset=2,
        length=2,
        csum_type=PayloadCsumType.INET,
        csum_offset=16,
        csum_flags=1,
    )
    assert Payload.unmarshal(0, expr.marshal_data(0)) == expr


def test_load_uses_dest_register_only():
    kinds = _kinds(Payload(dest_register=1, source_register=2))
    assert NFTA_PAYLOAD_DREG in kinds
    assert NFTA_PAYLOAD_SREG not in kinds


def test_write_uses_source_register_only():
    kinds = _kinds(Payload(operation_type=PayloadOperationType.WRITE, source_register=2))
    assert NFTA_PAYLOAD_SREG in kinds
    assert NFTA_PAYLOAD_DREG not in kinds


def test_checksum_omitted_without_type():
    expr = Payload(csum_offset=10, csum_flags=1)
    kinds = _kinds(expr)
    assert len(kinds) == 4
    assert kinds[0] == NFTA_PAYLOAD_DREG
    assert [k for k in kinds if k in (NFTA_PAYLOAD_CSUM_TYPE, NFTA_PAYLOAD_CSUM_OFFSET,
                                      NFTA_PAYLOAD_CSUM_FLAGS)] == []
    decoded = Payload.unmarshal(0, expr.marshal_data(0))
    assert decoded.csum_offset == 0
    assert decoded.csum_flags == 0


def test_checksum_flags_omitted_when_zero():
    kinds = _kinds(Payload(csum_type=PayloadCsumType.INET, csum_offset=10))
    assert NFTA_PAYLOAD_CSUM_OFFSET in kinds
    assert NFTA_PAYLOAD_CSUM_FLAGS not in kinds