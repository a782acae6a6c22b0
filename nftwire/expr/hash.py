"""The hash expression: hashes register contents into another register."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_HASH_SREG = 1
NFTA_HASH_DREG = 2
NFTA_HASH_LEN = 3
NFTA_HASH_MODULUS = 4
NFTA_HASH_SEED = 5
NFTA_HASH_OFFSET = 6
NFTA_HASH_TYPE = 7


class HashType(IntEnum):
    JENKINS = 0
    SYM = 1


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class Hash(Expr, name="hash"):
    """Computes ``hash(source) % modulus + offset`` into the destination register."""

    source_register: int = 0
    dest_register: int = 0
    length: int = 0
    modulus: int = 0
    seed: int = 0
    offset: int = 0
    type: HashType | int = HashType.JENKINS

    def marshal_data(self, fam: int) -> bytes:
        attrs = [
            Attribute(NFTA_HASH_SREG, be_u32(self.source_register)),
            Attribute(NFTA_HASH_DREG, be_u32(self.dest_register)),
            Attribute(NFTA_HASH_LEN, be_u32(self.length)),
            Attribute(NFTA_HASH_MODULUS, be_u32(self.modulus)),
        ]
        if self.seed:
            attrs.append(Attribute(NFTA_HASH_SEED, be_u32(self.seed)))
        attrs += [
            Attribute(NFTA_HASH_OFFSET, be_u32(self.offset)),
            Attribute(NFTA_HASH_TYPE, be_u32(self.type)),
        ]
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Hash":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_HASH_SREG:
                expr.source_register = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_DREG:
                expr.dest_register = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_LEN:
                expr.length = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_MODULUS:
                expr.modulus = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_SEED:
                expr.seed = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_OFFSET:
                expr.offset = read_u32(attr.data)
            elif attr.kind == NFTA_HASH_TYPE:
                expr.type = _as_enum(HashType, read_u32(attr.data))
        return expr