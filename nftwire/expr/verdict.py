"""Verdicts: immediate expressions writing into the verdict register."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nftwire.expr.base import NFT_REG_VERDICT, NFTA_DATA_VERDICT, Expr
from nftwire.netlink import (
    NLA_F_NESTED,
    Attribute,
    be_u32,
    marshal_attributes,
    parse_attributes,
    read_u32,
)

NFTA_IMMEDIATE_DREG = 1
NFTA_IMMEDIATE_DATA = 2

NFTA_VERDICT_CODE = 1
NFTA_VERDICT_CHAIN = 2


class VerdictKind(IntEnum):
    """Verdict codes, as defined by netfilter."""

    RETURN = -5
    GOTO = -4
    JUMP = -3
    BREAK = -2
    CONTINUE = -1
    DROP = 0
    ACCEPT = 1
    STOLEN = 2
    QUEUE = 3
    REPEAT = 4
    STOP = 5


def _as_enum(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _signed32(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass
class Verdict(Expr, name="immediate", parseable=False):
    """A verdict; ``chain`` names the target of a jump or goto."""

    kind: VerdictKind | int = VerdictKind.DROP
    chain: str = ""

    def marshal_data(self, fam: int) -> bytes:
        code = [Attribute(NFTA_VERDICT_CODE, be_u32(self.kind))]
        if self.chain:
            code.append(Attribute(NFTA_VERDICT_CHAIN, self.chain.encode() + b"\x00"))
        imm_data = marshal_attributes([
            Attribute(NLA_F_NESTED | NFTA_DATA_VERDICT, marshal_attributes(code)),
        ])
        return marshal_attributes([
            Attribute(NFTA_IMMEDIATE_DREG, be_u32(NFT_REG_VERDICT)),
            Attribute(NLA_F_NESTED | NFTA_IMMEDIATE_DATA, imm_data),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Verdict":
        verdict = cls()
        for attr in parse_attributes(data):
            if attr.kind != NFTA_IMMEDIATE_DATA:
                continue
            for nested in parse_attributes(attr.data):
                if nested.kind != NFTA_DATA_VERDICT:
                    continue
                for inner in parse_attributes(nested.data):
                    if inner.kind == NFTA_VERDICT_CODE:
                        verdict.kind = _as_enum(VerdictKind, _signed32(read_u32(inner.data)))
                    elif inner.kind == NFTA_VERDICT_CHAIN:
                        verdict.chain = inner.data.strip(b"\x00").decode(
                            "utf-8", errors="surrogateescape"
                        )
        return verdict