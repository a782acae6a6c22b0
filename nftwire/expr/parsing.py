"""Decoding of expressions from their netlink attribute form."""

from __future__ import annotations

from nftwire.expr import (  # noqa: F401  (imported so every expression is registered)
    bitwise,
    byteorder,
    connlimit,
    counter,
    ct,
    dup,
    dynset,
    exthdr,
    fib,
    flow_offload,
    hash,
    limit,
    log,
    lookup,
    meta,
    nat,
    numgen,
    objref,
    payload,
    queue,
    quota,
    range,
    redirect,
    reject,
    rt,
    secmark,
    socket,
    synproxy,
    tproxy,
)
from nftwire.expr.base import (
    NFT_REG_VERDICT,
    NFTA_EXPR_NAME,
    Expr,
    ExprError,
    expr_class_for_name,
)
from nftwire.expr.immediate import Immediate
from nftwire.expr.notrack import Notrack
from nftwire.expr.verdict import Verdict
from nftwire.netlink import parse_attributes, read_string

NFTA_EXPR_DATA = 2


def exprs_from_bytes(fam: int, data: bytes) -> list[Expr]:
    """Decode one expression given the attributes holding its name and data.

    Expressions of unknown type are skipped. An immediate writing nothing into
    the verdict register is decoded as a verdict.
    """
    exprs: list[Expr] = []
    name = ""
    for attr in parse_attributes(data):
        if attr.kind == NFTA_EXPR_NAME:
            name = read_string(attr.data)
            if name == "notrack":
                exprs.append(Notrack())
        elif attr.kind == NFTA_EXPR_DATA:
            cls = expr_class_for_name(name)
            if cls is None:
                continue
            expr = cls.unmarshal(fam, attr.data)
            if (
                isinstance(expr, Immediate)
                and expr.register == NFT_REG_VERDICT
                and not expr.data
            ):
                expr = Verdict.unmarshal(fam, attr.data)
            exprs.append(expr)
    return exprs


def exprs_from_name(fam: int, data: bytes, name: str) -> list[Expr]:
    """Decode expression data whose expression name is already known."""
    cls = expr_class_for_name(name)
    if cls is None:
        raise ExprError(f"expr: unknown expression {name!r}")
    return [cls.unmarshal(fam, data)]


def parse_expr_msg(fam: int, data: bytes) -> list[Expr]:
    """Decode a list of expressions, each held in its own list element."""
    exprs: list[Expr] = []
    for elem in parse_attributes(data):
        exprs.extend(exprs_from_bytes(fam, elem.data))
    return exprs