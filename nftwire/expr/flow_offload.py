"""The flow_offload expression: offloads a flow into a flowtable."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, marshal_attributes, parse_attributes, read_string

NFTNL_EXPR_FLOW_TABLE_NAME = 1


@dataclass
class FlowOffload(Expr, name="flow_offload"):
    """Adds matching flows to the named flowtable."""

    name: str = ""

    def marshal_data(self, fam: int) -> bytes:
        return marshal_attributes([
            Attribute(NFTNL_EXPR_FLOW_TABLE_NAME, self.name.encode()),
        ])

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "FlowOffload":
        expr = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTNL_EXPR_FLOW_TABLE_NAME:
                expr.name = read_string(attr.data)
        return expr