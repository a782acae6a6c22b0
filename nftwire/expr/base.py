"""The expression base class and the registry of parseable expressions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from nftwire.netlink import NLA_F_NESTED, Attribute, marshal_attributes

NFTA_EXPR_NAME = 1
NFTA_EXPR_DATA = 2
NFTA_LIST_ELEM = 1
NFTA_DATA_VALUE = 1
NFTA_DATA_VERDICT = 2
NFT_REG_VERDICT = 0

_REGISTRY: dict[str, type["Expr"]] = {}


class ExprError(ValueError):
    """Raised when an expression cannot be encoded or decoded."""


class Expr(ABC):
    """An nftables rule expression.

    Subclasses pass ``name=`` to set their netlink name; those that the
    kernel reports back under that name are registered for parsing unless
    ``parseable=False`` is given.
    """

    NAME: ClassVar[str] = ""

    def __init_subclass__(cls, *, name: str | None = None, parseable: bool = True, **kwargs):
        super().__init_subclass__(**kwargs)
        if name is not None:
            cls.NAME = name
            if parseable:
                _REGISTRY[name] = cls

    def marshal(self, fam: int) -> bytes:
        """Encode the expression with its name and nested data."""
        return marshal_attributes([
            Attribute(NFTA_EXPR_NAME, self.NAME.encode() + b"\x00"),
            Attribute(NLA_F_NESTED | NFTA_EXPR_DATA, self.marshal_data(fam)),
        ])

    @abstractmethod
    def marshal_data(self, fam: int) -> bytes:
        """Encode the expression's own attributes."""

    @classmethod
    @abstractmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Expr":
        """Build an expression from its encoded attributes."""


def marshal(fam: int, expr: Expr) -> bytes:
    return expr.marshal(fam)


def marshal_expr_data(fam: int, expr: Expr) -> bytes:
    return expr.marshal_data(fam)


def expr_class_for_name(name: str) -> type[Expr] | None:
    """The registered expression class for a netlink name, or None."""
    return _REGISTRY.get(name)