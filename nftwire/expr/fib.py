"""The fib expression: looks up packet routing information."""

from __future__ import annotations

from dataclasses import dataclass

from nftwire.expr.base import Expr
from nftwire.netlink import Attribute, be_u32, marshal_attributes, parse_attributes, read_u32

NFTA_FIB_DREG = 1
NFTA_FIB_RESULT = 2
NFTA_FIB_FLAGS = 3

NFTA_FIB_F_SADDR = 0x01
NFTA_FIB_F_DADDR = 0x02
NFTA_FIB_F_MARK = 0x04
NFTA_FIB_F_IIF = 0x08
NFTA_FIB_F_OIF = 0x10
NFTA_FIB_F_PRESENT = 0x20

NFT_FIB_RESULT_OIF = 1
NFT_FIB_RESULT_OIFNAME = 2
NFT_FIB_RESULT_ADDRTYPE = 3


@dataclass
class Fib(Expr, name="fib"):
    """Queries the forwarding information base and stores the result in a register."""

    register: int = 0
    result_oif: bool = False
    result_oifname: bool = False
    result_addrtype: bool = False
    flag_saddr: bool = False
    flag_daddr: bool = False
    flag_mark: bool = False
    flag_iif: bool = False
    flag_oif: bool = False
    flag_present: bool = False

    def _flags(self) -> int:
        flags = 0
        for enabled, bit in (
            (self.flag_saddr, NFTA_FIB_F_SADDR),
            (self.flag_daddr, NFTA_FIB_F_DADDR),
            (self.flag_mark, NFTA_FIB_F_MARK),
            (self.flag_iif, NFTA_FIB_F_IIF),
            (self.flag_oif, NFTA_FIB_F_OIF),
            (self.flag_present, NFTA_FIB_F_PRESENT),
        ):
            if enabled:
                flags |= bit
        return flags

    def _results(self) -> int:
        results = 0
        if self.result_oif:
            results |= NFT_FIB_RESULT_OIF
        if self.result_oifname:
            results |= NFT_FIB_RESULT_OIFNAME
        if self.result_addrtype:
            results |= NFT_FIB_RESULT_ADDRTYPE
        return results

    def marshal_data(self, fam: int) -> bytes:
        attrs = [Attribute(NFTA_FIB_DREG, be_u32(self.register))]
        flags = self._flags()
        if flags:
            attrs.append(Attribute(NFTA_FIB_FLAGS, be_u32(flags)))
        results = self._results()
        if results:
            attrs.append(Attribute(NFTA_FIB_RESULT, be_u32(results)))
        return marshal_attributes(attrs)

    @classmethod
    def unmarshal(cls, fam: int, data: bytes) -> "Fib":
        fib = cls()
        for attr in parse_attributes(data):
            if attr.kind == NFTA_FIB_DREG:
                fib.register = read_u32(attr.data)
            elif attr.kind == NFTA_FIB_RESULT:
                result = read_u32(attr.data)
                if result == NFT_FIB_RESULT_OIF:
                    fib.result_oif = True
                elif result == NFT_FIB_RESULT_OIFNAME:
                    fib.result_oifname = True
                elif result == NFT_FIB_RESULT_ADDRTYPE:
                    fib.result_addrtype = True
            elif attr.kind == NFTA_FIB_FLAGS:
                flags = read_u32(attr.data)
                fib.flag_saddr = bool(flags & NFTA_FIB_F_SADDR)
                fib.flag_daddr = bool(flags & NFTA_FIB_F_DADDR)
                fib.flag_mark = bool(flags & NFTA_FIB_F_MARK)
                fib.flag_iif = bool(flags & NFTA_FIB_F_IIF)
                fib.flag_oif = bool(flags & NFTA_FIB_F_OIF)
                fib.flag_present = bool(flags & NFTA_FIB_F_PRESENT)
        return fib