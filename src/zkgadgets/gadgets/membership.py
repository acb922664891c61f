import enum
import logging
from typing import Iterable

from ..circuit import Circuit
from ..errors import ParameterError, StatementError
from ..types import Fld, Gal, Bit
from .inequality import assert_nonzero


logger = logging.getLogger(__name__)


class MembershipStyle(enum.Enum):
    # Both styles prove the same statement, x equals one of the elements of the set.
    POLYNOMIAL = "polynomial"  # Π (x - sᵢ) = 0, k - 1 gates, yields nothing but membership
    INDICATOR = "indicator"  # one boolean per element, also yields the position of the match


def product_of_differences(cs: Circuit, xGal: Gal, sLst: list[Gal], *, msg="product error") -> Gal:
    # Fold Π (x - sᵢ) with k - 1 multipliers, each partial product is a new entry bound by its gate.
    pGal = cs.SUB(xGal, sLst[0])
    for sGal in sLst[1:]:
        pGal = cs.MUL(pGal, cs.SUB(xGal, sGal), msg=msg)
    return pGal


def membership_by_product(cs: Circuit, xGal: Gal, sItr: Iterable[Gal], *, msg="set membership failed") -> None:
    # Π (x - sᵢ) = 0, the product of the first k - 1 factors is folded with k - 2 multipliers and the
    # last multiplier is bound to 0 directly, so the whole statement costs k - 1 gates (one for k = 1).
    p = cs.modulus
    sLst = list(sItr)
    if not sLst:
        raise ParameterError("set membership", "set", "must not be empty")
    if isinstance(xGal, Fld) and all(isinstance(sGal, Fld) for sGal in sLst):
        if xGal % p not in [sGal % p for sGal in sLst]:
            raise StatementError(msg)
        return

    def member(getw, args):
        # a check without entries, it fails the witness generation as soon as no factor is zero
        xFld = getw(xGal)
        if all(xFld != getw(sGal) for sGal in sLst):
            raise StatementError(msg)
        return []

    gates = len(cs.gates)
    cs.MKWIRES(member, 0)
    if len(sLst) == 1:
        cs.ASSERT_EQ(xGal, sLst[0], msg=msg)
    else:
        pGal = product_of_differences(cs, xGal, sLst[:-1], msg=msg)
        cs.MKGATE(pGal, cs.SUB(xGal, sLst[-1]), 0x00, msg=msg)
    logger.debug("set membership gadget (polynomial): %d elements, %d gates", len(sLst), len(cs.gates) - gates)


def membership_by_indicator(cs: Circuit, xGal: Gal, sItr: Iterable[Gal], *, msg="set membership failed") -> list[Bit]:
    # Convert x to an indicator vector over the set, for example, for the set [1, 3, 5] and x = 3 the
    # indicators are [0, 1, 0], and x = 2 fails because 2 is not in the set. When the set contains
    # duplicates only the first match is flagged, so exactly one indicator is always 1.
    p = cs.modulus
    sLst = list(sItr)
    if not sLst:
        raise ParameterError("set membership", "set", "must not be empty")
    if isinstance(xGal, Fld) and all(isinstance(sGal, Fld) for sGal in sLst):
        sFlds = [sGal % p for sGal in sLst]
        if xGal % p not in sFlds:
            raise StatementError(msg)
        jLen = sFlds.index(xGal % p)
        return [0x01 if iLen == jLen else 0x00 for iLen in range(len(sLst))]

    def indicators(getw, args):
        xFld = getw(xGal)
        sFlds = [getw(sGal) for sGal in sLst]
        if xFld not in sFlds:
            raise StatementError(msg)
        jLen = sFlds.index(xFld)
        return [0x01 if iLen == jLen else 0x00 for iLen in range(len(sLst))]

    gates = len(cs.gates)
    iBin = cs.MKWIRES(indicators, len(sLst))
    for iBit in iBin:
        cs.ASSERT_IS_BOOL(iBit, msg=msg)
    tGal = cs.SUM(cs.MUL(iBit, sGal, msg=msg) for iBit, sGal in zip(iBin, sLst))
    eGal = cs.SUM(iBin)
    cs.ASSERT_EQZ(cs.SUB(xGal, tGal), msg=msg)
    cs.ASSERT_EQZ(cs.SUB(0x01, eGal), msg=msg)
    logger.debug("set membership gadget (indicator): %d elements, %d gates", len(sLst), len(cs.gates) - gates)
    return iBin


def position(cs: Circuit, iBin: list[Bit]) -> Gal:
    # The index of the matching element, as a linear combination of the indicators.
    return cs.SUM(cs.MUL(iBit, iLen) for iLen, iBit in enumerate(iBin))


def set_membership(cs: Circuit, xGal: Gal, sItr: Iterable[Gal], style: MembershipStyle = MembershipStyle.POLYNOMIAL, *, msg="set membership failed") -> list[Bit] | None:
    if style is MembershipStyle.POLYNOMIAL:
        return membership_by_product(cs, xGal, sItr, msg=msg)
    if style is MembershipStyle.INDICATOR:
        return membership_by_indicator(cs, xGal, sItr, msg=msg)
    raise ParameterError("set membership", "style", "is not supported: {!r}".format(style))


def set_non_membership(cs: Circuit, xGal: Gal, sItr: Iterable[Gal], *, msg="set non-membership failed") -> Gal:
    # Π (x - sᵢ) = w together with w ≠ 0, a product is non-zero only when none of its factors is zero.
    sLst = list(sItr)
    if not sLst:
        raise ParameterError("set non-membership", "set", "must not be empty")
    gates = len(cs.gates)
    wGal = product_of_differences(cs, xGal, sLst, msg=msg)
    assert_nonzero(cs, wGal, msg=msg)
    logger.debug("set non-membership gadget: %d elements, %d gates", len(sLst), len(cs.gates) - gates)
    return wGal
