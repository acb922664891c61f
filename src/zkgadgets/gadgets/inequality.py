import logging

from ..circuit import Circuit, inverse
from ..types import Fld, Gal, Bit


logger = logging.getLogger(__name__)


def assert_nonzero(cs: Circuit, xGal: Gal, *, msg="value is zero") -> Gal:
    # Prove x ≠ 0 by exhibiting its inverse, x * i = 1 is only satisfiable when x has a multiplicative
    # inverse in GF(P). The inverse is returned so that callers can reuse it.
    p = cs.modulus
    if isinstance(xGal, Fld):
        return inverse(xGal, p, msg)
    iGal = cs.MKWIRE(lambda getw, args: inverse(getw(xGal), p, msg))
    cs.MKGATE(xGal, iGal, 0x01, msg=msg)
    logger.debug("inequality gadget: 1 gate")
    return iGal


def assert_not_equal(cs: Circuit, xGal: Gal, cGal: Gal, *, msg="values are equal") -> Gal:
    # Prove x ≠ c, c is either a public constant or another variable.
    return assert_nonzero(cs, cs.SUB(xGal, cGal), msg=msg)


def is_nonzero(cs: Circuit, xGal: Gal, *, msg="booleanization error") -> tuple[Bit, Gal]:
    # Convert x to a boolean value, return 1 if x is non-zero and 0 if x is zero, together with the
    # inverse of x. The inverse is only bound when x is non-zero, callers that need it to be 0 for a
    # zero x must add i * (1 - r) = 0 themselves.
    p = cs.modulus
    if isinstance(xGal, Fld):
        xGal %= p
        return (0x01, pow(xGal, -1, p)) if xGal else (0x00, 0x00)
    iGal = cs.MKWIRE(lambda getw, args: pow(getw(xGal), p - 2, p))
    rBit = cs.MKWIRE(lambda getw, args: pow(getw(xGal), p - 1, p))
    cs.MKGATE(rBit, xGal, xGal, msg=msg)  # asserts that r has to be 1 if x is non-zero
    cs.MKGATE(xGal, iGal, rBit, msg=msg)  # asserts that r has to be 0 if x is zero
    return rBit, iGal

