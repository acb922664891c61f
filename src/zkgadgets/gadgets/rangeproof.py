import logging

from ..circuit import Circuit
from ..errors import ParameterError, StatementError
from ..types import Fld, Gal, Bit


logger = logging.getLogger(__name__)


Bin = list[Bit]


def range_proof(cs: Circuit, xGal: Gal, xLen: int, *, msg="range proof failed") -> Bin:
    # Prove 0 <= x < 2ⁿ by converting x to a binary list with the given bit length, for example,
    # range_proof(cs, 5, 3) will return [1, 0, 1] and range_proof(cs, 5, 2) will raise an error because
    # 5 is too large for 2 bits. The bit length must be less than the bit length of the prime P, since
    # otherwise 2ⁿ wraps around P and the binary representation of x will be non-unique.
    if not 0 <= xLen < cs.modulus.bit_length():
        raise ParameterError("range", "bit width", "must be in [0, {}), got {}".format(cs.modulus.bit_length(), xLen))
    if isinstance(xGal, Fld):
        xGal %= cs.modulus
        if xGal >> xLen:
            raise StatementError("{}: {} does not fit in {} bits".format(msg, xGal, xLen))
        return [xGal >> iLen & 0x01 for iLen in range(xLen)]

    def bits(getw, args):
        xFld = getw(xGal)
        if xFld >> xLen:
            raise StatementError("{}: value does not fit in {} bits".format(msg, xLen))
        return [xFld >> iLen & 0x01 for iLen in range(xLen)]

    gates = len(cs.gates)
    xBin = cs.MKWIRES(bits, xLen)
    for xBit in xBin:
        cs.ASSERT_IS_BOOL(xBit, msg=msg)
    tGal = cs.SUM(cs.MUL(xBit, 0x02**iLen) for iLen, xBit in enumerate(xBin))
    cs.ASSERT_EQZ(cs.SUB(xGal, tGal), msg=msg)
    logger.debug("range gadget: %d bits, %d gates", xLen, len(cs.gates) - gates)
    return xBin


def galois(cs: Circuit, xBin: Bin) -> Gal:
    # Convert a binary list back to a field element, for example, galois(cs, [1, 0, 1]) returns 5.
    return cs.SUM(cs.MUL(bBit, 0x02**iLen) for iLen, bBit in enumerate(xBin))


def range_between(cs: Circuit, xGal: Gal, lGal: Gal, hGal: Gal, xLen: int, *, msg="bounded range proof failed") -> tuple[Bin, Bin]:
    # Prove l <= x < h with two range proofs, 0 <= x - l < 2ⁿ and 0 <= h - 1 - x < 2ⁿ. Together they pin
    # x into [l, h) as long as h - l <= 2ⁿ and 2ⁿ⁺¹ does not wrap around P.
    if not 0 <= xLen + 1 < cs.modulus.bit_length():
        raise ParameterError("range", "bit width", "must be in [0, {}), got {}".format(cs.modulus.bit_length() - 1, xLen))
    if isinstance(lGal, Fld) and isinstance(hGal, Fld) and not 0 <= hGal - lGal <= 0x02**xLen:
        raise ParameterError("range", "bounds", "[{}, {}) do not fit in {} bits".format(lGal, hGal, xLen))
    lBin = range_proof(cs, cs.SUB(xGal, lGal), xLen, msg=msg)
    hBin = range_proof(cs, cs.SUB(cs.SUB(hGal, xGal), 0x01), xLen, msg=msg)
    return lBin, hBin
