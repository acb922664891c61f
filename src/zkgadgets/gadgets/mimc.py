import logging
from dataclasses import dataclass

from ..circuit import Circuit
from ..errors import ParameterError
from ..types import Fld, Gal


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MiMCParams:
    # The key and the round constants are published constants, the number of rounds is the number of
    # round constants. They are supplied by the caller, nothing here generates them.
    key: Fld
    constants: tuple[Fld, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "constants", tuple(self.constants))
        if not self.constants:
            raise ParameterError("mimc", "round constants", "must not be empty")
        if not all(isinstance(cFld, int) for cFld in (self.key, *self.constants)):
            raise ParameterError("mimc", "round constants", "must be field elements")

    @property
    def rounds(self) -> int:
        return len(self.constants)


# out-of-circuit reference implementations


def mimc(xFld: Fld, params: MiMCParams, modulus: int) -> Fld:
    # xᵢ₊₁ = (xᵢ + k + cᵢ)³, the digest is x_R + k
    for cFld in params.constants:
        xFld = pow(xFld + params.key + cFld, 3, modulus)
    return (xFld + params.key) % modulus


def mimc_compress(lFld: Fld, rFld: Fld, params: MiMCParams, modulus: int) -> Fld:
    # 2:1 compression, a two-branch Feistel network over the same round function,
    # (l, r) ← (r + (l + k + cᵢ)³, l), the digest is l_R + k
    for cFld in params.constants:
        lFld, rFld = (rFld + pow(lFld + params.key + cFld, 3, modulus)) % modulus, lFld
    return (lFld + params.key) % modulus


class MiMCGadget:
    # Every round costs exactly two gates, t = x * x and x' = t * x, where x already includes the key
    # and the round constant since adding constants to a linear combination is free.

    def __init__(self, params: MiMCParams) -> None:
        self.params = params

    def permute(self, cs: Circuit, xGal: Gal) -> Gal:
        gates = len(cs.gates)
        for cFld in self.params.constants:
            xGal = cs.CUBE(cs.ADD(xGal, self.params.key + cFld), msg="mimc round error")
        logger.debug("mimc gadget: %d rounds, %d gates", self.params.rounds, len(cs.gates) - gates)
        return cs.ADD(xGal, self.params.key)

    def hash(self, cs: Circuit, xGal: Gal, dGal: Gal, *, msg="mimc digest mismatch") -> Gal:
        # Prove knowledge of a preimage x whose digest is d, d is a public constant or a public entry.
        hGal = self.permute(cs, xGal)
        cs.ASSERT_EQ(hGal, dGal, msg=msg)
        return hGal

    def compress(self, cs: Circuit, lGal: Gal, rGal: Gal) -> Gal:
        for cFld in self.params.constants:
            lGal, rGal = cs.ADD(rGal, cs.CUBE(cs.ADD(lGal, self.params.key + cFld), msg="mimc round error")), lGal
        return cs.ADD(lGal, self.params.key)
