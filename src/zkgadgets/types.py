import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .errors import MalformedInputError


logger = logging.getLogger(__name__)


Fld = int


@dataclass
class Var:
    # Every variable in a circuit is a linear combination of the entries in its witness vector, so it
    # is represented by a dictionary mapping the indices of the entries in the witness vector to their
    # coefficients, for example, x = w₀ + 5w₂ + 7w₃ is represented as {0: 1, 2: 5, 3: 7}. Entries with
    # coefficient 0 are always omitted, and entry 0 is the constant wire, so its coefficient is the
    # constant term of the linear combination.
    # Pure constants are never wrapped, they are always represented by the integer itself.

    data: dict[int, Fld] = field(default_factory=lambda: {})


Gal = Var | Fld
Bit = Gal


Gate = tuple[Gal, Gal, Gal, str]
Getw = Callable[[Gal], Fld]
Args = dict[str, Fld]
S_Fn = Callable[[Getw, Args], Fld]
M_Fn = Callable[[Getw, Args], Iterable[Fld]]
Func = tuple[None, S_Fn] | tuple[int, M_Fn]


class Witness:
    # The witness vector of a circuit, generated by running the witness functions of the circuit in the
    # order in which their entries were allocated. Each function only reads entries allocated before it,
    # through getw, which evaluates a linear combination against the entries generated so far.

    def __init__(self, funcs: list[Func], args: Args, modulus: int) -> None:
        self.modulus = modulus
        self.vec: list[Fld] = []
        for n, func in funcs:
            res = func(self.apply, args)
            if n is None:
                self.vec.append(res % modulus)
            else:
                res = list(res)
                if len(res) != n:
                    raise MalformedInputError("witness function produced {} entries, expected {}".format(len(res), n))
                self.vec.extend(r % modulus for r in res)
        logger.debug("generated witness with %d entries", len(self.vec))

    def apply(self, xGal: Gal) -> Fld:
        return xGal % self.modulus if isinstance(xGal, Fld) else sum(self.vec[m] * a for m, a in xGal.data.items()) % self.modulus  # <w, t> = Σₘ₌₀ᴹ⁻¹ wₘtₘ
