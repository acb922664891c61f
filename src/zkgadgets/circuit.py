import logging
from typing import Iterable

from pymcl import r as ρ

from .errors import MalformedInputError, ParameterError, StatementError, UnsatisfiedError
from .types import Fld, Var, Gal, Bit, Gate, Args, S_Fn, M_Fn, Func, Witness


logger = logging.getLogger(__name__)


def inverse(xFld: Fld, modulus: int, msg: str = "division by zero") -> Fld:
    # Multiplicative inverse in GF(P), zero has none, which means the statement that needed it is false.
    if xFld % modulus == 0x00:
        raise StatementError(msg)
    return pow(xFld, -1, modulus)


def argument(args: Args, name: str, modulus: int) -> Fld:
    # Read a named input of the witness generation.
    try:
        value = args[name]
    except KeyError:
        raise MalformedInputError("missing argument: {}".format(name)) from None
    if not isinstance(value, int):
        raise MalformedInputError("argument {} is not a field element: {!r}".format(name, value))
    return value % modulus


class Circuit:
    # The Circuit class is the constraint system accumulator shared by all the gadgets, it provides a set
    # of methods to create entries in the witness vector, add constraints to the circuit, and perform
    # arithmetic operations on the variables linearly combined by the entries in the witness vector.
    # The topology of the circuit (the gates) and the way to fill the witness vector (the funcs) are kept
    # apart, so the same circuit is synthesized once by the prover, who generates a witness for it, and
    # once by the verifier, who only needs the gates and the public entries.

    modulus: int  # the prime P of the field GF(P) all arithmetic is carried out in
    wire_count: int  # dimension of the witness vector
    funcs: list[Func]  # functions to generate the witness vector entries
    stmts: dict[int, str]  # the public entries, keys are their indices in the witness vector, and values are their names
    cmts: dict[int, str]  # the committed entries, bound to commitments supplied by the caller of the proving engine
    gates: list[Gate]  # the constraints in the circuit, see the MKGATE method for details

    def __init__(self, modulus: int = ρ) -> None:
        # Fermat test to base 2, rejects even and most composite moduli, base 2 pseudoprimes still pass
        if modulus < 0x03 or pow(0x02, modulus - 0x01, modulus) != 0x01:
            raise ParameterError("circuit", "modulus", "must be an odd prime, got {}".format(modulus))
        self.modulus = modulus
        self.wire_count = 0
        self.funcs = []
        self.stmts = {}
        self.cmts = {}
        self.gates = []
        # add a constant 1 to the witness vector, it is public so that the verifier pins it to 1
        [self.one] = self.MKWIRE(lambda getw, args: 0x01, "ONE").data

    def MKWIRE(self, func: S_Fn, name: str | None = None) -> Var:
        # Add a new entry defined by the given function to the witness vector.
        # For example, x = MKWIRE(lambda getw, args: getw(y) * getw(z) % P) will add a new entry that is
        # defined by the product of the values of y and z to the witness vector, and assign a variable
        # corresponding to the entry to x. The function only computes a hint, nothing binds the entry to
        # it until a gate does.
        i = self.wire_count
        self.funcs.append((None, func))
        self.wire_count += 1
        # if name is specified, the entry will be treated as public
        if name is not None:
            self.stmts[i] = name
        return Var({i: 0x01})

    def MKWIRES(self, func: M_Fn, n: int) -> list[Var]:
        # Add n new entries defined by the given function to the witness vector, and return them as a
        # list of variables.
        i = self.wire_count
        self.funcs.append((n, func))
        self.wire_count += n
        return [Var({i + j: 0x01}) for j in range(n)]

    def MKGATE(self, xGal: Gal, yGal: Gal, zGal: Gal, *, msg="assertion error") -> None:
        # Add a constraint to the circuit, the constraint is represented as (x, y, z, msg), which means
        # x * y = z, msg is the error message when the constraint is not satisfied.
        if isinstance(xGal, Fld) or isinstance(yGal, Fld):
            zGal = self.SUB(zGal, self.MUL(xGal, yGal))
            if isinstance(zGal, Fld):
                if zGal != 0x00:
                    raise StatementError(msg)
                return
            xGal = 0x00
            yGal = 0x00
        self.gates.append((xGal, yGal, zGal, msg))

    def MKMUL(self, lFunc: S_Fn, rFunc: S_Fn, *, msg="multiplier error") -> tuple[Var, Var, Var]:
        # Allocate a multiplication gate, the two multiplicands are new entries defined by the given
        # functions, and the output is bound to their product.
        lVar = self.MKWIRE(lFunc)
        rVar = self.MKWIRE(rFunc)
        oVar = self.MUL(lVar, rVar, msg=msg)
        return lVar, rVar, oVar

    def PARAM(self, name: str, public: bool = False) -> Var:
        # Add a new entry to the witness vector, whose value will be determined by the value correspond-
        # ing to the key named name in the args dictionary at runtime.
        p = self.modulus
        return self.MKWIRE(lambda getw, args: argument(args, name, p), name if public else None)

    def COMMIT(self, name: str) -> Var:
        # Add a new entry whose value is bound to an external commitment, the value is read from the args
        # dictionary like PARAM when proving, and the verifier only sees the commitment.
        p = self.modulus
        i = self.wire_count
        cVar = self.MKWIRE(lambda getw, args: argument(args, name, p))
        self.cmts[i] = name
        return cVar

    def REVEAL(self, name: str, xGal: Gal, *, msg="reveal error") -> Var:
        # Add a public entry to the witness vetor, whose value is equal to that of the given variable.
        rGal = self.MKWIRE(lambda getw, args: getw(xGal), name)
        self.ASSERT_EQZ(self.SUB(xGal, rGal), msg=msg)
        return rGal

    # basic arithmetic operations on variables

    def ADD(self, xGal: Gal, yGal: Gal) -> Gal:
        if isinstance(xGal, Fld):
            xGal = Var({self.one: xGal})
        if isinstance(yGal, Fld):
            yGal = Var({self.one: yGal})
        rGal = Var({k: v for k in xGal.data.keys() | yGal.data.keys() if (v := (xGal.data.get(k, 0x00) + yGal.data.get(k, 0x00)) % self.modulus)})
        return rGal.data.get(self.one, 0x00) if rGal.data.keys() <= {self.one} else rGal

    def SUB(self, xGal: Gal, yGal: Gal) -> Gal:
        if isinstance(xGal, Fld):
            xGal = Var({self.one: xGal})
        if isinstance(yGal, Fld):
            yGal = Var({self.one: yGal})
        rGal = Var({k: v for k in xGal.data.keys() | yGal.data.keys() if (v := (xGal.data.get(k, 0x00) - yGal.data.get(k, 0x00)) % self.modulus)})
        return rGal.data.get(self.one, 0x00) if rGal.data.keys() <= {self.one} else rGal

    def NEG(self, xGal: Gal) -> Gal:
        return self.SUB(0x00, xGal)

    def SUM(self, iLst: Iterable[Gal], rGal: Gal = 0x00) -> Gal:
        rGal = Var({self.one: rGal}) if isinstance(rGal, Fld) else Var(rGal.data.copy())
        for iGal in iLst:
            if isinstance(iGal, Fld):
                rGal.data[self.one] = rGal.data.get(self.one, 0x00) + iGal
            else:
                for k, v in iGal.data.items():
                    rGal.data[k] = rGal.data.get(k, 0x00) + v
        rGal = Var({k: t for k, v in rGal.data.items() if (t := v % self.modulus)})
        return rGal.data.get(self.one, 0x00) if rGal.data.keys() <= {self.one} else rGal

    def MUL(self, xGal: Gal, yGal: Gal, *, msg="multiplication error") -> Gal:
        # The single-output multiplier, only the output wire is allocated since both multiplicands are
        # already linear combinations of existing entries.
        p = self.modulus
        if isinstance(xGal, Fld):
            xGal %= p
        if isinstance(yGal, Fld):
            yGal %= p
        if isinstance(xGal, Fld) and isinstance(yGal, Fld):
            return xGal * yGal % p
        if xGal == 0x00 or yGal == 0x00:
            return 0x00
        if isinstance(yGal, Fld) and isinstance(xGal, Var):
            return Var({k: v * yGal % p for k, v in xGal.data.items()})
        if isinstance(xGal, Fld) and isinstance(yGal, Var):
            return Var({k: v * xGal % p for k, v in yGal.data.items()})
        zGal = self.MKWIRE(lambda getw, args: getw(xGal) * getw(yGal) % p)
        self.MKGATE(xGal, yGal, zGal, msg=msg)
        return zGal

    def CUBE(self, xGal: Gal, *, msg="cube error") -> Gal:
        # x³ with two chained multipliers, t = x * x and r = t * x.
        tGal = self.MUL(xGal, xGal, msg=msg)
        return self.MUL(tGal, xGal, msg=msg)

    def IF(self, bBit: Bit, tGal: Gal, fGal: Gal) -> Gal:
        # Conditional expression without branching, b must already be constrained to be a boolean value.
        # optimize when b is a constant
        if bBit == 0x01:
            return tGal
        if bBit == 0x00:
            return fGal
        return self.ADD(self.MUL(bBit, self.SUB(tGal, fGal)), fGal)

    # assertion operations on galios field elements

    def ASSERT_EQZ(self, xGal: Gal, *, msg="EQZ assertion failed") -> None:
        self.MKGATE(0x00, 0x00, xGal, msg=msg)

    def ASSERT_EQ(self, xGal: Gal, yGal: Gal, *, msg="EQ assertion failed") -> None:
        self.ASSERT_EQZ(self.SUB(xGal, yGal), msg=msg)

    def ASSERT_IS_BOOL(self, xGal: Gal, *, msg="IS_BOOL assertion failed") -> None:
        # Assert x is a boolean value, x * x = x is the same as x * (1 - x) = 0.
        self.MKGATE(xGal, xGal, xGal, msg=msg)

    # interface to the proving engine

    def witness(self, args: Args) -> Witness:
        witness = Witness(self.funcs, args, self.modulus)
        logger.debug("witness generated for circuit with %d wires and %d gates", self.wire_count, len(self.gates))
        return witness

    def check(self, witness: Witness) -> None:
        # Evaluate every gate against the witness vector, this is what the proving engine will find out
        # anyway, but here it points at the first gate that fails.
        p = self.modulus
        if witness.vec[self.one] != 0x01:
            raise StatementError("constant entry ONE is {}, not 1".format(witness.vec[self.one]))
        for i, (xGal, yGal, zGal, msg) in enumerate(self.gates):
            if witness.apply(xGal) * witness.apply(yGal) % p != witness.apply(zGal):
                raise UnsatisfiedError(i, msg)

    def public_inputs(self, witness: Witness) -> list[tuple[str, Fld]]:
        return [(name, witness.vec[i]) for i, name in self.stmts.items()]

    def commitments(self, witness: Witness) -> list[tuple[str, Fld]]:
        return [(name, witness.vec[i]) for i, name in self.cmts.items()]

    def stats(self) -> dict[str, int]:
        return {
            "wires": self.wire_count,
            "gates": len(self.gates),
            "public": len(self.stmts),
            "committed": len(self.cmts),
        }
