import enum
import logging
from dataclasses import dataclass
from typing import Sequence

from ..circuit import Circuit
from ..errors import ParameterError
from ..types import Fld, Gal
from .inequality import is_nonzero


logger = logging.getLogger(__name__)


HASH_OUTPUT = 1  # the state slot taken as the digest of the 2:1 hash


@dataclass(frozen=True)
class PoseidonParams:
    # The round keys and the MDS matrix are published constants supplied by the caller. Every round,
    # full or partial, consumes width round keys.
    width: int
    full_rounds_beginning: int
    full_rounds_end: int
    partial_rounds: int
    round_keys: tuple[Fld, ...]
    mds: tuple[tuple[Fld, ...], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "round_keys", tuple(self.round_keys))
        object.__setattr__(self, "mds", tuple(tuple(row) for row in self.mds))
        if self.width < 2:
            raise ParameterError("poseidon", "width", "must be at least 2, got {}".format(self.width))
        if min(self.full_rounds_beginning, self.full_rounds_end, self.partial_rounds) < 0:
            raise ParameterError("poseidon", "round counts", "must not be negative")
        if len(self.round_keys) < self.total_rounds * self.width:
            raise ParameterError("poseidon", "round keys", "not enough, need {}, found {}".format(self.total_rounds * self.width, len(self.round_keys)))
        if len(self.mds) != self.width or any(len(row) != self.width for row in self.mds):
            raise ParameterError("poseidon", "MDS matrix", "must be {0}x{0}".format(self.width))

    @property
    def total_rounds(self) -> int:
        return self.full_rounds_beginning + self.partial_rounds + self.full_rounds_end

    def is_full_round(self, k: int) -> bool:
        return k < self.full_rounds_beginning or k >= self.full_rounds_beginning + self.partial_rounds

    @classmethod
    def from_hex(cls, width: int, full_rounds_beginning: int, full_rounds_end: int, partial_rounds: int, round_keys: Sequence[str], mds: Sequence[Sequence[str]]) -> "PoseidonParams":
        # Load constants published as hex strings, with or without the 0x prefix.
        try:
            keys = tuple(int(h, 16) for h in round_keys)
            matrix = tuple(tuple(int(h, 16) for h in row) for row in mds)
        except ValueError as e:
            raise ParameterError("poseidon", "constants", "are not valid hex: {}".format(e)) from e
        return cls(
            width=width,
            full_rounds_beginning=full_rounds_beginning,
            full_rounds_end=full_rounds_end,
            partial_rounds=partial_rounds,
            round_keys=keys,
            mds=matrix,
        )


def cube_sbox(cs: Circuit, xGal: Gal) -> Gal:
    # x³, two gates
    return cs.CUBE(xGal, msg="poseidon cube sbox error")


def inverse_sbox(cs: Circuit, xGal: Gal) -> Gal:
    # x⁻¹ with 0 mapped to 0. The multiplier x * y = r comes from the zero test, where r * x = x forces
    # r = 1 for a non-zero x, and y * (1 - r) = 0 forces y = 0 for a zero x.
    p = cs.modulus
    if isinstance(xGal, Fld):
        return pow(xGal, -1, p) if xGal % p else 0x00
    rBit, yGal = is_nonzero(cs, xGal, msg="poseidon inverse sbox error")
    cs.MKGATE(yGal, cs.SUB(0x01, rBit), 0x00, msg="poseidon inverse sbox error")
    return yGal


class SboxType(enum.Enum):
    CUBE = "cube"
    INVERSE = "inverse"

    def apply(self, xFld: Fld, modulus: int) -> Fld:
        if self is SboxType.CUBE:
            return pow(xFld, 3, modulus)
        return pow(xFld, -1, modulus) if xFld % modulus else 0x00

    def synthesize(self, cs: Circuit, xGal: Gal) -> Gal:
        if self is SboxType.CUBE:
            return cube_sbox(cs, xGal)
        return inverse_sbox(cs, xGal)


# out-of-circuit reference implementations


def poseidon_permutation(state: Sequence[Fld], params: PoseidonParams, sbox: SboxType, modulus: int) -> list[Fld]:
    width = params.width
    if len(state) != width:
        raise ParameterError("poseidon", "state", "must have {} elements, got {}".format(width, len(state)))
    state = [xFld % modulus for xFld in state]
    for k in range(params.total_rounds):
        state = [(xFld + params.round_keys[k * width + i]) % modulus for i, xFld in enumerate(state)]
        if params.is_full_round(k):
            state = [sbox.apply(xFld, modulus) for xFld in state]
        else:
            state[0] = sbox.apply(state[0], modulus)
        state = [sum(params.mds[i][j] * state[j] for j in range(width)) % modulus for i in range(width)]
    return state


def poseidon_hash_2(xl: Fld, xr: Fld, params: PoseidonParams, sbox: SboxType, modulus: int) -> Fld:
    # 2:1 hash, the inputs go to the first two slots and the remaining slots are zero
    return poseidon_permutation([xl, xr] + [0x00] * (params.width - 2), params, sbox, modulus)[HASH_OUTPUT]


class PoseidonGadget:
    # A full round costs width S-boxes, a partial round only one, applied to the first element of the
    # state. Adding round keys and mixing with the MDS matrix are linear and cost nothing.

    def __init__(self, params: PoseidonParams, sbox: SboxType) -> None:
        self.params = params
        self.sbox = sbox

    def permutation(self, cs: Circuit, inputs: Sequence[Gal]) -> list[Gal]:
        params = self.params
        width = params.width
        if len(inputs) != width:
            raise ParameterError("poseidon", "inputs", "must have {} elements, got {}".format(width, len(inputs)))
        gates = len(cs.gates)
        state = list(inputs)
        for k in range(params.total_rounds):
            state = [cs.ADD(xGal, params.round_keys[k * width + i]) for i, xGal in enumerate(state)]
            if params.is_full_round(k):
                state = [self.sbox.synthesize(cs, xGal) for xGal in state]
            else:
                state[0] = self.sbox.synthesize(cs, state[0])
            state = [cs.SUM(cs.MUL(state[j], params.mds[i][j]) for j in range(width)) for i in range(width)]
        logger.debug("poseidon gadget (%s sbox): width %d, %d rounds, %d gates", self.sbox.value, width, params.total_rounds, len(cs.gates) - gates)
        return state

    def permutation_gadget(self, cs: Circuit, inputs: Sequence[Gal], outputs: Sequence[Gal], *, msg="poseidon permutation mismatch") -> list[Gal]:
        if len(outputs) != self.params.width:
            raise ParameterError("poseidon", "outputs", "must have {} elements, got {}".format(self.params.width, len(outputs)))
        state = self.permutation(cs, inputs)
        for xGal, oGal in zip(state, outputs):
            cs.ASSERT_EQ(xGal, oGal, msg=msg)
        return state

    def hash_2(self, cs: Circuit, lGal: Gal, rGal: Gal) -> Gal:
        return self.permutation(cs, [lGal, rGal] + [0x00] * (self.params.width - 2))[HASH_OUTPUT]

    def hash_2_gadget(self, cs: Circuit, lGal: Gal, rGal: Gal, dGal: Gal, *, msg="poseidon digest mismatch") -> Gal:
        hGal = self.hash_2(cs, lGal, rGal)
        cs.ASSERT_EQ(hGal, dGal, msg=msg)
        return hGal

    def compress(self, cs: Circuit, lGal: Gal, rGal: Gal) -> Gal:
        return self.hash_2(cs, lGal, rGal)
