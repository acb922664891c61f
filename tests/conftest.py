import hashlib

import pytest
from pymcl import r as ρ

from zkgadgets.circuit import Circuit
from zkgadgets.gadgets.mimc import MiMCParams
from zkgadgets.gadgets.poseidon import PoseidonParams


# Test constants are derived from labels with SHA-256, they are deterministic but carry no security
# claim, production parameters are supplied from outside.


def derive(label: str, i: int) -> int:
    return int.from_bytes(hashlib.sha256("{}[{}]".format(label, i).encode()).digest(), "big") % ρ


def index(xVar) -> int:
    # the witness index of a single-entry variable
    [i] = xVar.data
    return i


def prove(cs: Circuit, args: dict[str, int]):
    # generate the witness and check it against every gate, as the proving engine would
    witness = cs.witness(args)
    cs.check(witness)
    return witness


MIMC_ROUNDS = 64

POSEIDON_WIDTH = 4
POSEIDON_FULL_ROUNDS = (4, 4)
POSEIDON_PARTIAL_ROUNDS = 24


@pytest.fixture
def cs() -> Circuit:
    return Circuit()


@pytest.fixture(scope="session")
def mimc_params() -> MiMCParams:
    return MiMCParams(key=derive("mimc.key", 0), constants=[derive("mimc.constant", i) for i in range(MIMC_ROUNDS)])


@pytest.fixture(scope="session")
def poseidon_params() -> PoseidonParams:
    width = POSEIDON_WIDTH
    full_b, full_e = POSEIDON_FULL_ROUNDS
    total = full_b + full_e + POSEIDON_PARTIAL_ROUNDS
    # Cauchy matrix 1 / (xᵢ - yⱼ) with xᵢ = i and yⱼ = width + j, every square submatrix is invertible
    mds = [[pow(i - width - j, -1, ρ) for j in range(width)] for i in range(width)]
    return PoseidonParams(
        width=width,
        full_rounds_beginning=full_b,
        full_rounds_end=full_e,
        partial_rounds=POSEIDON_PARTIAL_ROUNDS,
        round_keys=[derive("poseidon.round_key", i) for i in range(total * width)],
        mds=mds,
    )
