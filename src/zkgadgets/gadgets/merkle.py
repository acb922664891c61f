import logging
from dataclasses import dataclass, field
from typing import Iterator, Protocol

from ..circuit import Circuit
from ..errors import ParameterError
from ..types import Gal, Bit, Args


logger = logging.getLogger(__name__)


class Hasher(Protocol):
    def compress(self, cs: Circuit, lGal: Gal, rGal: Gal) -> Gal: ...


@dataclass
class MerklePath:
    # The (direction, sibling) pairs from the leaf up to the root. A direction of 1 means the current
    # node is the right child, so the sibling goes to the left input of the next hash.
    # The same type carries plain field elements out of the circuit and variables inside of it.
    steps: list[tuple[Bit, Gal]] = field(default_factory=lambda: [])

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[tuple[Bit, Gal]]:
        return iter(self.steps)

    @property
    def dirs(self) -> list[Bit]:
        return [dBit for dBit, sGal in self.steps]

    @property
    def sibs(self) -> list[Gal]:
        return [sGal for dBit, sGal in self.steps]


def allocate_path(cs: Circuit, prefix: str, depth: int) -> MerklePath:
    # Allocate the direction bits and the sibling hashes of a path as committed entries, named
    # {prefix}.dir[i] and {prefix}.sib[i] in the args dictionary.
    return MerklePath([(cs.COMMIT("{}.dir[{}]".format(prefix, i)), cs.COMMIT("{}.sib[{}]".format(prefix, i))) for i in range(depth)])


def path_args(prefix: str, path: MerklePath) -> Args:
    # The args entries matching the wires of allocate_path, for the witness generation.
    args: Args = {}
    for i, (dFld, sFld) in enumerate(path):
        args["{}.dir[{}]".format(prefix, i)] = dFld
        args["{}.sib[{}]".format(prefix, i)] = sFld
    return args


class MerkleGadget:
    # Membership of a leaf in a fixed depth sparse Merkle tree. Each level costs one gate to assert the
    # direction is a boolean, one gate to select the left input, and whatever the hasher needs.

    def __init__(self, depth: int, hasher: Hasher) -> None:
        if depth < 1:
            raise ParameterError("merkle", "depth", "must be positive, got {}".format(depth))
        self.depth = depth
        self.hasher = hasher

    def root(self, cs: Circuit, lGal: Gal, path: MerklePath, *, msg="merkle path error") -> Gal:
        if len(path) != self.depth:
            raise ParameterError("merkle", "path length", "must match depth {}, got {}".format(self.depth, len(path)))
        cGal = lGal
        for dBit, sGal in path:
            cs.ASSERT_IS_BOOL(dBit, msg=msg)
            # left = d ? sibling : current, right is whichever of the two is not on the left
            xGal = cs.IF(dBit, sGal, cGal)
            yGal = cs.SUB(cs.ADD(sGal, cGal), xGal)
            cGal = self.hasher.compress(cs, xGal, yGal)
        return cGal

    def membership(self, cs: Circuit, lGal: Gal, path: MerklePath, rGal: Gal, *, msg="merkle root mismatch") -> Gal:
        # Prove the leaf l sits at the end of the path under the root r, r is a public constant or a
        # public entry.
        gates = len(cs.gates)
        cGal = self.root(cs, lGal, path)
        cs.ASSERT_EQ(cGal, rGal, msg=msg)
        logger.debug("merkle gadget: depth %d, %d gates", self.depth, len(cs.gates) - gates)
        return cGal
