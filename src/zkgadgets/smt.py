import logging
from typing import Callable

from .errors import ParameterError
from .gadgets.merkle import MerklePath
from .types import Fld


logger = logging.getLogger(__name__)


Compress = Callable[[Fld, Fld], Fld]


class SparseMerkleTree:
    # An out-of-circuit sparse Merkle tree of fixed depth, holding 2ᵈ leaves that all start out empty.
    # Only the nodes on the paths of updated leaves are stored, every other node at level i equals
    # the root of an empty subtree of height i, which is precomputed once.

    def __init__(self, depth: int, compress: Compress, empty: Fld = 0x00) -> None:
        if depth < 1:
            raise ParameterError("sparse merkle tree", "depth", "must be positive, got {}".format(depth))
        self.depth = depth
        self.compress = compress
        self.empty = [empty]
        for _ in range(depth):
            self.empty.append(compress(self.empty[-1], self.empty[-1]))
        self.nodes: dict[tuple[int, int], Fld] = {}

    def check_index(self, index: int) -> None:
        if not 0 <= index < 0x02**self.depth:
            raise ParameterError("sparse merkle tree", "index", "must be in [0, 2^{}), got {}".format(self.depth, index))

    def node(self, level: int, index: int) -> Fld:
        return self.nodes.get((level, index), self.empty[level])

    @property
    def root(self) -> Fld:
        return self.node(self.depth, 0)

    def get(self, index: int) -> Fld:
        self.check_index(index)
        return self.node(0, index)

    def update(self, index: int, leaf: Fld) -> Fld:
        # Set a leaf and rehash its path, returns the new root.
        self.check_index(index)
        self.nodes[0, index] = leaf
        for level in range(self.depth):
            index >>= 1
            self.nodes[level + 1, index] = self.compress(self.node(level, index * 2), self.node(level, index * 2 + 1))
        logger.debug("sparse merkle tree updated, root %#x", self.root)
        return self.root

    def path(self, index: int) -> MerklePath:
        self.check_index(index)
        return MerklePath([(index >> level & 0x01, self.node(level, index >> level ^ 0x01)) for level in range(self.depth)])

    def fold(self, leaf: Fld, path: MerklePath) -> Fld:
        # The root reached from the leaf along the path.
        node = leaf
        for dBit, sibling in path:
            node = self.compress(sibling, node) if dBit else self.compress(node, sibling)
        return node

    def verify(self, leaf: Fld, path: MerklePath) -> bool:
        return len(path) == self.depth and self.fold(leaf, path) == self.root
