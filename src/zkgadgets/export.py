import logging
from typing import BinaryIO

import dill

from .circuit import Circuit


logger = logging.getLogger(__name__)


# The proving engine runs apart from the synthesis, so the circuit is handed over in two pieces: the
# constraints together with the public and committed entries, which both the prover and the verifier
# need, and the witness generation functions, which only the prover needs.


def dump_gates(cs: Circuit, file: BinaryIO) -> None:
    logger.debug("saving %d gates over %d wires", len(cs.gates), cs.wire_count)
    file.write(dill.dumps((cs.modulus, cs.wire_count, cs.stmts, cs.cmts, cs.gates)))


def dump_funcs(cs: Circuit, file: BinaryIO) -> None:
    logger.debug("saving %d witness generation functions", len(cs.funcs))
    file.write(dill.dumps(cs.funcs))


def load(gates_file: BinaryIO, funcs_file: BinaryIO | None = None) -> Circuit:
    # Rebuild a circuit from the dumped pieces. Without the witness generation functions the circuit
    # can still be checked against a witness vector, but it cannot generate one.
    modulus, wire_count, stmts, cmts, gates = dill.loads(gates_file.read())
    cs = Circuit(modulus)
    cs.wire_count = wire_count
    cs.stmts = stmts
    cs.cmts = cmts
    cs.gates = gates
    cs.funcs = dill.loads(funcs_file.read()) if funcs_file is not None else []
    logger.debug("loaded %d gates over %d wires", len(gates), wire_count)
    return cs
