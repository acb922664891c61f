class GadgetError(Exception):
    # Base class of every error raised while synthesizing a circuit or generating its witness.
    pass


class ParameterError(GadgetError, ValueError):
    # A gadget was constructed with malformed parameters, raised before any constraint is emitted.

    def __init__(self, gadget: str, param: str, reason: str) -> None:
        super().__init__("{}: {} {}".format(gadget, param, reason))
        self.gadget = gadget
        self.param = param


class WitnessError(GadgetError):
    pass


class MalformedInputError(WitnessError):
    # The input of the witness generation is missing or is not a field element.
    pass


class StatementError(WitnessError):
    # The statement a gadget encodes is false for the given input.
    pass


class UnsatisfiedError(StatementError):
    # A constraint of the circuit is not satisfied by the witness vector.

    def __init__(self, index: int, msg: str) -> None:
        super().__init__("constraint #{} not satisfied: {}".format(index, msg))
        self.index = index
        self.msg = msg
