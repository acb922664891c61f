import pytest
from pymcl import r as ρ

from zkgadgets.circuit import Circuit
from zkgadgets.errors import MalformedInputError, ParameterError, StatementError, UnsatisfiedError
from zkgadgets.gadgets.inequality import assert_not_equal
from zkgadgets.gadgets.membership import set_membership, MembershipStyle
from zkgadgets.gadgets.mimc import MiMCGadget, mimc
from zkgadgets.gadgets.rangeproof import range_proof
from zkgadgets.types import Var

from conftest import index, prove


class TestArithmetic:
    def test_constants_fold(self, cs):
        assert cs.ADD(3, 4) == 7
        assert cs.SUB(3, 4) == ρ - 1
        assert cs.MUL(ρ - 1, ρ - 1) == 1
        assert cs.SUM([1, 2, 3], 4) == 10
        assert cs.gates == []

    def test_linear_operations_emit_no_gates(self, cs):
        x = cs.PARAM("x")
        y = cs.PARAM("y")
        z = cs.SUM([cs.MUL(x, 3), cs.NEG(y)], 5)
        assert cs.gates == []
        witness = cs.witness({"x": 2, "y": 4})
        assert witness.apply(z) == 2 * 3 - 4 + 5

    def test_cancelling_terms_become_a_constant(self, cs):
        x = cs.PARAM("x")
        assert cs.SUB(cs.ADD(x, 9), x) == 9

    def test_multiplication_of_variables_emits_one_gate(self, cs):
        x = cs.PARAM("x")
        y = cs.PARAM("y")
        z = cs.MUL(x, y)
        assert len(cs.gates) == 1
        witness = prove(cs, {"x": 6, "y": 7})
        assert witness.apply(z) == 42

    def test_multiplier_allocates_three_wires(self, cs):
        l, r, o = cs.MKMUL(lambda getw, args: 5, lambda getw, args: 9)
        assert len(cs.gates) == 1
        witness = prove(cs, {})
        assert (witness.apply(l), witness.apply(r), witness.apply(o)) == (5, 9, 45)

    def test_cube_costs_two_gates(self, cs):
        x = cs.PARAM("x")
        c = cs.CUBE(cs.ADD(x, 1))
        assert len(cs.gates) == 2
        assert prove(cs, {"x": 2}).apply(c) == 27

    def test_conditional(self, cs):
        b = cs.PARAM("b")
        cs.ASSERT_IS_BOOL(b)
        r = cs.IF(b, 10, 20)
        assert prove(cs, {"b": 1}).apply(r) == 10
        assert prove(cs, {"b": 0}).apply(r) == 20
        assert cs.IF(1, 10, 20) == 10
        assert cs.IF(0, 10, 20) == 20

    def test_false_constant_gate_fails_at_synthesis(self, cs):
        with pytest.raises(StatementError, match="two is not three"):
            cs.ASSERT_EQ(2, 3, msg="two is not three")
        cs.ASSERT_EQ(3, 3)
        assert cs.gates == []


class TestWitness:
    def test_missing_argument(self, cs):
        cs.PARAM("x")
        with pytest.raises(MalformedInputError, match="x"):
            cs.witness({})

    def test_argument_is_not_a_field_element(self, cs):
        cs.COMMIT("x")
        with pytest.raises(MalformedInputError):
            cs.witness({"x": "12"})

    def test_arguments_are_reduced(self, cs):
        x = cs.PARAM("x")
        assert cs.witness({"x": -1}).apply(x) == ρ - 1

    def test_public_and_committed_entries(self, cs):
        x = cs.COMMIT("x")
        y = cs.PARAM("y", public=True)
        cs.REVEAL("z", cs.MUL(x, y))
        witness = prove(cs, {"x": 3, "y": 5})
        assert cs.public_inputs(witness) == [("ONE", 1), ("y", 5), ("z", 15)]
        assert cs.commitments(witness) == [("x", 3)]
        assert cs.stats() == {"wires": 5, "gates": 2, "public": 3, "committed": 1}

    def test_check_points_at_the_failing_gate(self, cs):
        x = cs.PARAM("x")
        y = cs.PARAM("y")
        z = cs.MUL(x, y, msg="product")
        cs.ASSERT_EQ(z, 12, msg="twelve")
        witness = prove(cs, {"x": 3, "y": 4})
        witness.vec[index(z)] = 13
        with pytest.raises(UnsatisfiedError) as info:
            cs.check(witness)
        assert info.value.index == 0
        assert info.value.msg == "product"

    def test_constant_entry_is_public(self, cs):
        assert cs.stmts == {cs.one: "ONE"}
        assert cs.public_inputs(cs.witness({})) == [("ONE", 1)]

    def test_constant_entry_cannot_be_forged(self, cs):
        # with ONE = 2 the constant term of x - 7 becomes -14, so x = 7 would pass the inverse gate
        x = cs.COMMIT("v")
        i = assert_not_equal(cs, x, 7)
        witness = prove(cs, {"v": 8})
        witness.vec[cs.one] = 2
        witness.vec[index(x)] = 7
        witness.vec[index(i)] = pow(7 - 14, -1, ρ)
        with pytest.raises(StatementError, match="ONE"):
            cs.check(witness)

    def test_wrong_hint_only_fails_at_check(self, cs):
        # a hint that does not satisfy its gate is accepted at synthesis and at witness generation
        l, r, o = cs.MKMUL(lambda getw, args: 2, lambda getw, args: 3)
        w = cs.MKWIRE(lambda getw, args: 7)
        cs.MKGATE(l, r, w, msg="seven")
        witness = cs.witness({})
        with pytest.raises(UnsatisfiedError, match="seven"):
            cs.check(witness)


class TestParameters:
    def test_modulus_must_be_odd(self):
        with pytest.raises(ParameterError, match="circuit: modulus"):
            Circuit(modulus=4)

    @pytest.mark.parametrize("modulus", [1, 9, 15, 2**64])
    def test_composite_modulus(self, modulus):
        with pytest.raises(ParameterError, match="circuit: modulus"):
            Circuit(modulus=modulus)

    def test_small_field(self):
        cs = Circuit(modulus=101)
        x = cs.PARAM("x")
        y = cs.MUL(x, x)
        assert prove(cs, {"x": 20}).apply(y) == 400 % 101


class TestDeterminism:
    def synthesize(self, mimc_params):
        cs = Circuit()
        v = cs.COMMIT("v")
        range_proof(cs, v, 16)
        set_membership(cs, v, [3, 7, 11, 1000], MembershipStyle.INDICATOR)
        MiMCGadget(mimc_params).hash(cs, v, cs.PARAM("digest", public=True))
        return cs

    def test_synthesis_is_deterministic(self, mimc_params):
        args = {"v": 1000, "digest": mimc(1000, mimc_params, ρ)}
        a = self.synthesize(mimc_params)
        b = self.synthesize(mimc_params)
        assert len(a.gates) == len(b.gates)
        assert a.gates == b.gates
        assert a.wire_count == b.wire_count
        assert prove(a, args).vec == prove(b, args).vec

    def test_variables_compare_by_content(self):
        assert Var({1: 2}) == Var({1: 2})
        assert Var({1: 2}) != Var({1: 3})
