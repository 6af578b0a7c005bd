import pytest

from automatos.base import SymbolTransition
from automatos.maquina_moore import MooreFactory
from helpers import snap, st

factory = MooreFactory()


def parity(mode=False):
    return snap("moore", [st("q0", initial=True, output="0"), st("q1", final=True, output="1")], [
        SymbolTransition("t1", "q0", "q1", ["a"]),
        SymbolTransition("t2", "q1", "q0", ["a"]),
        SymbolTransition("t3", "q0", "q0", ["b"]),
        SymbolTransition("t4", "q1", "q1", ["b"]),
    ], recognitionMode=mode)


def test_empty_input_outputs_initial_state_output():
    result = factory.simulate(parity(), "")
    assert result.output_trace == "0"
    assert result.steps[0].cumulative_output == "0"
    assert result.status == "transduced"


def test_output_emitted_on_entering_state():
    assert factory.simulate(parity(), "a").output_trace == "01"
    result = factory.simulate(parity(), "aba")
    assert result.output_trace == "0110"
    assert [s.produced_output for s in result.steps[1:]] == ["1", "1", "0"]


def test_recognition_modes():
    assert factory.simulate(parity("consumption"), "aa").status == "accepted"
    assert factory.simulate(parity("consumption"), "ac").status == "rejected"
    assert factory.simulate(parity("final"), "a").status == "accepted"
    assert factory.simulate(parity("final"), "aa").status == "rejected"
    assert factory.simulate(parity(True), "ab").status == "accepted"


def test_missing_output_counts_as_empty():
    s = snap("moore", [st("q0", initial=True), st("q1", output="x")], [SymbolTransition("t1", "q0", "q1", ["a"])])
    assert factory.simulate(s, "a").output_trace == "x"


def test_deterministic_validation():
    error = factory.config.validate_add_transition(parity(), SymbolTransition("t9", "q0", "q0", ["a"]))
    assert error is not None and "'a'" in error


def test_created_states_have_empty_output():
    assert factory.config.create_state(0, 0, 0).output == ""
    assert factory.config.capabilities.supports_output_per_state
