import pytest

from automatos.base import MealyPair, MealyTransition, PdaTransition, SymbolTransition, TuringTransition
from automatos.registro import get_automaton_factory
from helpers import snap, st


@pytest.fixture
def dfa():
    return snap("dfa", [st("q0", initial=True), st("q1", final=True)], [
        SymbolTransition("t1", "q0", "q1", ["a", "b"]),
        SymbolTransition("t2", "q1", "q1", ["a"]),
    ])


@pytest.mark.parametrize("target", ["dfa", "nfa", "mealy", "moore", "pda", "turing"])
def test_conversion_keeps_states_and_transitions(dfa, target):
    result = get_automaton_factory(target).convert_from(dfa)
    assert result.snapshot.kind == target
    assert [s.id for s in result.snapshot.states] == ["q0", "q1"]
    assert [t.id for t in result.snapshot.transitions] == ["t1", "t2"]


def test_conversion_does_not_mutate_source(dfa):
    get_automaton_factory("moore").convert_from(dfa)
    assert dfa.states[1].is_final
    assert dfa.states[1].output is None


def test_dfa_to_nfa_has_no_warnings(dfa):
    result = get_automaton_factory("nfa").convert_from(dfa)
    assert result.warnings == []
    assert result.snapshot.meta == {"epsilon": "ε"}
    assert result.snapshot.transitions[0].symbols == ["a", "b"]


def test_nfa_to_dfa_drops_epsilon_with_warning():
    nfa = snap("nfa", [st("q0", initial=True), st("q1", final=True)], [
        SymbolTransition("t1", "q0", "q1", ["ε"]),
        SymbolTransition("t2", "q0", "q1", ["a", "ε"]),
    ], epsilon="ε")
    result = get_automaton_factory("dfa").convert_from(nfa)
    assert [t.id for t in result.snapshot.transitions] == ["t2"]
    assert result.snapshot.transitions[0].symbols == ["a"]
    assert any("ε" in w for w in result.warnings)
    assert any("descartada" in w for w in result.warnings)


def test_to_mealy_clears_finals_and_outputs(dfa):
    result = get_automaton_factory("mealy").convert_from(dfa)
    assert result.warnings
    assert not any(s.is_final for s in result.snapshot.states)
    assert result.snapshot.meta == {"recognitionMode": False}
    t1 = result.snapshot.transitions[0]
    assert [(p.input, p.output) for p in t1.pairs] == [("a", ""), ("b", "")]


def test_to_moore_initializes_outputs(dfa):
    result = get_automaton_factory("moore").convert_from(dfa)
    assert [s.output for s in result.snapshot.states] == ["", ""]
    assert not any(s.is_final for s in result.snapshot.states)


def test_to_pda_keeps_first_symbol(dfa):
    result = get_automaton_factory("pda").convert_from(dfa)
    t1 = result.snapshot.transitions[0]
    assert isinstance(t1, PdaTransition)
    assert (t1.read, t1.pop, t1.push) == ("a", "ε", "ε")
    assert len(result.warnings) == 2
    assert result.snapshot.meta["initialStackSymbol"] == "$"


def test_to_turing_stays_in_place(dfa):
    result = get_automaton_factory("turing").convert_from(dfa)
    t1 = result.snapshot.transitions[0]
    assert isinstance(t1, TuringTransition)
    assert (t1.read, t1.write, t1.move) == ("a", "a", "S")
    assert result.snapshot.states[1].is_final


def test_mealy_to_dfa_drops_outputs():
    mealy = snap("mealy", [st("q0", initial=True)], [
        MealyTransition("t1", "q0", "q0", [MealyPair("a", "x"), MealyPair("b", "y")]),
    ])
    result = get_automaton_factory("dfa").convert_from(mealy)
    assert result.snapshot.transitions[0].symbols == ["a", "b"]
    assert any("Mealy" in w for w in result.warnings)


def test_same_kind_conversion_is_a_copy():
    pda = snap("pda", [st("q0", initial=True)], [PdaTransition("t1", "q0", "q0", "a", "$", "A$")])
    result = get_automaton_factory("pda").convert_from(pda)
    assert result.warnings == []
    assert result.snapshot is not pda
    assert result.snapshot.transitions[0] == pda.transitions[0]


def test_converted_snapshot_simulates(dfa):
    converted = get_automaton_factory("nfa").convert_from(dfa).snapshot
    assert get_automaton_factory("nfa").simulate(converted, "ba").status == "accepted"


@pytest.mark.parametrize("middle", ["dfa", "mealy", "moore", "pda", "turing"])
def test_round_trip_through_other_kind_keeps_counts(middle):
    nfa = snap("nfa", [st("q0", initial=True), st("q1", final=True)], [
        SymbolTransition("t1", "q0", "q1", ["a"]),
        SymbolTransition("t2", "q1", "q0", ["b"]),
    ], epsilon="ε")
    there = get_automaton_factory(middle).convert_from(nfa).snapshot
    back = get_automaton_factory("nfa").convert_from(there).snapshot
    assert len(back.states) == len(nfa.states)
    assert len(back.transitions) == len(nfa.transitions)
    assert [t.symbols for t in back.transitions] == [["a"], ["b"]]


@pytest.mark.parametrize("target", ["pda", "turing"])
@pytest.mark.parametrize("source_kind,message", [("mealy", "Mealy"), ("moore", "Moore")])
def test_lost_outputs_are_reported(target, source_kind, message):
    if source_kind == "mealy":
        source = snap("mealy", [st("q0", initial=True)], [
            MealyTransition("t1", "q0", "q0", [MealyPair("a", "x")]),
        ])
    else:
        source = snap("moore", [st("q0", initial=True, output="1")], [
            SymbolTransition("t1", "q0", "q0", ["a"]),
        ])
    result = get_automaton_factory(target).convert_from(source)
    assert result.snapshot.states[0].output is None
    assert any(message in w and "descartadas" in w for w in result.warnings)


def test_epsilon_reads_do_not_reach_the_tape():
    nfa = snap("nfa", [st("q0", initial=True), st("q1", final=True)], [
        SymbolTransition("t1", "q0", "q1", ["ε"]),
        SymbolTransition("t2", "q0", "q1", ["ε", "a"]),
    ], epsilon="ε")
    result = get_automaton_factory("turing").convert_from(nfa)
    assert [(t.id, t.read) for t in result.snapshot.transitions] == [("t2", "a")]
    assert any("ε" in w for w in result.warnings)

    pda = snap("pda", [st("q0", initial=True)], [PdaTransition("t1", "q0", "q0", "ε", "$", "$")])
    result = get_automaton_factory("turing").convert_from(pda)
    assert result.snapshot.transitions == []
    assert any("ε" in w for w in result.warnings)
