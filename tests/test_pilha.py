import pytest

from automatos.base import PdaTransition
from automatos.pilha import PdaFactory, push_onto
from helpers import snap, st

factory = PdaFactory()


def anbn_empty_stack():
    return snap("pda", [st("q0", initial=True), st("q1")], [
        PdaTransition("t1", "q0", "q0", "a", "$", "A$"),
        PdaTransition("t2", "q0", "q0", "a", "A", "AA"),
        PdaTransition("t3", "q0", "q1", "b", "A", "ε"),
        PdaTransition("t4", "q1", "q1", "b", "A", "ε"),
    ], acceptanceMode="empty-stack")


def anbn_final_state():
    return snap("pda", [st("q0", initial=True), st("q1"), st("q2", final=True)], [
        PdaTransition("t1", "q0", "q0", "a", "ε", "A"),
        PdaTransition("t2", "q0", "q1", "ε", "ε", "ε"),
        PdaTransition("t3", "q1", "q1", "b", "A", "ε"),
        PdaTransition("t4", "q1", "q2", "ε", "$", "$"),
    ])


@pytest.mark.parametrize("word", ["", "ab", "aabb", "aaabbb"])
def test_empty_stack_accepts_balanced(word):
    result = factory.simulate(anbn_empty_stack(), word)
    assert result.status == "accepted"
    assert result.steps[-1].remaining_input == ""


@pytest.mark.parametrize("word", ["aab", "abb", "ba", "a"])
def test_empty_stack_rejects_unbalanced(word):
    assert factory.simulate(anbn_empty_stack(), word).status == "rejected"


@pytest.mark.parametrize("word,expected", [
    ("", "accepted"),
    ("aabb", "accepted"),
    ("aab", "rejected"),
    ("b", "rejected"),
])
def test_final_state_mode_with_epsilon_moves(word, expected):
    assert factory.simulate(anbn_final_state(), word).status == expected


def test_stack_snapshots_keep_first_pushed_symbol_on_top():
    result = factory.simulate(anbn_empty_stack(), "aab")
    assert result.steps[0].stack == ("$",)
    # pilha com o topo no fim da tupla
    accepted = factory.simulate(anbn_empty_stack(), "aabb")
    stacks = [s.stack for s in accepted.steps]
    assert stacks[1] == ("$", "A")
    assert stacks[2] == ("$", "A", "A")
    assert stacks[-1] == ("$",)


def test_push_onto_reverses_string():
    assert push_onto(("$",), "XY", "ε") == ("$", "Y", "X")
    assert push_onto(("$",), "ε", "ε") == ("$",)


def test_rejection_returns_last_explored_path():
    result = factory.simulate(anbn_empty_stack(), "ba")
    assert result.status == "rejected"
    assert len(result.steps) == 1
    assert result.final_states == ("q0",)


def test_depth_guard_reports_incomplete():
    s = snap("pda", [st("q0", initial=True)], [
        PdaTransition("t1", "q0", "q0", "ε", "ε", "X"),
    ], maxDepth=10)
    result = factory.simulate(s, "a")
    assert result.status == "incomplete"
    assert len(result.steps) == 11


def test_longer_reads_tried_first():
    s = snap("pda", [st("q0", initial=True), st("q1", final=True), st("q2", final=True)], [
        PdaTransition("t1", "q0", "q1", "a", "ε", "ε"),
        PdaTransition("t2", "q0", "q2", "ab", "ε", "ε"),
    ])
    result = factory.simulate(s, "ab")
    assert result.status == "accepted"
    assert result.final_states == ("q2",)
    assert result.steps[1].consumed_symbol == "ab"


def test_normalization_and_labels():
    t = factory.config.transition_from_label("t1", "q0", "q1", "a, $ -> A$")
    assert (t.read, t.pop, t.push) == ("a", "$", "A$")
    t = factory.config.transition_from_label("t1", "q0", "q1", " , → ")
    assert (t.read, t.pop, t.push) == ("ε", "ε", "ε")
    assert factory.config.format_transition_label(t) == "ε, ε → ε"
    with pytest.raises(ValueError):
        factory.config.transition_from_label("t1", "q0", "q1", "a $ A")


def test_create_empty_uses_default_meta():
    s = factory.create_empty()
    assert s.meta["initialStackSymbol"] == "$"
    assert s.meta["maxDepth"] == 500
    assert s.meta["acceptanceMode"] == "final"
    s.meta["maxDepth"] = 1
    assert factory.config.default_meta["maxDepth"] == 500
