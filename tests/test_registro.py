import pytest

from automatos import registro
from automatos.base import AutomatonConfig, AutomatonFactory
from automatos.registro import get_automaton_factory, list_automaton_types, register_automaton_factory


def test_all_kinds_registered():
    kinds = [kind for kind, _ in list_automaton_types()]
    assert kinds == ["dfa", "nfa", "mealy", "moore", "pda", "turing"]
    for kind in kinds:
        assert get_automaton_factory(kind).config.kind == kind


def test_unknown_kind_raises():
    with pytest.raises(ValueError, match="xyz"):
        get_automaton_factory("xyz")


@pytest.mark.parametrize("kind,flags", [
    ("dfa", set()),
    ("nfa", {"supports_epsilon", "supports_nondeterminism"}),
    ("mealy", {"supports_output_per_transition", "supports_recognition_mode"}),
    ("moore", {"supports_output_per_state", "supports_recognition_mode"}),
    ("pda", {"supports_epsilon", "supports_nondeterminism", "supports_stack"}),
    ("turing", {"supports_tape"}),
])
def test_capabilities(kind, flags):
    caps = get_automaton_factory(kind).config.capabilities
    enabled = {name for name, value in vars(caps).items() if value}
    assert enabled == flags


def test_default_state_creation():
    config = get_automaton_factory("dfa").config
    first = config.create_state(0, 10, 20)
    second = config.create_state(1, 30, 40)
    assert (first.id, first.label, first.is_initial) == ("q0", "q0", True)
    assert (second.id, second.is_initial, second.is_final) == ("q1", False, False)
    assert (second.x, second.y) == (30, 40)


def test_register_new_kind(monkeypatch):
    class EchoConfig(AutomatonConfig):
        kind = "echo"
        display_name = "Eco"

    class EchoFactory(AutomatonFactory):
        config = EchoConfig()

    monkeypatch.setattr(registro, "_factories", dict(registro._factories))
    register_automaton_factory(EchoFactory())
    assert ("echo", "Eco") in list_automaton_types()
    assert get_automaton_factory("echo").create_empty().kind == "echo"


def test_registration_does_not_leak_between_tests():
    assert "echo" not in [kind for kind, _ in list_automaton_types()]
