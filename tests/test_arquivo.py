import json

import pytest

from automatos.arquivo import load_snapshot, save_snapshot, snapshot_from_json, snapshot_to_dict, snapshot_to_json
from automatos.base import MealyPair, MealyTransition, PdaTransition, SymbolTransition, TuringTransition
from helpers import snap, st

SAMPLES = {
    "nfa": snap("nfa", [st("q0", initial=True), st("q1", final=True)],
                [SymbolTransition("t1", "q0", "q1", ["a", "ε"])], epsilon="ε"),
    "mealy": snap("mealy", [st("q0", initial=True)],
                  [MealyTransition("t1", "q0", "q0", [MealyPair("a", "x")])], recognitionMode="consumption"),
    "moore": snap("moore", [st("q0", initial=True, output="ã")],
                  [SymbolTransition("t1", "q0", "q0", ["a"])], recognitionMode=False),
    "pda": snap("pda", [st("q0", initial=True)],
                [PdaTransition("t1", "q0", "q0", "a", "$", "A$")], maxDepth=50),
    "turing": snap("turing", [st("q0", initial=True)],
                   [TuringTransition("t1", "q0", "q0", "0", "1", "R")], blank="_"),
}


@pytest.mark.parametrize("kind", sorted(SAMPLES))
def test_json_round_trip(kind):
    original = SAMPLES[kind]
    restored = snapshot_from_json(snapshot_to_json(original))
    assert restored == original


def test_document_layout():
    data = snapshot_to_dict(SAMPLES["pda"])
    assert data["type"] == "pda"
    assert data["meta"]["maxDepth"] == 50
    assert data["states"][0] == {"id": "q0", "label": "q0", "x": 0, "y": 0, "isInitial": True, "isFinal": False}
    assert data["transitions"][0] == {"id": "t1", "from": "q0", "to": "q0",
                                      "pda": {"read": "a", "pop": "$", "push": "A$"}}
    pairs = snapshot_to_dict(SAMPLES["mealy"])["transitions"][0]["pairs"]
    assert pairs == [{"in": "a", "out": "x"}]


def test_non_ascii_written_verbatim():
    assert '"ã"' in snapshot_to_json(SAMPLES["moore"])


def test_save_and_load_file(tmp_path):
    path = tmp_path / "maquina.json"
    save_snapshot(SAMPLES["turing"], str(path))
    assert json.loads(path.read_text(encoding="utf-8"))["type"] == "turing"
    assert load_snapshot(str(path)) == SAMPLES["turing"]


def test_missing_fields_use_defaults():
    restored = snapshot_from_json(json.dumps({
        "type": "dfa",
        "states": [{"id": "q0", "isInitial": True}],
    }))
    assert restored.meta == {}
    assert restored.transitions == []
    assert restored.states[0].label == "q0"
    assert restored.states[0].output is None


def test_malformed_transition_is_skipped(capsys):
    restored = snapshot_from_json(json.dumps({
        "type": "dfa",
        "meta": {},
        "states": [{"id": "q0"}],
        "transitions": [
            {"id": "t1", "from": "q0", "to": "q0"},
            {"id": "t2", "from": "q0"},
            {"id": "t3", "from": "q0", "to": "q0", "symbols": ["a"]},
        ],
    }))
    assert [t.id for t in restored.transitions] == ["t3"]
    assert capsys.readouterr().out.count("Aviso:") == 2


def test_invalid_json_raises():
    with pytest.raises(json.JSONDecodeError):
        snapshot_from_json("{não é json")
