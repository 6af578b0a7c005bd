import json
from typing import Any, Dict

from automatos.base import (
    AutomatonSnapshot,
    MealyPair,
    MealyTransition,
    PdaTransition,
    State,
    SymbolTransition,
    Transition,
    TuringTransition,
)


def _state_to_dict(s: State) -> Dict[str, Any]:
    data = {
        "id": s.id,
        "label": s.label,
        "x": s.x,
        "y": s.y,
        "isInitial": s.is_initial,
        "isFinal": s.is_final,
    }
    if s.output is not None:
        data["output"] = s.output
    return data


def _state_from_dict(data: Dict[str, Any]) -> State:
    return State(
        id=data["id"],
        label=data.get("label", data["id"]),
        x=data.get("x", 0),
        y=data.get("y", 0),
        is_initial=bool(data.get("isInitial", False)),
        is_final=bool(data.get("isFinal", False)),
        output=data.get("output"),
    )


def _transition_to_dict(t: Transition) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": t.id, "from": t.src, "to": t.dst}
    if isinstance(t, SymbolTransition):
        data["symbols"] = list(t.symbols)
    elif isinstance(t, MealyTransition):
        data["pairs"] = [{"in": p.input, "out": p.output} for p in t.pairs]
    elif isinstance(t, PdaTransition):
        data["pda"] = {"read": t.read, "pop": t.pop, "push": t.push}
    elif isinstance(t, TuringTransition):
        data["tm"] = {"read": t.read, "write": t.write, "move": t.move}
    return data


def _transition_from_dict(data: Dict[str, Any]) -> Transition:
    """O tipo da transição é decidido pelo campo presente: symbols, pairs, pda ou tm."""
    tid, src, dst = data["id"], data["from"], data["to"]
    if "symbols" in data:
        return SymbolTransition(tid, src, dst, list(data["symbols"]))
    if "pairs" in data:
        pairs = [MealyPair(p["in"], p.get("out", "")) for p in data["pairs"]]
        return MealyTransition(tid, src, dst, pairs)
    if "pda" in data:
        p = data["pda"]
        return PdaTransition(tid, src, dst, p["read"], p["pop"], p["push"])
    if "tm" in data:
        m = data["tm"]
        return TuringTransition(tid, src, dst, m["read"], m["write"], m["move"])
    raise ValueError(f"Transição '{tid}' sem conteúdo reconhecido.")


def snapshot_to_dict(snapshot: AutomatonSnapshot) -> Dict[str, Any]:
    return {
        "type": snapshot.kind,
        "meta": dict(snapshot.meta or {}),
        "states": [_state_to_dict(s) for s in snapshot.states],
        "transitions": [_transition_to_dict(t) for t in snapshot.transitions],
    }


def snapshot_from_dict(data: Dict[str, Any]) -> AutomatonSnapshot:
    snapshot = AutomatonSnapshot(
        kind=data["type"],
        meta=dict(data.get("meta") or {}),
        states=[_state_from_dict(s) for s in data.get("states", [])],
    )
    for t in data.get("transitions", []):
        try:
            snapshot.transitions.append(_transition_from_dict(t))
        except (KeyError, TypeError, ValueError) as e:
            print(f"Aviso: Ignorando transição malformada ({e}): {t}")
    return snapshot


def snapshot_to_json(snapshot: AutomatonSnapshot) -> str:
    """Serializa o snapshot para uma string JSON."""
    return json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False)


def snapshot_from_json(json_str: str) -> AutomatonSnapshot:
    return snapshot_from_dict(json.loads(json_str))


def save_snapshot(snapshot: AutomatonSnapshot, path: str):
    with open(path, "w", encoding="utf-8") as f:
        f.write(snapshot_to_json(snapshot))


def load_snapshot(path: str) -> AutomatonSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        return snapshot_from_json(f.read())
