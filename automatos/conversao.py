from dataclasses import replace
from typing import List

from automatos.base import (
    EPSILON,
    AutomatonSnapshot,
    MealyTransition,
    PdaTransition,
    State,
    SymbolTransition,
    Transition,
    TuringTransition,
)

SYMBOL_KINDS = ("dfa", "nfa", "moore")


def source_epsilon(source: AutomatonSnapshot) -> str:
    return (source.meta or {}).get("epsilon") or EPSILON


def symbols_of(transition: Transition) -> List[str]:
    """Símbolos de entrada de uma transição de qualquer tipo."""
    if isinstance(transition, SymbolTransition):
        return list(transition.symbols)
    if isinstance(transition, MealyTransition):
        return [p.input for p in transition.pairs]
    if isinstance(transition, (PdaTransition, TuringTransition)):
        return [transition.read]
    return []


def copy_states(source: AutomatonSnapshot, clear_final: bool = False, default_output=None) -> List[State]:
    """Copia os estados da origem, ajustando flags de final e saída."""
    states = []
    for s in source.states:
        states.append(replace(s, is_final=False if clear_final else s.is_final, output=default_output))
    return states


def has_symbol_conflicts(transitions: List[SymbolTransition]) -> bool:
    """True se algum estado tem o mesmo símbolo em duas transições."""
    seen = set()
    for t in transitions:
        for sym in t.symbols:
            if (t.src, sym) in seen:
                return True
            seen.add((t.src, sym))
    return False


def output_warnings(source: AutomatonSnapshot) -> List[str]:
    """Aviso de saídas perdidas quando a origem é Mealy ou Moore."""
    if source.kind == "mealy":
        return ["Saídas das transições de Mealy foram descartadas."]
    if source.kind == "moore":
        return ["Saídas dos estados de Moore foram descartadas."]
    return []
