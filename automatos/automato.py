from typing import Iterable, List, Optional, Set, Tuple

from automatos.base import (
    ACCEPTED,
    EPSILON,
    REJECTED,
    AutomatonConfig,
    AutomatonFactory,
    AutomatonSnapshot,
    Capabilities,
    ConversionResult,
    SimulationResult,
    SimulationStep,
    SymbolTransition,
    clean_symbols,
    rejected_without_start,
    split_label,
)
from automatos.casamento import longest_match
from automatos.conversao import (
    SYMBOL_KINDS,
    copy_states,
    has_symbol_conflicts,
    output_warnings,
    source_epsilon,
    symbols_of,
)


def symbol_candidates(snapshot: AutomatonSnapshot, state_id: str) -> List[Tuple[str, SymbolTransition]]:
    """Pares (símbolo, transição) que saem de um estado, na ordem de declaração."""
    return [
        (sym, t)
        for t in snapshot.transitions
        if isinstance(t, SymbolTransition) and t.src == state_id
        for sym in t.symbols
    ]


def symbol_conflict(snapshot: AutomatonSnapshot, transition) -> Optional[str]:
    """Determinismo: nenhum símbolo pode se repetir em transições que saem do mesmo estado."""
    if not isinstance(transition, SymbolTransition):
        return None
    for symbol in transition.symbols:
        for tr in snapshot.transitions:
            if not isinstance(tr, SymbolTransition) or tr.id == transition.id:
                continue
            if tr.src == transition.src and symbol in tr.symbols:
                return f"Símbolo '{symbol}' já usado a partir de {transition.src}."
    return None


def epsilon_closure(snapshot: AutomatonSnapshot, states: Iterable[str], epsilon: str = EPSILON) -> Set[str]:
    """Calcula o fecho-ε de um conjunto de estados."""
    closure = set(states)
    stack = list(closure)
    while stack:
        state = stack.pop()
        for t in snapshot.transitions:
            if not isinstance(t, SymbolTransition) or t.src != state:
                continue
            if epsilon in t.symbols and t.dst not in closure:
                closure.add(t.dst)
                stack.append(t.dst)
    return closure


def ordered_states(snapshot: AutomatonSnapshot, state_ids: Set[str]) -> Tuple[str, ...]:
    """Conjunto de estados na ordem de declaração do snapshot."""
    known = [s.id for s in snapshot.states if s.id in state_ids]
    extra = sorted(state_ids - set(known))
    return tuple(known + extra)


class SymbolConfig(AutomatonConfig):
    """Configuração comum às transições por conjunto de símbolos."""

    def normalize_transition(self, transition, meta=None):
        if not isinstance(transition, SymbolTransition):
            return transition
        return SymbolTransition(transition.id, transition.src, transition.dst, clean_symbols(transition.symbols))

    def format_transition_label(self, transition) -> str:
        if not isinstance(transition, SymbolTransition):
            return ""
        return ", ".join(transition.symbols)

    def transition_from_label(self, transition_id, src, dst, label):
        symbols = split_label(label)
        if not symbols:
            raise ValueError("Informe ao menos um símbolo (ex: a, b).")
        return SymbolTransition(transition_id, src, dst, clean_symbols(symbols))


class DfaConfig(SymbolConfig):
    kind = "dfa"
    display_name = "AFD (Determinístico)"
    capabilities = Capabilities()
    default_meta = {}

    def validate_add_transition(self, snapshot, transition):
        return symbol_conflict(snapshot, transition)


class NfaConfig(SymbolConfig):
    kind = "nfa"
    display_name = "AFN (Não-Determinístico)"
    capabilities = Capabilities(supports_epsilon=True, supports_nondeterminism=True)
    default_meta = {"epsilon": EPSILON}


def symbol_transitions(source: AutomatonSnapshot, epsilon_to: Optional[str]) -> Tuple[List[SymbolTransition], bool, int]:
    """
    Converte as transições da origem em transições por símbolos.
    epsilon_to=None descarta ε; caso contrário, ε da origem vira epsilon_to.
    Retorna (transições, houve_epsilon_descartado, descartadas).
    """
    epsilon = source_epsilon(source)
    transitions = []
    dropped_epsilon = False
    dropped = 0
    for t in source.transitions:
        symbols = []
        for sym in clean_symbols(symbols_of(t)):
            if sym == epsilon:
                if epsilon_to is None:
                    dropped_epsilon = True
                    continue
                sym = epsilon_to
            if sym not in symbols:
                symbols.append(sym)
        if not symbols:
            dropped += 1
            continue
        transitions.append(SymbolTransition(t.id, t.src, t.dst, symbols))
    return transitions, dropped_epsilon, dropped


def _payload_warnings(source: AutomatonSnapshot, dropped: int) -> List[str]:
    warnings = output_warnings(source)
    if source.kind not in SYMBOL_KINDS and source.kind != "mealy":
        warnings.append(f"Transições de '{source.kind}' reduzidas ao símbolo lido; pilha/fita descartadas.")
    if dropped:
        warnings.append(f"{dropped} transição(ões) sem símbolo descartada(s).")
    return warnings


class DfaFactory(AutomatonFactory):
    config = DfaConfig()

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        current = initial.id
        position = 0
        steps = [SimulationStep(current_state=current, remaining_input=input_str)]

        while position < len(input_str):
            match = longest_match(symbol_candidates(snapshot, current), input_str, position)
            if match is None:
                return SimulationResult(tuple(steps), REJECTED, (current,))

            symbol, transition = match
            position += len(symbol)
            current = transition.dst
            steps.append(SimulationStep(
                current_state=current,
                remaining_input=input_str[position:],
                consumed_symbol=symbol,
            ))

        status = ACCEPTED if snapshot.is_final(current) else REJECTED
        return SimulationResult(tuple(steps), status, (current,))

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        transitions, dropped_epsilon, dropped = symbol_transitions(source, epsilon_to=None)
        warnings = _payload_warnings(source, dropped)
        if dropped_epsilon:
            warnings.append("Transições ε não existem em AFD e foram descartadas.")
        if has_symbol_conflicts(transitions):
            warnings.append("O autômato convertido tem símbolos repetidos a partir do mesmo estado; corrija o não determinismo.")
        snapshot = AutomatonSnapshot(
            kind="dfa",
            meta={},
            states=copy_states(source),
            transitions=transitions,
        )
        return ConversionResult(snapshot, warnings)


class NfaFactory(AutomatonFactory):
    config = NfaConfig()

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        epsilon = self.meta_value(snapshot, "epsilon")
        current = epsilon_closure(snapshot, {initial.id}, epsilon)
        steps = [SimulationStep(active_states=ordered_states(snapshot, current), remaining_input=input_str)]
        position = 0

        while position < len(input_str):
            candidates = [
                (sym, t)
                for t in snapshot.transitions
                if isinstance(t, SymbolTransition) and t.src in current
                for sym in t.symbols
                if sym != epsilon
            ]
            match = longest_match(candidates, input_str, position)
            if match is None:
                break

            symbol, _ = match
            targets = {t.dst for sym, t in candidates if sym == symbol}
            current = epsilon_closure(snapshot, targets, epsilon)
            position += len(symbol)
            steps.append(SimulationStep(
                active_states=ordered_states(snapshot, current),
                remaining_input=input_str[position:],
                consumed_symbol=symbol,
            ))

        finals = ordered_states(snapshot, current)
        accepted = position == len(input_str) and any(snapshot.is_final(s) for s in current)
        return SimulationResult(tuple(steps), ACCEPTED if accepted else REJECTED, finals)

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        transitions, _, dropped = symbol_transitions(source, epsilon_to=EPSILON)
        snapshot = AutomatonSnapshot(
            kind="nfa",
            meta={"epsilon": EPSILON},
            states=copy_states(source),
            transitions=transitions,
        )
        return ConversionResult(snapshot, _payload_warnings(source, dropped))
