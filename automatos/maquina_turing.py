from typing import List, Optional

from automatos.base import (
    ACCEPTED,
    BLANK_SYMBOL,
    INCOMPLETE,
    MOVES,
    REJECTED,
    AutomatonConfig,
    AutomatonFactory,
    AutomatonSnapshot,
    Capabilities,
    ConversionResult,
    SimulationResult,
    SimulationStep,
    TuringTransition,
    rejected_without_start,
)
from automatos.conversao import copy_states, output_warnings, source_epsilon, symbols_of

DEFAULT_MAX_STEPS = 300


class TuringConfig(AutomatonConfig):
    kind = "turing"
    display_name = "Máquina de Turing"
    capabilities = Capabilities(supports_tape=True)
    default_meta = {"blank": BLANK_SYMBOL, "maxSteps": DEFAULT_MAX_STEPS}

    def validate_add_transition(self, snapshot, transition):
        """Determinística: no máximo uma transição por (estado, símbolo lido)."""
        if not isinstance(transition, TuringTransition):
            return None
        for tr in snapshot.transitions:
            if not isinstance(tr, TuringTransition) or tr.id == transition.id:
                continue
            if tr.src == transition.src and tr.read == transition.read:
                return f"Já existe transição lendo '{transition.read}' a partir de {transition.src}."
        return None

    def normalize_transition(self, transition, meta=None):
        if not isinstance(transition, TuringTransition):
            return transition
        blank = (meta or {}).get("blank") or BLANK_SYMBOL
        return TuringTransition(
            transition.id, transition.src, transition.dst,
            read=transition.read.strip() or blank,
            write=transition.write.strip() or blank,
            move=transition.move.strip().upper() or "S",
        )

    def format_transition_label(self, transition) -> str:
        if not isinstance(transition, TuringTransition):
            return ""
        return f"{transition.read}/{transition.write},{transition.move}"

    def transition_from_label(self, transition_id, src, dst, label):
        """Formato: 'lido/escrito, direção' (ex: a/b, R). Campos vazios valem branco."""
        try:
            read, rest = label.split("/", 1)
            write, move = rest.split(",", 1)
        except ValueError:
            raise ValueError("Formato inválido. Use 'lido/escrito, direção' (ex: a/b, R).")
        transition = self.normalize_transition(TuringTransition(transition_id, src, dst, read, write, move))
        if transition.move not in MOVES:
            raise ValueError("Direção deve ser 'L', 'R' ou 'S'.")
        return transition


class TuringFactory(AutomatonFactory):
    config = TuringConfig()

    def _find_transition(self, snapshot: AutomatonSnapshot, state: str, symbol: str) -> Optional[TuringTransition]:
        for t in snapshot.transitions:
            if isinstance(t, TuringTransition) and t.src == state and t.read == symbol:
                return t
        return None

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        """
        Simula a máquina de fita única.

        Ler fora da fita devolve o símbolo branco sem estendê-la; a fita só
        cresce quando um símbolo diferente do branco é escrito além do fim.
        """
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        blank = self.meta_value(snapshot, "blank")
        max_steps = self.meta_value(snapshot, "maxSteps") or DEFAULT_MAX_STEPS
        tape: List[str] = list(input_str)
        head = 0
        state = initial.id

        steps = [SimulationStep(current_state=state, tape=tuple(tape), head_position=head)]

        for _ in range(max_steps):
            symbol = tape[head] if head < len(tape) else blank
            transition = self._find_transition(snapshot, state, symbol)
            if transition is None:
                status = ACCEPTED if snapshot.is_final(state) else REJECTED
                return SimulationResult(tuple(steps), status, (state,))

            if head < len(tape):
                tape[head] = transition.write
            elif transition.write != blank:
                tape.extend([blank] * (head - len(tape)))
                tape.append(transition.write)

            if transition.move == "R":
                head += 1
            elif transition.move == "L":
                head = max(0, head - 1)

            state = transition.dst
            steps.append(SimulationStep(
                current_state=state,
                tape=tuple(tape),
                head_position=head,
                consumed_symbol=symbol,
            ))

            if snapshot.is_final(state):
                return SimulationResult(tuple(steps), ACCEPTED, (state,))

        return SimulationResult(tuple(steps), INCOMPLETE, (state,))

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        if source.kind == "turing":
            return ConversionResult(source.copy(), [])

        epsilon = source_epsilon(source)
        transitions = []
        skipped_epsilon = 0
        for t in source.transitions:
            symbols = [s for s in symbols_of(t) if s and s != epsilon]
            if not symbols:
                if epsilon in symbols_of(t):
                    skipped_epsilon += 1
                continue
            transitions.append(TuringTransition(t.id, t.src, t.dst, read=symbols[0], write=symbols[0], move="S"))

        snapshot = AutomatonSnapshot(
            kind="turing",
            meta=dict(self.config.default_meta),
            states=copy_states(source),
            transitions=transitions,
        )
        warnings = ["Movimentos convertidos como S (parado) e escrito = lido. Ajuste manualmente."]
        warnings.extend(output_warnings(source))
        if skipped_epsilon:
            warnings.append(f"{skipped_epsilon} transição(ões) ε descartada(s): a fita não tem leitura vazia.")
        return ConversionResult(snapshot, warnings)
