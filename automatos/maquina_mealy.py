from typing import Dict, List

from automatos.base import (
    AutomatonConfig,
    AutomatonFactory,
    AutomatonSnapshot,
    Capabilities,
    ConversionResult,
    MealyPair,
    MealyTransition,
    SimulationResult,
    SimulationStep,
    recognition_mode,
    recognition_status,
    rejected_without_start,
    split_label,
)
from automatos.casamento import longest_match
from automatos.conversao import copy_states, source_epsilon, symbols_of


class MealyConfig(AutomatonConfig):
    kind = "mealy"
    display_name = "Máquina de Mealy"
    capabilities = Capabilities(supports_output_per_transition=True, supports_recognition_mode=True)
    default_meta = {"recognitionMode": False}

    def validate_add_transition(self, snapshot, transition):
        """
        Dois símbolos de entrada a partir do mesmo estado não podem ser iguais
        nem prefixo um do outro (o casamento guloso ficaria ambíguo).
        """
        if not isinstance(transition, MealyTransition):
            return None
        for pair in transition.pairs:
            for tr in snapshot.transitions:
                if not isinstance(tr, MealyTransition) or tr.id == transition.id or tr.src != transition.src:
                    continue
                for other in tr.pairs:
                    a, b = pair.input, other.input
                    if a == b:
                        return f"Símbolo '{a}' já usado a partir de {transition.src} (conflito com '{b}')."
                    if a.startswith(b) or b.startswith(a):
                        return f"Símbolos '{a}' e '{b}' são prefixo um do outro a partir de {transition.src}."
        return None

    def normalize_transition(self, transition, meta=None):
        if not isinstance(transition, MealyTransition):
            return transition
        outputs: Dict[str, str] = {}
        for pair in transition.pairs:
            inp = pair.input.strip()
            if inp:
                outputs[inp] = (pair.output or "").strip()
        pairs = [MealyPair(i, o) for i, o in outputs.items()]
        return MealyTransition(transition.id, transition.src, transition.dst, pairs)

    def format_transition_label(self, transition) -> str:
        if not isinstance(transition, MealyTransition):
            return ""
        return ", ".join(f"{p.input}/{p.output}" for p in transition.pairs)

    def transition_from_label(self, transition_id, src, dst, label):
        pairs: List[MealyPair] = []
        for part in split_label(label):
            if "/" not in part:
                raise ValueError(f"Par '{part}' inválido. Use 'entrada/saída' (ex: a/x, b/y).")
            inp, out = part.split("/", 1)
            pairs.append(MealyPair(inp, out))
        if not pairs:
            raise ValueError("Informe ao menos um par 'entrada/saída'.")
        return self.normalize_transition(MealyTransition(transition_id, src, dst, pairs))


class MealyFactory(AutomatonFactory):
    config = MealyConfig()

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        """
        Simula a máquina de Mealy com casamento guloso sobre as entradas dos pares.
        Cada par casado acrescenta sua saída à saída acumulada.
        """
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        current = initial.id
        output = ""
        position = 0
        steps = [SimulationStep(current_state=current, remaining_input=input_str, cumulative_output=output)]

        while position < len(input_str):
            candidates = [
                (pair.input, (t, pair))
                for t in snapshot.transitions
                if isinstance(t, MealyTransition) and t.src == current
                for pair in t.pairs
            ]
            match = longest_match(candidates, input_str, position)
            if match is None:
                break

            symbol, (transition, pair) = match
            output += pair.output
            position += len(symbol)
            current = transition.dst
            steps.append(SimulationStep(
                current_state=current,
                remaining_input=input_str[position:],
                consumed_symbol=symbol,
                produced_output=pair.output,
                cumulative_output=output,
            ))

        status = recognition_status(
            recognition_mode(snapshot.meta),
            consumed_all=(position == len(input_str)),
            in_final=snapshot.is_final(current),
        )
        return SimulationResult(tuple(steps), status, (current,), output)

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        if source.kind == "mealy":
            snapshot = source.copy()
            return ConversionResult(snapshot, [])

        epsilon = source_epsilon(source)
        transitions = []
        for t in source.transitions:
            pairs = [MealyPair(sym, "") for sym in symbols_of(t) if sym and sym != epsilon]
            transitions.append(self.config.normalize_transition(MealyTransition(t.id, t.src, t.dst, pairs)))

        snapshot = AutomatonSnapshot(
            kind="mealy",
            meta={"recognitionMode": False},
            states=copy_states(source, clear_final=True),
            transitions=transitions,
        )
        warnings = ["Saídas inicializadas como vazias e modo de reconhecimento desativado (edite depois)."]
        return ConversionResult(snapshot, warnings)
