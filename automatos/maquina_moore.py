from automatos.automato import SymbolConfig, symbol_transitions, symbol_candidates, symbol_conflict
from automatos.base import (
    AutomatonFactory,
    AutomatonSnapshot,
    Capabilities,
    ConversionResult,
    SimulationResult,
    SimulationStep,
    State,
    recognition_mode,
    recognition_status,
    rejected_without_start,
)
from automatos.casamento import longest_match
from automatos.conversao import copy_states


class MooreConfig(SymbolConfig):
    kind = "moore"
    display_name = "Máquina de Moore"
    capabilities = Capabilities(supports_output_per_state=True, supports_recognition_mode=True)
    default_meta = {"recognitionMode": False}

    def validate_add_transition(self, snapshot, transition):
        return symbol_conflict(snapshot, transition)

    def create_state(self, index: int, x: float, y: float) -> State:
        state = super().create_state(index, x, y)
        state.output = ""
        return state


class MooreFactory(AutomatonFactory):
    config = MooreConfig()

    def _output_of(self, snapshot: AutomatonSnapshot, state_id: str) -> str:
        state = snapshot.state(state_id)
        return (state.output or "") if state else ""

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        """
        A saída de Moore é emitida ao entrar em um estado; a saída acumulada
        começa com a saída do estado inicial, antes de qualquer símbolo.
        """
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        current = initial.id
        output = initial.output or ""
        position = 0
        steps = [SimulationStep(current_state=current, remaining_input=input_str, cumulative_output=output)]

        while position < len(input_str):
            match = longest_match(symbol_candidates(snapshot, current), input_str, position)
            if match is None:
                break

            symbol, transition = match
            current = transition.dst
            produced = self._output_of(snapshot, current)
            output += produced
            position += len(symbol)
            steps.append(SimulationStep(
                current_state=current,
                remaining_input=input_str[position:],
                consumed_symbol=symbol,
                produced_output=produced,
                cumulative_output=output,
            ))

        status = recognition_status(
            recognition_mode(snapshot.meta),
            consumed_all=(position == len(input_str)),
            in_final=snapshot.is_final(current),
        )
        return SimulationResult(tuple(steps), status, (current,), output)

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        if source.kind == "moore":
            return ConversionResult(source.copy(), [])

        transitions, _, dropped = symbol_transitions(source, epsilon_to=None)
        snapshot = AutomatonSnapshot(
            kind="moore",
            meta={"recognitionMode": False},
            states=copy_states(source, clear_final=True, default_output=""),
            transitions=transitions,
        )
        warnings = ["Saídas dos estados inicializadas como vazias e estados finais removidos."]
        if dropped:
            warnings.append(f"{dropped} transição(ões) sem símbolo descartada(s).")
        return ConversionResult(snapshot, warnings)
