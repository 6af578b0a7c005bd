from collections import deque
from typing import List, Tuple

from automatos.base import (
    ACCEPTED,
    EPSILON,
    INCOMPLETE,
    REJECTED,
    STACK_BOTTOM,
    AutomatonConfig,
    AutomatonFactory,
    AutomatonSnapshot,
    Capabilities,
    ConversionResult,
    PdaTransition,
    SimulationResult,
    SimulationStep,
    rejected_without_start,
)
from automatos.conversao import copy_states, output_warnings, source_epsilon, symbols_of

DEFAULT_MAX_DEPTH = 500

LABEL_ARROWS = ("→", "->")


class PdaConfig(AutomatonConfig):
    kind = "pda"
    display_name = "AP (Autômato de Pilha)"
    capabilities = Capabilities(supports_epsilon=True, supports_nondeterminism=True, supports_stack=True)
    default_meta = {
        "initialStackSymbol": STACK_BOTTOM,
        "epsilon": EPSILON,
        "maxDepth": DEFAULT_MAX_DEPTH,
        "acceptanceMode": "final",
    }

    def normalize_transition(self, transition, meta=None):
        if not isinstance(transition, PdaTransition):
            return transition
        epsilon = (meta or {}).get("epsilon") or EPSILON
        return PdaTransition(
            transition.id, transition.src, transition.dst,
            read=transition.read.strip() or epsilon,
            pop=transition.pop.strip() or epsilon,
            push=transition.push.strip() or epsilon,
        )

    def format_transition_label(self, transition) -> str:
        if not isinstance(transition, PdaTransition):
            return ""
        return f"{transition.read}, {transition.pop} → {transition.push}"

    def transition_from_label(self, transition_id, src, dst, label):
        """Formato: 'lido, desempilha → empilha' (ex: a, $ → A$). Campos vazios valem ε."""
        for arrow in LABEL_ARROWS:
            if arrow in label:
                left, push = label.split(arrow, 1)
                break
        else:
            raise ValueError("Formato inválido. Use 'lido, desempilha → empilha' (ex: a, $ → A$).")
        if "," not in left:
            raise ValueError("Separe o símbolo lido e o desempilhado por vírgula.")
        read, pop = left.split(",", 1)
        return self.normalize_transition(PdaTransition(transition_id, src, dst, read, pop, push))


def push_onto(stack: Tuple[str, ...], push: str, epsilon: str) -> Tuple[str, ...]:
    """Empilha a cadeia da direita para a esquerda: o primeiro caractere fica no topo."""
    if push == epsilon:
        return stack
    return stack + tuple(reversed([ch for ch in push if ch != epsilon]))


class PdaFactory(AutomatonFactory):
    config = PdaConfig()

    def _accepts(self, snapshot, state: str, stack: Tuple[str, ...], mode: str, bottom: str) -> bool:
        if mode == "empty-stack":
            return len(stack) == 0 or stack == (bottom,)
        return snapshot.is_final(state)

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        """
        Busca em largura sobre as configurações (estado, posição, pilha).

        Retorna o primeiro ramo que aceita; 'incomplete' se algum ramo passar de
        maxDepth passos; caso a fila esvazie, o caminho do último ramo visitado
        é retornado como rejeitado.
        """
        initial = snapshot.initial_state()
        if initial is None:
            return rejected_without_start()

        epsilon = self.meta_value(snapshot, "epsilon")
        bottom = self.meta_value(snapshot, "initialStackSymbol")
        max_depth = self.meta_value(snapshot, "maxDepth") or DEFAULT_MAX_DEPTH
        mode = self.meta_value(snapshot, "acceptanceMode")

        transitions: List[PdaTransition] = [t for t in snapshot.transitions if isinstance(t, PdaTransition)]
        # leituras mais longas primeiro; a ordem de declaração desempata
        transitions.sort(key=lambda t: -len(t.read) if t.read != epsilon else 0)

        start_stack = (bottom,)
        first = SimulationStep(
            current_state=initial.id,
            active_states=(initial.id,),
            remaining_input=input_str,
            stack=start_stack,
        )
        queue = deque([(initial.id, 0, start_stack, (first,))])
        visited = set()
        last = None

        while queue:
            state, index, stack, path = queue.popleft()
            last = (state, path)

            if len(path) > max_depth:
                return SimulationResult(path, INCOMPLETE, (state,))

            if index == len(input_str) and self._accepts(snapshot, state, stack, mode, bottom):
                return SimulationResult(path, ACCEPTED, (state,), "")

            key = (state, index, stack)
            if key in visited:
                continue
            visited.add(key)

            top = stack[-1] if stack else None
            for t in transitions:
                if t.src != state:
                    continue
                if t.read != epsilon and not input_str.startswith(t.read, index):
                    continue
                if t.pop != epsilon and top != t.pop:
                    continue

                new_stack = stack[:-1] if t.pop != epsilon else stack
                new_stack = push_onto(new_stack, t.push, epsilon)
                new_index = index if t.read == epsilon else index + len(t.read)

                step = SimulationStep(
                    current_state=t.dst,
                    active_states=(t.dst,),
                    remaining_input=input_str[new_index:],
                    consumed_symbol=None if t.read == epsilon else t.read,
                    stack=new_stack,
                )
                queue.append((t.dst, new_index, new_stack, path + (step,)))

        state, path = last
        return SimulationResult(path, REJECTED, (state,))

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        if source.kind == "pda":
            return ConversionResult(source.copy(), [])

        source_eps = source_epsilon(source)
        transitions = []
        for t in source.transitions:
            symbols = [s for s in symbols_of(t) if s]
            read = symbols[0] if symbols and symbols[0] != source_eps else EPSILON
            transitions.append(PdaTransition(t.id, t.src, t.dst, read=read, pop=EPSILON, push=EPSILON))

        snapshot = AutomatonSnapshot(
            kind="pda",
            meta=dict(self.config.default_meta),
            states=copy_states(source),
            transitions=transitions,
        )
        warnings = ["Transições convertidas com desempilha/empilha ε. Ajuste manualmente."]
        warnings.extend(output_warnings(source))
        if any(len(symbols_of(t)) > 1 for t in source.transitions):
            warnings.append("Transições com vários símbolos mantiveram apenas o primeiro.")
        return ConversionResult(snapshot, warnings)
