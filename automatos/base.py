import copy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union

EPSILON = "ε"
STACK_BOTTOM = "$"
BLANK_SYMBOL = "_"

ACCEPTED = "accepted"
REJECTED = "rejected"
TRANSDUCED = "transduced"
INCOMPLETE = "incomplete"

MOVES = ("L", "R", "S")


@dataclass
class State:
    id: str
    label: str
    x: float = 0
    y: float = 0
    is_initial: bool = False
    is_final: bool = False
    output: Optional[str] = None


@dataclass
class SymbolTransition:
    """Transição por conjunto de símbolos (AFD, AFN e Moore)."""
    id: str
    src: str
    dst: str
    symbols: List[str] = field(default_factory=list)


@dataclass
class MealyPair:
    input: str
    output: str = ""


@dataclass
class MealyTransition:
    id: str
    src: str
    dst: str
    pairs: List[MealyPair] = field(default_factory=list)


@dataclass
class PdaTransition:
    """
    Transição de autômato de pilha.
    - read: símbolo lido da entrada (ou ε).
    - pop: símbolo desempilhado (ou ε).
    - push: cadeia empilhada (ou ε). O primeiro caractere fica no topo.
    """
    id: str
    src: str
    dst: str
    read: str = EPSILON
    pop: str = EPSILON
    push: str = EPSILON


@dataclass
class TuringTransition:
    id: str
    src: str
    dst: str
    read: str = BLANK_SYMBOL
    write: str = BLANK_SYMBOL
    move: str = "S"


Transition = Union[SymbolTransition, MealyTransition, PdaTransition, TuringTransition]


@dataclass
class AutomatonSnapshot:
    """Estado completo e serializável de um autômato (estados + transições + meta)."""
    kind: str
    meta: Dict[str, Any] = field(default_factory=dict)
    states: List[State] = field(default_factory=list)
    transitions: List[Transition] = field(default_factory=list)

    def initial_state(self) -> Optional[State]:
        """Primeiro estado marcado como inicial (None se não houver)."""
        return next((s for s in self.states if s.is_initial), None)

    def state(self, state_id: str) -> Optional[State]:
        return next((s for s in self.states if s.id == state_id), None)

    def is_final(self, state_id: str) -> bool:
        st = self.state(state_id)
        return bool(st and st.is_final)

    def transitions_from(self, state_id: str) -> List[Transition]:
        return [t for t in self.transitions if t.src == state_id]

    def copy(self) -> "AutomatonSnapshot":
        """Cópia profunda; edições devem operar sobre a cópia."""
        return copy.deepcopy(self)


@dataclass(frozen=True)
class SimulationStep:
    current_state: Optional[str] = None
    active_states: Optional[Tuple[str, ...]] = None
    remaining_input: Optional[str] = None
    consumed_symbol: Optional[str] = None
    produced_output: Optional[str] = None
    cumulative_output: Optional[str] = None
    stack: Optional[Tuple[str, ...]] = None
    tape: Optional[Tuple[str, ...]] = None
    head_position: Optional[int] = None


@dataclass(frozen=True)
class SimulationResult:
    steps: Tuple[SimulationStep, ...]
    status: str
    final_states: Tuple[str, ...] = ()
    output_trace: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status == ACCEPTED

    @property
    def last_step(self) -> Optional[SimulationStep]:
        return self.steps[-1] if self.steps else None


def rejected_without_start() -> SimulationResult:
    """Resultado de um autômato sem estado inicial: rejeição imediata, sem passos."""
    return SimulationResult(steps=(), status=REJECTED)


@dataclass(frozen=True)
class Capabilities:
    supports_output_per_transition: bool = False
    supports_output_per_state: bool = False
    supports_epsilon: bool = False
    supports_nondeterminism: bool = False
    supports_stack: bool = False
    supports_tape: bool = False
    supports_recognition_mode: bool = False


@dataclass
class ConversionResult:
    snapshot: AutomatonSnapshot
    warnings: List[str] = field(default_factory=list)


class AutomatonConfig:
    """
    Configuração de um tipo de autômato: validação, normalização,
    formatação de rótulos e criação de estados.
    """
    kind: str = ""
    display_name: str = ""
    capabilities: Capabilities = Capabilities()
    default_meta: Dict[str, Any] = {}

    def validate_add_transition(self, snapshot: AutomatonSnapshot, transition: Transition) -> Optional[str]:
        """Retorna uma mensagem de erro se a transição violar as regras do tipo, ou None."""
        return None

    def normalize_transition(self, transition: Transition, meta: Optional[Dict[str, Any]] = None) -> Transition:
        return replace(transition)

    def format_transition_label(self, transition: Transition) -> str:
        return ""

    def transition_from_label(self, transition_id: str, src: str, dst: str, label: str) -> Transition:
        """Interpreta um rótulo digitado no editor. Lança ValueError se malformado."""
        raise ValueError(f"Rótulos não suportados para '{self.kind}'.")

    def create_state(self, index: int, x: float, y: float) -> State:
        return State(id=f"q{index}", label=f"q{index}", x=x, y=y,
                     is_initial=(index == 0), is_final=False)


class AutomatonFactory:
    """Ponto de entrada de um tipo de autômato: configuração, criação, simulação e conversão."""
    config: AutomatonConfig

    def create_empty(self) -> AutomatonSnapshot:
        return AutomatonSnapshot(kind=self.config.kind, meta=copy.deepcopy(self.config.default_meta))

    def simulate(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        raise NotImplementedError

    def convert_from(self, source: AutomatonSnapshot) -> ConversionResult:
        raise NotImplementedError(f"Conversão para '{self.config.kind}' não suportada.")

    def meta_value(self, snapshot: AutomatonSnapshot, key: str) -> Any:
        """Valor de meta do snapshot, caindo para o padrão do tipo quando ausente ou vazio."""
        value = (snapshot.meta or {}).get(key)
        if value is None or value == "":
            return self.config.default_meta.get(key)
        return value


def recognition_mode(meta: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Normaliza o modo de reconhecimento de Mealy/Moore.

    False/ausente -> None (transdutor puro), "consumption" -> "consumption",
    "final" ou True -> "final". Valores desconhecidos contam como transdutor.
    """
    mode = (meta or {}).get("recognitionMode", False)
    if mode is True or mode == "final":
        return "final"
    if mode == "consumption":
        return "consumption"
    return None


def recognition_status(mode: Optional[str], consumed_all: bool, in_final: bool) -> str:
    if mode is None:
        return TRANSDUCED
    if mode == "consumption":
        return ACCEPTED if consumed_all else REJECTED
    return ACCEPTED if consumed_all and in_final else REJECTED


def clean_symbols(symbols: List[str]) -> List[str]:
    """Remove espaços, vazios e duplicatas (mantendo a primeira ocorrência)."""
    cleaned: List[str] = []
    for sym in symbols:
        sym = sym.strip()
        if sym and sym not in cleaned:
            cleaned.append(sym)
    return cleaned


def split_label(label: str, sep: str = ",") -> List[str]:
    return [part.strip() for part in label.split(sep) if part.strip()]
