from typing import Dict, List, Tuple

from automatos.automato import DfaFactory, NfaFactory
from automatos.base import AutomatonFactory
from automatos.maquina_mealy import MealyFactory
from automatos.maquina_moore import MooreFactory
from automatos.maquina_turing import TuringFactory
from automatos.pilha import PdaFactory

_factories: Dict[str, AutomatonFactory] = {}


def register_automaton_factory(factory: AutomatonFactory):
    """Registra um novo tipo de autômato sem alterar as fábricas existentes."""
    _factories[factory.config.kind] = factory


def get_automaton_factory(kind: str) -> AutomatonFactory:
    factory = _factories.get(kind)
    if factory is None:
        raise ValueError(f"Tipo de autômato não registrado: {kind}")
    return factory


def list_automaton_types() -> List[Tuple[str, str]]:
    """Lista (tipo, nome de exibição) de cada tipo registrado."""
    return [(f.config.kind, f.config.display_name) for f in _factories.values()]


for _factory in (DfaFactory(), NfaFactory(), MealyFactory(), MooreFactory(), PdaFactory(), TuringFactory()):
    register_automaton_factory(_factory)
