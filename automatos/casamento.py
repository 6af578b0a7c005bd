from typing import Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")


def longest_match(candidates: Iterable[Tuple[str, T]], text: str, position: int = 0) -> Optional[Tuple[str, T]]:
    """
    Casamento guloso: entre os pares (símbolo, item), retorna o de maior símbolo
    que casa com `text` a partir de `position`. Empates ficam com o primeiro visto.
    Símbolos vazios nunca casam.
    """
    best: Optional[Tuple[str, T]] = None
    for symbol, item in candidates:
        if not symbol or not text.startswith(symbol, position):
            continue
        if best is None or len(symbol) > len(best[0]):
            best = (symbol, item)
    return best
