"""
src/hash_core/ds/comparators.py
Tabla de Comparadores v1.0.
Enumeración cerrada de estrategias de orden para Hash.sort / Hash.sort_by.
"""
from enum import Enum
from typing import Any, Callable, Union

from ..sentinels import ABSENT

# Comparador clásico de dos argumentos: negativo / cero / positivo
CompareFn = Callable[[Any, Any], int]


def _missing(value: Any) -> bool:
    return value is None or value is ABSENT


def _cmp(a: Any, b: Any) -> int:
    """
    Orden natural (<, >).
    None / ABSENT van detrás de cualquier valor presente; con los argumentos
    invertidos (DESC) quedan delante.
    """
    if _missing(a) or _missing(b):
        return _missing(a) - _missing(b)
    return (a > b) - (a < b)


# =============================================================================
# ESTRATEGIAS SOBRE ENTRADAS (Entry.key / Entry.value)
# =============================================================================

def key_ascending(a, b) -> int:
    return _cmp(str(a.key), str(b.key))


def key_descending(a, b) -> int:
    return _cmp(str(b.key), str(a.key))


def value_ascending(a, b) -> int:
    # Solo definido para valores directamente comparables (no objetos)
    return _cmp(a.value, b.value)


def value_descending(a, b) -> int:
    return _cmp(b.value, a.value)


class Comparator(Enum):
    """
    Criterios con nombre (case-insensitive al resolver desde str):
    - KASC: clave ascendente (default de sort)
    - KDESC: clave descendente
    - ASC: valor ascendente
    - DESC: valor descendente
    """
    KASC = "kasc"
    KDESC = "kdesc"
    ASC = "asc"
    DESC = "desc"

    def compare(self, a, b) -> int:
        return _ENTRY_STRATEGIES[self](a, b)

    def compare_values(self, a: Any, b: Any) -> int:
        """Variante para valores ya resueltos (sort_by). Solo ASC / DESC."""
        if self is Comparator.ASC:
            return _cmp(a, b)
        if self is Comparator.DESC:
            return _cmp(b, a)
        raise ValueError(f"{self.name} no aplica a valores resueltos por ruta")

    @classmethod
    def from_name(cls, name: str) -> "Comparator":
        try:
            return cls(name.lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Comparador desconocido: {name!r} (válidos: {valid})") from None


_ENTRY_STRATEGIES = {
    Comparator.KASC: key_ascending,
    Comparator.KDESC: key_descending,
    Comparator.ASC: value_ascending,
    Comparator.DESC: value_descending,
}

# Criterios admitidos por sort_by (sobre el valor resuelto en la ruta)
PATH_ORDERS = (Comparator.ASC, Comparator.DESC)


def resolve(criterion: Union[str, Comparator, CompareFn]) -> CompareFn:
    """
    Criterio de sort() -> función de comparación sobre Entries.
    str desconocido -> ValueError. Tipo no soportado -> TypeError.
    """
    if isinstance(criterion, Comparator):
        return criterion.compare
    if isinstance(criterion, str):
        return Comparator.from_name(criterion).compare
    if callable(criterion):
        return criterion
    raise TypeError(f"Criterio de orden no soportado: {type(criterion).__name__}")


def resolve_path_order(criterion: Union[str, Comparator, CompareFn]) -> CompareFn:
    """
    Criterio de sort_by() -> función de comparación sobre valores resueltos.
    Solo 'asc' / 'desc' o un callable propio.
    """
    if isinstance(criterion, str):
        criterion = Comparator.from_name(criterion)
    if isinstance(criterion, Comparator):
        if criterion not in PATH_ORDERS:
            raise ValueError(f"sort_by solo admite asc/desc, recibido {criterion.value!r}")
        return criterion.compare_values
    if callable(criterion):
        return criterion
    raise TypeError(f"Criterio de orden no soportado: {type(criterion).__name__}")
