"""
src/hash_core/query/paths.py
Resolución de rutas con puntos ("stats.age", "items[0].name").
Lectura pura: nunca modifica el objeto recorrido.
"""
import re
from typing import Any, List, Mapping, Sequence, Union

Segment = Union[str, int]

_TOKEN = re.compile(r"([^.\[\]]+)|\[(-?\d+)\]")


def split_path(path: str) -> List[Segment]:
    """
    'a.b[2].c' -> ['a', 'b', 2, 'c'].
    Los índices entre corchetes se devuelven como int.
    """
    segments: List[Segment] = []
    for name, index in _TOKEN.findall(path):
        if index:
            segments.append(int(index))
        else:
            segments.append(name)
    return segments


def _step(obj: Any, segment: Segment, missing: Any) -> Any:
    # Mapping: por clave. Secuencia: por índice. Resto: por atributo.
    if isinstance(obj, Mapping):
        if segment in obj:
            return obj[segment]
        return obj.get(str(segment), missing)

    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        if isinstance(segment, str):
            if not segment.lstrip("-").isdigit():
                return missing
            segment = int(segment)
        if -len(obj) <= segment < len(obj):
            return obj[segment]
        return missing

    if isinstance(segment, str) and not segment.startswith("_"):
        return getattr(obj, segment, missing)
    return missing


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """
    Retorna el valor anidado en `path` o `default` si algún tramo no se resuelve.
    Una ruta vacía devuelve el propio objeto.
    """
    missing = object()
    current = obj
    for segment in split_path(path):
        if current is None:
            return default
        current = _step(current, segment, missing)
        if current is missing:
            return default
    return current


def has_path(obj: Any, path: str) -> bool:
    """True si todos los tramos de `path` existen (aunque el valor final sea None)."""
    missing = object()
    return get_path(obj, path, missing) is not missing
