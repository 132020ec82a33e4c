"""
src/hash_core/utils.py
Utilidades de bajo nivel para tablas de slots.
"""
from typing import Any, MutableMapping, Mapping


def extend(target: MutableMapping[str, Any], *sources: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Copia superficial (shallow merge).
    Vuelca cada entrada de cada `source` sobre `target`, en orden, y retorna `target`.
    Los valores NO se copian: quedan compartidos entre origen y destino.
    """
    for source in sources:
        if source is None:
            continue
        for key, value in source.items():
            target[key] = value
    return target
