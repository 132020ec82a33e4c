"""
src/hash_core/options.py
Configuración del contenedor Hash.
Registro inmutable de opciones + constantes por defecto.
"""
import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)

# Criterio de orden por defecto para sort() y sort_by()
DEFAULT_SORT = "kasc"
DEFAULT_SORT_BY = "asc"

# Máximo de entradas mostradas por __repr__ (Safety limit para logs)
REPR_LIMIT = 10

# Ortografía heredada (camelCase) -> nombre de campo
_LEGACY_NAMES = {
    "findRoot": "find_root",
}


@dataclass(frozen=True)
class HashOptions:
    """
    Opciones reconocidas por Hash.

    find_root: ruta con puntos ("stats.age") usada por find() para extraer
    de cada valor el sujeto sobre el que se evalúa la query.
    """
    find_root: Optional[str] = None

    @classmethod
    def coerce(cls, obj: Union[None, "HashOptions", Mapping[str, Any]]) -> "HashOptions":
        """
        Normaliza None, HashOptions o un mapping ({'findRoot': ...} o {'find_root': ...}).
        Claves desconocidas -> TypeError.
        """
        if obj is None:
            return DEFAULT_OPTIONS
        if isinstance(obj, HashOptions):
            return obj
        if not isinstance(obj, Mapping):
            raise TypeError(f"Options must be a mapping or HashOptions, got {type(obj).__name__}")

        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in obj.items():
            name = _LEGACY_NAMES.get(key, key)
            if name not in known:
                raise TypeError(f"Opción desconocida: {key!r}")
            kwargs[name] = value

        options = cls(**kwargs)
        logger.debug("Options coerced: %r", options)
        return options


DEFAULT_OPTIONS = HashOptions()
