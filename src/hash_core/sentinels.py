"""
src/hash_core/sentinels.py
Marcador de Ausencia (Tombstone).
Distingue "slot borrado / nunca escrito" de un valor None legítimo.
"""


class _Absent:
    """
    Singleton inmutable.
    Es falsy y solo es igual a sí mismo (ABSENT != None).
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self):
        return "ABSENT"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


def is_absent(value) -> bool:
    """Identidad estricta: nunca por igualdad ni por truthiness."""
    return value is ABSENT
