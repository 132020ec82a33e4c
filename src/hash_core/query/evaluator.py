"""
src/hash_core/query/evaluator.py
Evaluador de Queries declarativas (estilo MongoDB / filtr).
Compila un documento de query a un árbol de predicados y lo aplica
a una secuencia ordenada de sujetos, devolviendo un vector paralelo de bool.

Ejemplos:
    Query({'$lt': 1000}).test([5, 5000])            -> [True, False]
    Query({'stats.age': {'$gte': 18}}).matches(doc)  -> bool
    Query({'$or': [{'a': 1}, {'b': {'$exists': True}}]})
"""
import logging
import operator
import re
from numbers import Number
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

from ..sentinels import ABSENT
from .paths import get_path

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _ordered(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(subject, operand):
        if subject is ABSENT or subject is None:
            return False
        try:
            return bool(op(subject, operand))
        except TypeError:
            # Tipos no comparables (ej: str < int): el test no pasa.
            return False
    return compare


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Number):
        return "number"
    if isinstance(value, str):
        return "string"
    if _is_list(value):
        return "array"
    return "object"


def _op_in(subject, operand):
    if _is_list(subject):
        return any(item in operand for item in subject)
    return subject is not ABSENT and subject in operand


def _op_all(subject, operand):
    if not _is_list(subject):
        return False
    return all(item in subject for item in operand)


def _op_mod(subject, operand):
    divisor, remainder = operand
    if isinstance(subject, bool) or not isinstance(subject, Number):
        return False
    return subject % divisor == remainder


def _op_size(subject, operand):
    return _is_list(subject) and len(subject) == operand


def _op_regex(subject, operand):
    if not isinstance(subject, str):
        return False
    pattern = operand if isinstance(operand, re.Pattern) else re.compile(operand)
    return pattern.search(subject) is not None


# Tabla de operadores escalares: nombre -> f(sujeto, operando)
COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq":     lambda s, o: s is not ABSENT and s == o,
    "$ne":     lambda s, o: s is ABSENT or s != o,
    "$gt":     _ordered(operator.gt),
    "$gte":    _ordered(operator.ge),
    "$lt":     _ordered(operator.lt),
    "$lte":    _ordered(operator.le),
    "$in":     _op_in,
    "$nin":    lambda s, o: not _op_in(s, o),
    "$all":    _op_all,
    "$mod":    _op_mod,
    "$size":   _op_size,
    "$type":   lambda s, o: s is not ABSENT and _type_name(s) == o,
    "$regex":  _op_regex,
    "$exists": lambda s, o: (s is not ABSENT) == bool(o),
}

LOGICAL = ("$and", "$or", "$nor")


class Query:
    """
    Query compilada.
    La compilación valida todos los operadores: uno desconocido -> ValueError.
    """
    __slots__ = ('_source', '_predicate')

    def __init__(self, query: Any):
        self._source = query
        self._predicate = self._compile(query)
        logger.debug("Query compiled: %r", query)

    @property
    def source(self) -> Any:
        return self._source

    # --- API pública ---

    def matches(self, subject: Any) -> bool:
        return self._predicate(subject)

    def test(self, subjects: Iterable[Any]) -> List[bool]:
        """Vector de pass/fail paralelo a `subjects`."""
        return [self._predicate(subject) for subject in subjects]

    # --- Compilación ---

    @classmethod
    def _compile(cls, query: Any) -> Predicate:
        if not isinstance(query, Mapping):
            return lambda subject: subject is not ABSENT and subject == query

        predicates = [cls._compile_clause(key, value) for key, value in query.items()]
        return lambda subject: all(p(subject) for p in predicates)

    @classmethod
    def _compile_clause(cls, key: str, value: Any) -> Predicate:
        if key in LOGICAL:
            if not _is_list(value):
                raise ValueError(f"{key} requiere una lista de queries")
            parts = [cls._compile(q) for q in value]
            if key == "$and":
                return lambda subject: all(p(subject) for p in parts)
            if key == "$or":
                return lambda subject: any(p(subject) for p in parts)
            return lambda subject: not any(p(subject) for p in parts)

        if key.startswith("$"):
            return cls._compile_operators({key: value})

        # Clave normal: ruta con puntos dentro del sujeto
        inner = cls._compile_field(value)
        return lambda subject: inner(get_path(subject, key, ABSENT))

    @classmethod
    def _compile_field(cls, value: Any) -> Predicate:
        if isinstance(value, Mapping) and value and all(str(k).startswith("$") for k in value):
            return cls._compile_operators(value)
        # Literal: igualdad
        return lambda subject: subject is not ABSENT and subject == value

    @classmethod
    def _compile_operators(cls, ops: Mapping[str, Any]) -> Predicate:
        checks = []
        for name, operand in ops.items():
            if name == "$not":
                inner = cls._compile_field(operand)
                checks.append(lambda s, inner=inner: not inner(s))
                continue
            if name in LOGICAL:
                checks.append(cls._compile_clause(name, operand))
                continue
            fn = COMPARATORS.get(name)
            if fn is None:
                raise ValueError(f"Operador de query desconocido: {name}")
            checks.append(lambda s, fn=fn, operand=operand: fn(s, operand))
        return lambda subject: all(check(subject) for check in checks)

    def __repr__(self):
        return f"Query({self._source!r})"


def evaluate(query: Any, subjects: Iterable[Any]) -> List[bool]:
    """Atajo funcional: Query(query).test(subjects)."""
    return Query(query).test(subjects)
