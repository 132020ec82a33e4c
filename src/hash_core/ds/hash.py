"""
src/hash_core/ds/hash.py
Estructura de Datos Ordenada: Hash (clave str -> valor opaco).
Versión 1.0: Tombstones + Index View + Álgebra Funcional.

Modelo de dos niveles:
- Tabla de slots (`_data`): dict en orden de inserción. `delete` escribe ABSENT
  en el slot (tombstone) sin retirarlo: O(1).
- Index View: secuencia de claves vivas, recalculada en cada acceso
  (keys, values, length, at, index). Sin caché.

Solo `clean()` y `sort()` compactan (O(N)).
"""
import logging
from functools import cmp_to_key
from numbers import Number
from types import MethodType
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, NamedTuple,
    Optional, Tuple, TypeVar, Union,
)

from ..options import DEFAULT_SORT, DEFAULT_SORT_BY, REPR_LIMIT, HashOptions
from ..query.evaluator import Query
from ..query.paths import get_path
from ..sentinels import ABSENT
from ..utils import extend
from .comparators import Comparator, CompareFn, resolve, resolve_path_order

logger = logging.getLogger(__name__)

H = TypeVar('H', bound='Hash')

# --- Contratos de callbacks ---
IterFn = Callable[[Any, str, int], Any]              # (value, key, index) -> Any
Emit = Callable[[str, Any], None]                    # (group_key, contribution)
MapFn = Callable[[str, Any, Emit], None]             # (key, value, emit)
ReduceFn = Callable[[str, List[Any]], Any]           # (group_key, contributions) -> aggregate
Criterion = Union[None, str, Comparator, CompareFn]


class Entry(NamedTuple):
    """Par {key, value} producido por to_array() y consumido por sort()."""
    key: str
    value: Any


def _key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def _bind(fn: Callable, context: Any) -> Callable:
    """Con contexto, el callback lo recibe como receptor (primer argumento)."""
    if context is None:
        return fn
    return MethodType(fn, context)


def _unpack(item: Any) -> Optional[Tuple[Any, Any]]:
    # Formas admitidas: Entry / tupla (key, value) / mapping {'key', 'value'}
    if isinstance(item, Mapping):
        if 'key' in item and 'value' in item:
            return item['key'], item['value']
        return None
    if isinstance(item, tuple) and len(item) == 2:
        return item[0], item[1]
    return None


class Hash:
    """
    Contenedor asociativo ordenado con acceso posicional.
    Todas las operaciones derivadas (clone, map, filter, find, map_reduce)
    devuelven instancias de la MISMA subclase con las mismas opciones.

    `keys`, `values` y `length` son propiedades, no métodos: Hash no es un
    Mapping y dict(h) falla. Usar dict(h.items()).
    """

    def __init__(self, values: Union[None, Mapping[Any, Any], 'Hash'] = None,
                 options: Union[None, HashOptions, Mapping[str, Any]] = None):
        self.options = HashOptions.coerce(options)
        self._data: Dict[str, Any] = {}

        if values is None:
            return
        if isinstance(values, Hash):
            values = dict(values.items())
        if not isinstance(values, Mapping):
            raise TypeError(f"Hash requiere un mapping, recibido {type(values).__name__}")
        for key, value in values.items():
            self.set(key, value)

    def _spawn(self: H, values: Optional[Mapping[str, Any]] = None) -> H:
        """Nuevo contenedor de mi propio tipo, con mis opciones."""
        return type(self)(values, self.options)

    # --- INDEX VIEW (derivada, sin caché) ---

    @property
    def keys(self) -> List[str]:
        return [key for key, value in self._data.items() if value is not ABSENT]

    @property
    def values(self) -> List[Any]:
        return [value for value in self._data.values() if value is not ABSENT]

    @property
    def length(self) -> int:
        return len(self.keys)

    # --- ACCESSORS ---

    def set(self: H, key: Any, value: Any) -> H:
        self._data[_key(key)] = value
        return self

    def get(self, key: Any) -> Any:
        """Slot crudo: ABSENT si fue borrado o nunca escrito."""
        return self._data.get(_key(key), ABSENT)

    def has(self, key: Any) -> bool:
        """
        True solo si la clave está viva.
        None es un valor vivo; los atributos del objeto nunca cuentan.
        """
        return self._data.get(_key(key), ABSENT) is not ABSENT

    def delete(self: H, key: Any) -> H:
        """
        Tombstone O(1): el slot permanece en la tabla con ABSENT.
        Sobre una clave nunca escrita también crea el slot (muerto); si luego
        se escribe, la clave ocupa esa posición en el orden de iteración.
        """
        self._data[_key(key)] = ABSENT
        return self

    def clone(self: H) -> H:
        copy = self._spawn()
        extend(copy._data, self._data)
        return copy

    def flush(self: H) -> H:
        logger.debug("flush: discarding %d slots", len(self._data))
        self._data = {}
        return self

    def clean(self: H) -> H:
        """Compactación: reconstruye la tabla solo con entradas vivas."""
        entries = self.to_array()
        dropped = len(self._data) - len(entries)
        self.flush().from_array(entries)
        logger.debug("clean: %d live entries, %d tombstones dropped", len(entries), dropped)
        return self

    def at(self, index: int) -> Any:
        keys = self.keys
        if isinstance(index, int) and 0 <= index < len(keys):
            return self._data[keys[index]]
        return ABSENT

    def index(self, key: Any) -> int:
        keys = self.keys
        key = _key(key)
        return keys.index(key) if key in keys else -1

    def to_array(self) -> List[Entry]:
        """Snapshot de las entradas vivas, en orden de iteración."""
        return [Entry(key, value) for key, value in self._data.items() if value is not ABSENT]

    def from_array(self: H, entries: Iterable[Any]) -> H:
        """
        Upsert de cada par. Se omiten entradas con valor ABSENT o mal formadas.
        """
        for item in entries:
            pair = _unpack(item)
            if pair is None:
                logger.debug("from_array: skipping malformed entry %r", item)
                continue
            key, value = pair
            if value is ABSENT:
                continue
            self.set(key, value)
        return self

    def items(self) -> List[Tuple[str, Any]]:
        return [(key, value) for key, value in self._data.items() if value is not ABSENT]

    # --- FUNCTIONAL API (High Order Functions) ---

    def each(self: H, iterator: IterFn, context: Any = None) -> H:
        """
        Llama iterator(value, key, index) por cada slot de la tabla,
        tombstones incluidos. Itera sobre un snapshot: el callback puede mutar.
        """
        fn = _bind(iterator, context)
        for index, (key, value) in enumerate(list(self._data.items())):
            fn(value, key, index)
        return self

    for_each = each

    def map(self: H, iterator: IterFn, context: Any = None) -> H:
        """
        Nuevo Hash con el resultado de iterator(value, key, index) para cada slot.
        Devolver ABSENT deja (o vuelve a dejar) el slot muerto.
        """
        data = extend({}, self._data)
        fn = _bind(iterator, context)
        for index, key in enumerate(list(data)):
            data[key] = fn(data[key], key, index)
        return self._spawn(data)

    def reduce(self, iterator: IterFn, initial: Any = None, context: Any = None) -> Any:
        """
        Acumulación aditiva: initial + Σ iterator(value, key, index).
        Si `initial` no es numérico, se interpreta como `context` y se parte de 0.
        """
        if initial is None:
            initial = 0
        elif isinstance(initial, bool) or not isinstance(initial, Number):
            context, initial = initial, 0

        result = initial
        fn = _bind(iterator, context)
        for index, (key, value) in enumerate(list(self._data.items())):
            result += fn(value, key, index)
        return result

    def map_reduce(self: H, map_fn: MapFn, reduce_fn: ReduceFn) -> H:
        """
        Agrupación en dos fases.
        1. map_fn(key, value, emit) por cada slot; emit(grupo, x) acumula x en grupo.
        2. reduce_fn(grupo, [x...]) por grupo, en orden de primera emisión.

        Los grupos son claves del Hash: emit(7, x) llega a reduce_fn como '7'.
        """
        groups = self._spawn()
        reduced = self._spawn()

        def emit(group: Any, contribution: Any) -> None:
            if groups.has(group):
                groups.get(group).append(contribution)
            else:
                groups.set(group, [contribution])

        for key, value in list(self._data.items()):
            map_fn(key, value, emit)

        for group, contributions in groups.items():
            reduced.set(group, reduce_fn(group, contributions))

        return reduced

    def filter(self: H, iterator: IterFn, context: Any = None) -> H:
        result = self._spawn()
        fn = _bind(iterator, context)
        for index, (key, value) in enumerate(list(self._data.items())):
            if fn(value, key, index):
                result.set(key, value)
        return result

    def find(self: H, query: Any) -> H:
        """
        Nuevo Hash con las entradas que pasan `query`.
        Con options.find_root, la query se evalúa sobre get_path(value, find_root).
        """
        compiled = Query(query)
        root = self.options.find_root
        slots = list(self._data.items())

        if root:
            subjects = [get_path(value, root, ABSENT) for _, value in slots]
        else:
            subjects = [value for _, value in slots]

        result = self._spawn()
        for (key, value), passed in zip(slots, compiled.test(subjects)):
            if passed:
                result.set(key, value)
        return result

    # --- ORDERING ---

    def sort(self: H, criterion: Criterion = None) -> H:
        """
        Orden in-place (y compactación implícita).

        criterion:
        - None: 'kasc'
        - 'kasc' | 'kdesc' | 'asc' | 'desc' (case-insensitive) o Comparator
        - callable(a: Entry, b: Entry) -> int

        Nombre desconocido -> ValueError.
        """
        compare = resolve(criterion or DEFAULT_SORT)
        entries = self.to_array()
        dropped = len(self._data) - len(entries)

        ordered = sorted(entries, key=cmp_to_key(compare))
        self.flush()
        self.from_array(ordered)
        logger.debug("sort: %d entries reordered, %d tombstones dropped", len(ordered), dropped)
        return self

    def sort_by(self: H, path: str, criterion: Criterion = None) -> H:
        """
        Ordena por el valor en `path` de cada entrada.
            hash.sort_by('stats.age', 'desc')
        Un callable recibe directamente los dos valores resueltos.
        """
        order = resolve_path_order(criterion or DEFAULT_SORT_BY)

        def compare(a: Entry, b: Entry) -> int:
            return order(get_path(a.value, path), get_path(b.value, path))

        return self.sort(compare)

    # --- PYTHON MAGIC METHODS ---

    def __len__(self) -> int:
        return self.length

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)

    def __getitem__(self, key: Any) -> Any:
        if not self.has(key):
            raise KeyError(f"Clave no encontrada: {key}")
        return self._data[_key(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: Any) -> None:
        self.delete(key)

    def __repr__(self):
        """Impresión segura. Trunca si es muy larga."""
        entries = self.to_array()
        items = [f"{e.key!r}: {e.value!r}" for e in entries[:REPR_LIMIT]]
        if len(entries) > REPR_LIMIT:
            items.append("...")
        return f"{type(self).__name__}{{{', '.join(items)}}}"


def create(values: Union[None, Mapping[Any, Any], Hash] = None,
           options: Union[None, HashOptions, Mapping[str, Any]] = None) -> Hash:
    """Factory: equivalente a Hash(values, options)."""
    return Hash(values, options)
