"""
Shared machinery for the lazy immutable collections.

Every collection starts either Unrealized (holding a deferred source) or
Realized (holding an immutable concrete structure). Realization happens at
most once, on the first operation that needs concrete structure, and the
source reference is dropped afterwards. ``map``/``filter``/``take_while``
return a new instance over a new deferred source and never force the
instance they are called on.
"""

import functools
import itertools
import logging
import numbers
from abc import ABC, abstractmethod
from collections.abc import Iterable

from models import CollectionSettings
from option import Some, Nothing

logger = logging.getLogger(__name__)

# Marks "no source held": either never given or released after realization
_NO_SOURCE = object()

_settings = CollectionSettings()


def configure(settings: CollectionSettings) -> None:
    """Install the settings used by every collection"""
    global _settings
    _settings = settings


def get_settings() -> CollectionSettings:
    return _settings


class EmptyCollectionError(ValueError):
    """Raised when head/tail/last/fold/reduce is used on an empty collection."""
    pass


class IndexOutOfRangeError(IndexError):
    """Raised when a positional index falls outside [0, length)."""
    pass


def numeric_sum(items, shape_name):
    """Sum items, refusing anything that is not a number"""
    total = 0
    for item in items:
        if not isinstance(item, numbers.Number):
            raise TypeError(f"{shape_name}.sum() needs numeric elements, got {type(item).__name__}")
        total += item
    return total


def flatten_items(items):
    """Yield the members of every nested iterable in items, one level deep"""
    for nested in items:
        if isinstance(nested, (str, bytes)) or not isinstance(nested, Iterable):
            raise TypeError(f"Cannot flatten element of type {type(nested).__name__}")
        yield from nested


class BaseCollection(ABC):
    """
    Base class for Sequence, Mapping and UniqueSet.

    Build with explicit elements (realized immediately) or with a deferred
    source, given either as ``source=`` or as a single positional raw
    structure the shape accepts (see ``_accepts_as_source``).
    """

    def __init__(self, *elements, source=_NO_SOURCE):
        self._content = None
        self._realized = False
        if source is not _NO_SOURCE:
            if elements:
                raise TypeError(f"{type(self).__name__} takes elements or source=, not both")
            self._source = source
        elif len(elements) == 1 and self._accepts_as_source(elements[0]):
            self._source = elements[0]
        else:
            self._source = elements
            self._realize()

    # --------- shape hooks ----------
    @classmethod
    def _accepts_as_source(cls, obj):
        return isinstance(obj, Iterable) and not isinstance(obj, (str, bytes, BaseCollection))

    @abstractmethod
    def _convert(self, source):
        """Build the immutable concrete structure from a source"""

    def _iter_source(self, source):
        return iter(source)

    def _iter_elements(self, source):
        """Elements of an unrealized source, as realization would expose them"""
        return self._iter_source(source)

    def _iter_content(self):
        return iter(self._content)

    def _hash_key(self):
        return self._content

    def _format_element(self, item):
        return str(item)

    def _pair_with(self, others):
        return zip(self._iter_content(), others)

    # --------- capability interface (lazy) ----------
    @abstractmethod
    def map(self, fn):
        ...

    @abstractmethod
    def filter(self, pred):
        ...

    @abstractmethod
    def take_while(self, pred):
        ...

    # --------- realization ----------
    @property
    def is_realized(self):
        return self._realized

    def _realize(self):
        if self._realized:
            return
        # Source is kept until the content is fully built
        content = self._convert(self._source)
        self._content = content
        self._source = _NO_SOURCE
        self._realized = True
        logger.debug(f"Realized {type(self).__name__} with {len(content)} elements")

    def _elements(self):
        """Yield from the content if realized, otherwise from the source"""
        if self._realized:
            yield from self._iter_content()
        else:
            yield from self._iter_elements(self._source)

    def _derive(self, transform, op_name):
        """New instance of the same shape whose source is transform(current elements)"""
        def deferred():
            yield from transform(self._elements())

        logger.debug(f"Deferred {op_name} on {type(self).__name__} (realized={self._realized})")
        return type(self)(source=deferred())

    def _build(self, items):
        """New realized instance of the same shape holding items"""
        instance = type(self)(source=items)
        instance._realize()
        return instance

    def _require_non_empty(self, op_name):
        if self.is_empty():
            raise EmptyCollectionError(f"{op_name}() on empty {type(self).__name__}")

    # --------- size and membership ----------
    def length(self):
        self._realize()
        return len(self._content)

    size = length

    def __len__(self):
        return self.length()

    def is_empty(self):
        return self.length() == 0

    def contains(self, item):
        self._realize()
        return item in self._content

    def __contains__(self, item):
        return self.contains(item)

    # --------- scans ----------
    def count(self, pred):
        """Number of elements satisfying pred"""
        self._realize()
        matches = 0
        for item in self._iter_content():
            if pred(item):
                matches += 1
        return matches

    def find(self, pred):
        """First element satisfying pred as Some(...), or Nothing"""
        self._realize()
        for item in self._iter_content():
            if pred(item):
                return Some(item)
        return Nothing

    def forall(self, pred):
        """Whether every element satisfies pred (evaluates pred on all elements)"""
        self._realize()
        satisfied = 0
        for item in self._iter_content():
            if pred(item):
                satisfied += 1
        return satisfied == len(self._content)

    def exists(self, pred):
        return self.find(pred).is_defined

    def foreach(self, fn):
        self._realize()
        for item in self._iter_content():
            fn(item)

    # --------- folding ----------
    def fold(self, initial, fn):
        """Left fold seeded with initial"""
        self._require_non_empty("fold")
        return functools.reduce(fn, self._iter_content(), initial)

    def reduce(self, fn):
        """Left fold seeded with the first element"""
        self._require_non_empty("reduce")
        return functools.reduce(fn, self._iter_content())

    # --------- ends ----------
    def head(self):
        self._require_non_empty("head")
        return next(self._iter_content())

    def tail(self):
        self._require_non_empty("tail")
        return self._build(list(itertools.islice(self._iter_content(), 1, None)))

    def last(self):
        self._require_non_empty("last")
        for item in self._iter_content():
            last_item = item
        return last_item

    # --------- zipping and grouping ----------
    def zip(self, other):
        """Pair elements positionally with other; stops at the shorter side"""
        self._realize()
        return self._build(list(self._pair_with(iter(other))))

    def zip_with_index(self):
        return self.zip(range(self.length()))

    def group_by(self, fn):
        """Mapping of fn(element) -> collection of the same shape"""
        from mapping import Mapping

        self._realize()
        groups = {}
        for item in self._iter_content():
            groups.setdefault(fn(item), []).append(item)
        return Mapping(source={key: self._build(items) for key, items in groups.items()})

    # --------- conversion and display ----------
    def to_list(self):
        self._realize()
        return list(self._iter_content())

    def mk_string(self, separator=None):
        """
        Join the string forms of the elements.

        An unrealized collection is not forced: a diagnostic naming the
        deferred source is returned instead.
        """
        if separator is None:
            separator = _settings.default_separator
        if not self._realized:
            return f"<unrealized {type(self).__name__} source={self._source!r}>"
        return separator.join(self._format_element(item) for item in self._iter_content())

    def __iter__(self):
        self._realize()
        return self._iter_content()

    def __eq__(self, other):
        if not isinstance(other, BaseCollection):
            return NotImplemented
        if type(self) is not type(other):
            return False
        self._realize()
        other._realize()
        return self._content == other._content

    def __hash__(self):
        self._realize()
        return hash((type(self).__name__, self._hash_key()))

    def __repr__(self):
        name = type(self).__name__
        if not self._realized:
            return f"{name}(<unrealized: {self._source!r}>)"
        limit = _settings.repr_limit
        shown = [repr(item) for item in itertools.islice(self._iter_content(), limit)]
        if len(self._content) > limit:
            shown.append("...")
        return f"{name}({', '.join(shown)})"
