"""Key -> value lazy collection backed by a read-only dict."""

import itertools
from collections import abc
from types import MappingProxyType

from lazy import BaseCollection
from option import Some, Nothing
from sequence import Sequence


class Mapping(BaseCollection):
    """
    Unique keys mapped to values, iterated in insertion order.

    Elements are ``(key, value)`` pairs: iteration, ``count``, ``find``,
    ``fold`` and the lazy combinators all see pairs. ``contains`` and ``in``
    test keys.
    """

    @classmethod
    def _accepts_as_source(cls, obj):
        if isinstance(obj, (abc.Mapping, BaseCollection)):
            return True
        # A lone 2-tuple is one pair unless both of its items are pairs too
        if isinstance(obj, tuple) and len(obj) == 2:
            return all(isinstance(item, tuple) and len(item) == 2 for item in obj)
        return isinstance(obj, abc.Iterable) and not isinstance(obj, (str, bytes))

    def _convert(self, source):
        return MappingProxyType(dict(self._iter_source(source)))

    def _iter_source(self, source):
        if isinstance(source, abc.Mapping):
            return iter(source.items())
        return iter(source)

    def _iter_elements(self, source):
        # Later pairs win, as in the realized dict
        return iter(dict(self._iter_source(source)).items())

    def _iter_content(self):
        return iter(self._content.items())

    def _hash_key(self):
        return frozenset(self._content.items())

    def _format_element(self, item):
        key, value = item
        return f"{key}: {value}"

    def _pair_with(self, others):
        return ((key, (value, other)) for (key, value), other in zip(self._iter_content(), others))

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        """fn takes a (key, value) pair and returns the replacement pair"""
        return self._derive(lambda pairs: (fn(pair) for pair in pairs), "map")

    def filter(self, pred):
        return self._derive(lambda pairs: (pair for pair in pairs if pred(pair)), "filter")

    def take_while(self, pred):
        """Prefix of pairs up to the first one failing pred"""
        self._realize()
        return self._build(list(itertools.takewhile(pred, self._iter_content())))

    # --------- lookup ----------
    def get(self, key):
        self._realize()
        if key in self._content:
            return Some(self._content[key])
        return Nothing

    def get_or_else(self, key, default):
        return self.get(key).get_or_else(default)

    def is_defined_at(self, key):
        return self.contains(key)

    def __getitem__(self, key):
        self._realize()
        return self._content[key]

    # --------- views ----------
    def keys(self):
        self._realize()
        return Sequence(source=tuple(self._content.keys()))

    def values(self):
        self._realize()
        return Sequence(source=tuple(self._content.values()))

    def items(self):
        self._realize()
        return Sequence(source=tuple(self._content.items()))

    def to_dict(self):
        self._realize()
        return dict(self._content)

    def __add__(self, other):
        """Merge; keys of other win"""
        if not isinstance(other, Mapping):
            return NotImplemented
        self._realize()
        other._realize()
        return self._build({**self._content, **other._content})
