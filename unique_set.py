"""Unordered, duplicate-free lazy collection backed by a frozenset."""

import itertools

from lazy import BaseCollection, numeric_sum, flatten_items


class UniqueSet(BaseCollection):
    """Elements unique under equality. No positional operations."""

    def _convert(self, source):
        return frozenset(source)

    def _iter_elements(self, source):
        return iter(frozenset(source))

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._derive(lambda items: (fn(x) for x in items), "map")

    def filter(self, pred):
        return self._derive(lambda items: (x for x in items if pred(x)), "filter")

    def take_while(self, pred):
        return self._derive(lambda items: itertools.takewhile(pred, items), "take_while")

    def flat_map(self, fn):
        return self._derive(lambda items: flatten_items(fn(x) for x in items), "flat_map")

    # --------- set algebra ----------
    def union(self, other):
        self._realize()
        return self._build(self._content | _as_frozenset(other))

    def intersect(self, other):
        self._realize()
        return self._build(self._content & _as_frozenset(other))

    __or__ = union
    __and__ = intersect

    # --------- aggregation ----------
    def sum(self):
        self._realize()
        return numeric_sum(self._content, "UniqueSet")

    def flatten(self):
        self._realize()
        return self._build(list(flatten_items(self._content)))

    def to_set(self):
        self._realize()
        return set(self._content)


def _as_frozenset(other):
    if isinstance(other, UniqueSet):
        other._realize()
        return other._content
    return frozenset(other)
