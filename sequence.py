"""Ordered, duplicate-permitting lazy collection backed by a tuple."""

import itertools

from lazy import BaseCollection, IndexOutOfRangeError, numeric_sum, flatten_items


class Sequence(BaseCollection):
    """
    Ordered collection with 0-based positional access.

        Sequence(1, 2, 3)              # realized right away
        Sequence([1, 2, 3])            # deferred, realized on first need
        Sequence(source=read_rows())   # deferred one-shot generator
    """

    def _convert(self, source):
        return tuple(source)

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._derive(lambda items: (fn(x) for x in items), "map")

    def filter(self, pred):
        return self._derive(lambda items: (x for x in items if pred(x)), "filter")

    def take_while(self, pred):
        return self._derive(lambda items: itertools.takewhile(pred, items), "take_while")

    def flat_map(self, fn):
        return self.map(fn).flatten()

    # --------- positional access ----------
    def get(self, index):
        """Element at index; negative indices are out of range"""
        self._realize()
        if not 0 <= index < len(self._content):
            raise IndexOutOfRangeError(
                f"Index {index} out of range for Sequence of length {len(self._content)}"
            )
        return self._content[index]

    def __getitem__(self, key):
        if isinstance(key, slice):
            self._realize()
            return self._build(self._content[key])
        return self.get(key)

    def last(self):
        self._require_non_empty("last")
        return self._content[-1]

    def take(self, n):
        self._realize()
        if n <= 0:
            return self._build(())
        return self._build(self._content[:n])

    def take_right(self, n):
        self._realize()
        if n <= 0:
            return self._build(())
        return self._build(self._content[-n:])

    def drop(self, n):
        self._realize()
        if n <= 0:
            return self
        return self._build(self._content[n:])

    def grouped(self, size):
        """Split into consecutive Sequences of `size` elements (the last may be shorter)"""
        if size < 1:
            raise ValueError("Group size must be >= 1")
        self._realize()
        return self._build([
            self._build(self._content[start:start + size])
            for start in range(0, len(self._content), size)
        ])

    def index_of(self, item, start=0):
        """Index of the first element equal to item at or after start, or -1"""
        return self.index_where(lambda x: x == item, start)

    def index_where(self, pred, start=0):
        """Index of the first element satisfying pred at or after start, or -1"""
        self._realize()
        for index in range(max(start, 0), len(self._content)):
            if pred(self._content[index]):
                return index
        return -1

    # --------- reordering ----------
    def sorted(self, key=None, reverse=False):
        """Stable sort"""
        self._realize()
        return self._build(sorted(self._content, key=key, reverse=reverse))

    def sorted_with(self, key):
        return self.sorted(key=key)

    def reverse(self):
        self._realize()
        return self._build(self._content[::-1])

    # --------- aggregation ----------
    def sum(self):
        self._realize()
        return numeric_sum(self._content, "Sequence")

    def flatten(self):
        """Concatenate one level of nested collections or iterables"""
        self._realize()
        return self._build(list(flatten_items(self._content)))

    def __add__(self, other):
        if not isinstance(other, Sequence):
            return NotImplemented
        self._realize()
        other._realize()
        return self._build(self._content + other._content)
