"""
Optional values returned by lookups such as ``find`` and ``Mapping.get``.

An ``Option`` is either ``Some(value)`` or the ``Nothing`` singleton. Absence
is a normal result, never an error.
"""

from abc import ABC, abstractmethod


class Option(ABC):
    """A value that may or may not be present"""

    @property
    @abstractmethod
    def is_defined(self):
        ...

    @property
    def is_empty(self):
        return not self.is_defined

    @abstractmethod
    def get(self):
        """Return the wrapped value (raises ValueError when absent)"""

    def get_or_else(self, default):
        return self.get() if self.is_defined else default

    def map(self, fn):
        return Some(fn(self.get())) if self.is_defined else Nothing

    def __bool__(self):
        return self.is_defined

    def __iter__(self):
        if self.is_defined:
            yield self.get()


class Some(Option):
    __slots__ = ("_value",)

    def __init__(self, value):
        self._value = value

    @property
    def is_defined(self):
        return True

    def get(self):
        return self._value

    def __eq__(self, other):
        return isinstance(other, Some) and self._value == other._value

    def __hash__(self):
        return hash(("Some", self._value))

    def __repr__(self):
        return f"Some({self._value!r})"


class _NothingType(Option):
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_defined(self):
        return False

    def get(self):
        raise ValueError("Nothing.get() called on an absent value")

    def __eq__(self, other):
        return other is self

    def __hash__(self):
        return hash("Nothing")

    def __repr__(self):
        return "Nothing"


Nothing = _NothingType()
