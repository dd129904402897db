import pytest

from lazy import EmptyCollectionError
from mapping import Mapping
from option import Nothing, Some
from sequence import Sequence


class TestMappingConstruction:
    """Test how positional arguments are interpreted"""

    def test_dict_is_a_deferred_source(self):
        """A dict argument is held as the source"""
        prices = Mapping({"a": 1, "b": 2})
        assert not prices.is_realized, "Dict source should be deferred"
        assert prices.to_dict() == {"a": 1, "b": 2}, f"Got {prices.to_dict()}"

    def test_list_of_pairs_is_a_deferred_source(self):
        """A list of pairs is held as the source"""
        prices = Mapping([("a", 1), ("b", 2)])
        assert not prices.is_realized, "Pair-list source should be deferred"
        assert prices.to_list() == [("a", 1), ("b", 2)], f"Got {prices.to_list()}"

    def test_pairs_as_varargs_realize_immediately(self):
        """Several pairs are elements and realize right away"""
        prices = Mapping(("a", 1), ("b", 2))
        assert prices.is_realized, "Varargs pairs should realize"
        assert prices.to_dict() == {"a": 1, "b": 2}, f"Got {prices.to_dict()}"

    def test_single_pair_is_an_element(self):
        """A lone (key, value) tuple is one pair"""
        result = Mapping(("a", 1)).to_dict()
        assert result == {"a": 1}, f"Expected {{'a': 1}}, got {result}"

    def test_duplicate_keys_keep_last_value(self):
        """Later pairs win"""
        result = Mapping([("a", 1), ("a", 2)]).to_dict()
        assert result == {"a": 2}, f"Expected {{'a': 2}}, got {result}"

    def test_content_is_read_only(self):
        """Realized content cannot be mutated"""
        prices = Mapping({"a": 1})
        prices.length()
        with pytest.raises(TypeError):
            prices._content["b"] = 2


class TestLookup:
    """Test key lookups"""

    def test_get_present(self):
        """get returns Some(value) for a present key"""
        result = Mapping({"a": 1, "b": 2}).get("a")
        assert result == Some(1), f"Expected Some(1), got {result}"

    def test_get_absent(self):
        """get returns Nothing for a missing key"""
        result = Mapping({"a": 1}).get("z")
        assert result is Nothing, f"Expected Nothing, got {result}"

    def test_get_or_else(self):
        """get_or_else falls back to the default"""
        prices = Mapping({"a": 1})
        assert prices.get_or_else("z", 0) == 0, "Missing key gives the default"
        assert prices.get_or_else("a", 0) == 1, "Present key gives the value"

    def test_is_defined_at_and_contains(self):
        """Membership tests keys"""
        prices = Mapping({"a": 1})
        assert prices.is_defined_at("a"), "'a' is a key"
        assert not prices.is_defined_at(1), "Values are not keys"
        assert "a" in prices, "in tests keys"

    def test_getitem(self):
        """[] returns the value or raises KeyError"""
        prices = Mapping({"a": 1})
        assert prices["a"] == 1, f"Expected 1, got {prices['a']}"
        with pytest.raises(KeyError):
            prices["z"]

    def test_views(self):
        """keys/values/items come back as sequences in insertion order"""
        prices = Mapping({"a": 1, "b": 2})
        assert prices.keys() == Sequence("a", "b"), f"Got {prices.keys()!r}"
        assert prices.values() == Sequence(1, 2), f"Got {prices.values()!r}"
        assert prices.items().to_list() == [("a", 1), ("b", 2)], f"Got {prices.items().to_list()}"


class TestPairOperations:
    """Test combinators that work on (key, value) pairs"""

    def test_head_and_last(self):
        """head/last/tail follow insertion order"""
        prices = Mapping({"a": 1, "b": 2, "c": 3})
        assert prices.head() == ("a", 1), f"Expected ('a', 1), got {prices.head()}"
        assert prices.last() == ("c", 3), f"Expected ('c', 3), got {prices.last()}"
        assert prices.tail() == Mapping({"b": 2, "c": 3}), f"Got {prices.tail()!r}"

    def test_head_on_empty(self):
        """head on an empty mapping raises"""
        with pytest.raises(EmptyCollectionError):
            Mapping({}).head()

    def test_map_can_rekey(self):
        """map returns replacement pairs, keys included"""
        upper = Mapping({"a": 1, "b": 2}).map(lambda kv: (kv[0].upper(), kv[1] * 10))
        assert upper.to_dict() == {"A": 10, "B": 20}, f"Got {upper.to_dict()}"

    def test_map_collapsing_keys(self):
        """Pairs mapped to the same key keep the last value"""
        collapsed = Mapping({"a": 1, "b": 2}).map(lambda kv: ("same", kv[1]))
        assert collapsed.to_dict() == {"same": 2}, f"Got {collapsed.to_dict()}"

    def test_filter(self):
        """filter keeps pairs satisfying the predicate"""
        result = Mapping({"a": 1, "b": 2, "c": 3}).filter(lambda kv: kv[1] % 2 == 1).to_dict()
        assert result == {"a": 1, "c": 3}, f"Expected {{'a': 1, 'c': 3}}, got {result}"

    def test_filter_on_unrealized_duplicate_keys(self):
        """A pair overwritten by a later key is not visible to filter"""
        prices = Mapping([("a", 1), ("b", 5), ("a", 2)])
        result = prices.filter(lambda kv: kv[1] < 3).to_dict()
        assert result == {"a": 2}, f"Expected {{'a': 2}}, got {result}"
        assert not prices.is_realized, "filter must not realize the original"

    def test_take_while_is_a_prefix_not_a_filter(self):
        """take_while stops at the first failing pair"""
        result = Mapping({"a": 1, "b": 5, "c": 2}).take_while(lambda kv: kv[1] < 3).to_dict()
        assert result == {"a": 1}, f"Expected {{'a': 1}}, got {result}"

    def test_count_find_fold(self):
        """Scans and folds see (key, value) pairs"""
        prices = Mapping({"a": 1, "b": 2, "c": 3})
        assert prices.count(lambda kv: kv[1] > 1) == 2, "Two values above 1"
        assert prices.find(lambda kv: kv[1] == 2) == Some(("b", 2)), "Expected Some(('b', 2))"
        assert prices.find(lambda kv: kv[1] == 9) is Nothing, "Expected Nothing"
        total = prices.fold(0, lambda acc, kv: acc + kv[1])
        assert total == 6, f"Expected 6, got {total}"
        assert prices.forall(lambda kv: isinstance(kv[0], str)), "All keys are strings"

    def test_zip_with_index(self):
        """zip_with_index maps each key to (value, position)"""
        indexed = Mapping({"a": "x", "b": "y"}).zip_with_index()
        assert isinstance(indexed, Mapping), f"Expected Mapping, got {type(indexed)}"
        assert indexed.to_dict() == {"a": ("x", 0), "b": ("y", 1)}, f"Got {indexed.to_dict()}"

    def test_zip_truncates(self):
        """zip stops at the shorter side"""
        zipped = Mapping({"a": 1, "b": 2, "c": 3}).zip(Sequence("p", "q"))
        assert zipped.to_dict() == {"a": (1, "p"), "b": (2, "q")}, f"Got {zipped.to_dict()}"

    def test_mk_string(self):
        """mk_string renders pairs as 'key: value'"""
        text = Mapping(("a", 1), ("b", 2)).mk_string(", ")
        assert text == "a: 1, b: 2", f"Expected 'a: 1, b: 2', got {text!r}"

    def test_equality_and_hash(self):
        """Mappings compare by content regardless of order"""
        assert Mapping({"a": 1, "b": 2}) == Mapping({"b": 2, "a": 1}), "Order does not matter"
        assert hash(Mapping({"a": 1})) == hash(Mapping(("a", 1))), "Equal mappings hash equally"
        assert Mapping({"a": 1}) != Mapping({"a": 2}), "Different values differ"

    def test_merge(self):
        """+ merges, the right operand winning"""
        merged = Mapping({"a": 1, "b": 2}) + Mapping({"b": 3, "c": 4})
        assert merged.to_dict() == {"a": 1, "b": 3, "c": 4}, f"Got {merged.to_dict()}"

    def test_group_by_values(self):
        """group_by on pairs gives mappings per key"""
        groups = Mapping({"a": 1, "b": 2, "c": 1}).group_by(lambda kv: kv[1])
        assert groups.get(1) == Some(Mapping({"a": 1, "c": 1})), f"Got {groups.get(1)}"
