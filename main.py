from time import sleep, perf_counter

from mapping import Mapping
from sequence import Sequence
from unique_set import UniqueSet
from utils import load_settings, setup_logging

setup_logging(load_settings())


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.1)
    return x * x


def read_rows():
    # One-shot producer: can only be consumed once
    for n in range(1, 8):
        print(f"  producing row {n}")
        yield n


print("\n--- Demo: deferred source (no work until needed) ---")
numbers = Sequence(source=read_rows())
squares = numbers.map(expensive_transform).filter(lambda v: v % 2 == 1)
print(f"Constructed. numbers realized? {numbers.is_realized}; squares realized? {squares.is_realized}")
print(f"mk_string before realization: {squares.mk_string(', ')}")

print("\nAsking for the length forces realization:")
t0 = perf_counter()
print(f"Length: {squares.length()}")
t1 = perf_counter()
print(f"Result: {squares.mk_string(', ')} (took {t1 - t0:.2f}s)")

print("\nSecond access reuses the realized content (instant):")
t0 = perf_counter()
print(f"Sum: {squares.sum()}, head: {squares.head()}, last: {squares.last()}")
print(f"Time: {perf_counter() - t0:.4f}s")

print("\n--- Demo: mapping lookups ---")
prices = Mapping({"apple": 3, "pear": 5, "plum": 2})
print(f"get('pear') -> {prices.get('pear')}; get('kiwi') -> {prices.get('kiwi')}")
print(f"getOrElse('kiwi', 0) -> {prices.get_or_else('kiwi', 0)}")
print(f"Re-keyed: {prices.map(lambda kv: (kv[0].upper(), kv[1] * 10)).to_dict()}")

print("\n--- Demo: set algebra ---")
left, right = UniqueSet([1, 2, 3]), UniqueSet([2, 3, 4])
print(f"union: {sorted(left.union(right))}, intersect: {sorted(left.intersect(right))}")

print("\n--- Demo: zipping ---")
print(f"{Sequence(1, 2, 3).zip(Sequence(9, 8)).to_list()}")
print(f"{Sequence('a', 'b', 'c').zip_with_index().to_list()}")
