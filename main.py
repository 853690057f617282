import itertools
import logging
from time import sleep, perf_counter

from lazyutil import Sequence, concat, count, first, grep, map, nuniq, prod, take, until
from lazyutil.config import configure_logging

configure_logging()
logging.getLogger("lazyutil").setLevel(logging.INFO)


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.2)
    return x * x


print("\n--- Demo: laziness (no work until pulled) ---")
naturals = itertools.count(1).__next__   # infinite producer
pipeline = take(5, grep(lambda v: v % 2 == 0, map(expensive_transform, naturals)))

print("Constructed pipeline. No output yet (nothing computed).")
print("\nPulling (should compute only what's needed for 5 items):")
t0 = perf_counter()
out = pipeline.drain_all()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: mixing sources ---")
letters = Sequence.from_iterable("xyz")
print("Values:", concat(1, 2, letters, None, "end").drain_all())
print("First of an infinite source:", first(itertools.count(100).__next__))
print()

print("--- Demo: prod stops at zero ---")
def noisy():
    print("  noisy producer called!")
    return 7

print("Product:", prod(1, 2, 3, 0, noisy), "(noisy producer never ran)\n")

print("--- Demo: pushback ---")
seq = concat(1, 2, 3)
head = seq.pull()
print("Pulled", head, "then pushed it back")
seq.pushback(head)
print("Now the sequence holds:", seq.drain_all(), "\n")

print("--- Demo: until / nuniq ---")
print("Until > 20:", until(lambda v: v > 20, map(lambda v: v * 7, itertools.count(1).__next__)).drain_all())
print("Numerically unique:", list(nuniq(1, "1", 2.0, 2, "3", 3)))
print("Count of distinct squares mod 10 below 100:",
      count(nuniq(map(lambda v: v * v % 10, take(100, itertools.count().__next__)))))
