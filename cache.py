# cache.py
import collections
import logging

ADDRESS_WIDTH = 64

HIT = "hit"
MISS = "miss"
MISS_EVICT = "miss eviction"


class GeometryError(ValueError):
    pass


class Geometry(collections.namedtuple("Geometry", ["s", "E", "b"])):
    """
    Cache geometry: set-index bits `s`, lines per set `E`, block-offset bits `b`.
    """

    __slots__ = ()

    def __new__(cls, s, E, b):
        for name, value in (("s", s), ("E", E), ("b", b)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise GeometryError("{} must be an integer, got {!r}".format(name, value))
        if s < 0:
            raise GeometryError("s must be >= 0, got {}".format(s))
        if b < 0:
            raise GeometryError("b must be >= 0, got {}".format(b))
        if E < 1:
            raise GeometryError("E must be >= 1, got {}".format(E))
        if s + b > ADDRESS_WIDTH:
            raise GeometryError(
                "s + b must not exceed {} address bits, got {}".format(ADDRESS_WIDTH, s + b)
            )
        return super().__new__(cls, s, E, b)

    @property
    def num_sets(self):
        return 1 << self.s

    @property
    def block_size(self):
        return 1 << self.b


def decode(address, s, b):
    """Split `address` into (tag, set_index)."""
    tag = address >> (s + b)
    set_index = (address >> b) & ((1 << s) - 1)
    return tag, set_index


def block_offset(address, b):
    return address & ((1 << b) - 1)


class CacheLine:
    __slots__ = ("valid", "tag", "last_used")

    def __init__(self):
        self.valid = False
        self.tag = 0
        self.last_used = 0

    def __repr__(self):
        return "CacheLine(valid={}, tag={:#x}, last_used={})".format(
            self.valid, self.tag, self.last_used
        )


class LRUCache:
    """
    Set-associative cache with true LRU replacement.

    Every access bumps a logical clock and stamps the line it hits or fills,
    so the eviction victim is always the line touched longest ago. Lines are
    kept in fixed slots; among lines sharing the oldest stamp the lowest slot
    loses.
    """

    def __init__(self, geometry: Geometry):
        self.geometry = geometry
        self.sets = [
            [CacheLine() for _ in range(geometry.E)] for _ in range(geometry.num_sets)
        ]
        self.clock = 0
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def access(self, address):
        """
        Access byte address `address`. Return HIT, MISS or MISS_EVICT.
        Updates counters and LRU state.
        """
        self.clock += 1
        tag, idx = decode(address, self.geometry.s, self.geometry.b)
        lines = self.sets[idx]

        for line in lines:
            if line.valid and line.tag == tag:
                line.last_used = self.clock
                self.hits += 1
                return HIT

        self.misses += 1
        for line in lines:
            if not line.valid:
                line.valid = True
                line.tag = tag
                line.last_used = self.clock
                return MISS

        # set is full -> evict the least recently used line
        victim = lines[0]
        for line in lines[1:]:
            if line.last_used < victim.last_used:
                victim = line
        logging.debug(
            "evict set {} tag {:#x} (last used {}) for tag {:#x}".format(
                idx, victim.tag, victim.last_used, tag
            )
        )
        victim.tag = tag
        victim.last_used = self.clock
        self.evictions += 1
        return MISS_EVICT

    def lookup(self, address):
        """Return True if the block holding `address` is resident. No side effects."""
        tag, idx = decode(address, self.geometry.s, self.geometry.b)
        return any(line.valid and line.tag == tag for line in self.sets[idx])

    def replay(self, records):
        """
        Apply trace records in order, yielding (record, outcomes) for each one.
        A modify is a load followed by a store to the same address.
        """
        for record in records:
            if record.kind == "M":
                outcomes = (self.access(record.address), self.access(record.address))
            else:
                outcomes = (self.access(record.address),)
            yield record, outcomes

    def run(self, records):
        for _ in self.replay(records):
            pass
        return self.hits, self.misses, self.evictions

    def stats(self):
        used_lines = sum(1 for s in self.sets for line in s if line.valid)
        return {
            "s": self.geometry.s,
            "E": self.geometry.E,
            "b": self.geometry.b,
            "num_sets": self.geometry.num_sets,
            "block_size": self.geometry.block_size,
            "accesses": self.clock,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "used_lines": used_lines,
        }
