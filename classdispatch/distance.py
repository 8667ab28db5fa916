# -*- coding: utf-8; -*-
"""Shortest-path distance between classes in a `ClassGraph`.

The distance from class `a` to class `b` is the number of parent edges on the
shortest path leading *up* from `a` to `b`. A class is at distance 0 from
itself. Distance is directional: if `b` is not an ancestor of `a` (it is a
descendant, a sibling, or unrelated), the result is `unreachable`.

With multiple inheritance, the same ancestor can often be reached along several
paths of different lengths, so we breadth-first search: the first time BFS
reaches a class is along a shortest path, whatever the order in which the
parents were declared.

For each source class, the complete ancestor-distance map is computed once, and
cached until the graph changes.
"""

__all__ = ["DistanceCalculator"]

from collections import deque
import threading

from unpythonic.collections import frozendict

from .errors import UnknownClassError
from .markers import unreachable

class DistanceCalculator:
    """Answer distance queries on `graph`, caching per-class ancestor-distance maps.

    The cache is tied to `graph.generation`; any mutation of the graph
    invalidates all of it. Cache fills are serialized by an internal lock,
    and a filled map is never mutated, so concurrent readers are safe.
    """
    def __init__(self, graph):
        self.graph = graph
        self._cache = {}
        self._generation = graph.generation
        self._lock = threading.Lock()

    def distance(self, frm, to):
        """Return the distance from class `frm` up to class `to`, or `unreachable`.

        `frm` must be registered. `to` needn't be; an unknown class is simply
        not an ancestor of anything.
        """
        return self.ancestor_distances(frm).get(to, unreachable)

    def isancestor(self, frm, to):
        """Return whether `to` is `frm` itself or one of its ancestors."""
        return to in self.ancestor_distances(frm)

    def depth(self, name):
        """Return the distance from class `name` to its farthest ancestor (0 for a root)."""
        return max(self.ancestor_distances(name).values())

    def ancestor_distances(self, name, strict=True):
        """Return a read-only mapping `ancestor -> distance` for class `name`.

        The mapping includes `name` itself, at distance 0.

        If `strict` is false, an unregistered `name` is treated as a root class
        with no ancestors, instead of raising `UnknownClassError`. The dispatcher
        uses this, so that a call naming an unknown class can still match `ANY`.
        """
        if not strict and not self.graph.isregistered(name):
            return frozendict({name: 0})
        cache = self._current_cache()
        try:
            return cache[name]
        except KeyError:
            pass
        with self._lock:
            if self._generation != self.graph.generation:  # the graph changed while we waited
                self._cache = {}
                self._generation = self.graph.generation
            if name not in self._cache:
                self._cache[name] = frozendict(_bfs(self.graph, name))
            return self._cache[name]

    def clear(self):
        """Drop all cached maps."""
        with self._lock:
            self._cache = {}
            self._generation = self.graph.generation

    def _current_cache(self):
        if self._generation != self.graph.generation:
            self.clear()
        return self._cache

def _bfs(graph, name):
    """Return a dict `ancestor -> minimal distance` for class `name`, including itself."""
    if not graph.isregistered(name):
        raise UnknownClassError(name)
    distances = {name: 0}
    queue = deque([name])
    while queue:
        x = queue.popleft()
        d = distances[x] + 1
        for p in graph.parents_of(x):
            if p not in distances:  # first visit is along a shortest path
                distances[p] = d
                queue.append(p)
    return distances
