# -*- coding: utf-8; -*-
"""The class graph: named classes and their (possibly multiple) parents.

Classes are plain strings, not Python classes. The graph stores, for each
class, the ordered tuple of its direct parents ("`A` contains `B`" means `B`
is a parent of `A`). The transitive parent relation is kept acyclic.

The graph is append-only in normal operation. Changing the parents of an
existing class is allowed, but it is an explicit operation (`redefine`); if
it happens implicitly via `register`, a `ClassRedefinitionWarning` is signaled.

Every mutation bumps `generation`, so that caches derived from the graph
(see `classdispatch.distance`) know when they are stale.

Example::

    g = ClassGraph()
    g.register("object")
    g.register("number", ["object"])
    g.register("text", ["object"])
    g.register("numeric_text", ["number", "text"])
    assert list(g.all_ancestors("numeric_text")) == ["number", "text", "object"]
"""

__all__ = ["ClassGraph"]

from collections import deque
import heapq
import threading

from unpythonic.conditions import warn

from .errors import CycleError, UnknownParentError, UnknownClassError, ClassRedefinitionWarning

class ClassGraph:
    """Directed acyclic graph of named classes.

    Thread safety: all mutators take `lock` (an `RLock`, so that a registry
    sharing this lock can call into the graph while holding it). Readers do not
    lock; they are safe once registration has quiesced.
    """
    def __init__(self):
        self._parents = {}   # name -> tuple of parent names, in declaration order
        self._children = {}  # name -> list of child names, in registration order
        self.generation = 0
        self.lock = threading.RLock()

    def __repr__(self):  # pragma: no cover
        return f"<ClassGraph with {len(self._parents)} classes at 0x{id(self):x}>"

    def __len__(self):
        return len(self._parents)

    def __contains__(self, name):
        return name in self._parents

    def __iter__(self):
        return iter(list(self._parents))

    def isregistered(self, name):
        """Return whether a class called `name` has been registered."""
        return name in self._parents

    def parents_of(self, name):
        """Return the direct parents of class `name`, as a tuple, in declaration order."""
        try:
            return self._parents[name]
        except KeyError:
            raise UnknownClassError(name) from None

    def children_of(self, name):
        """Return the direct children of class `name`, as a tuple, in registration order."""
        try:
            return tuple(self._children[name])
        except KeyError:
            raise UnknownClassError(name) from None

    def all_ancestors(self, name):
        """Return a generator over all ancestors of class `name`.

        Each ancestor is produced exactly once, in breadth-first order, so
        nearer ancestors come first. The class itself is not included.
        """
        if name not in self._parents:
            raise UnknownClassError(name)
        return _ancestors(self._parents, name)

    # --------------------------------------------------------------------------------
    # Mutators

    def register(self, name, parents=()):
        """Register class `name` with the given direct `parents`.

        All parents must already be registered. Registering the same class again
        with the same parents is a no-op. Registering it again with different
        parents redefines it, and signals a `ClassRedefinitionWarning`.

        Return `True` if the graph changed, `False` if the call was a no-op.

        Raises `CycleError` or `UnknownParentError`; the graph is then unchanged.
        """
        parents = _canonize(name, parents)
        with self.lock:
            old = self._parents.get(name)
            if old == parents:
                return False
            _check(self._parents, name, parents)
            if old is not None:
                warn(ClassRedefinitionWarning(name, old, parents))
            self._commit({name: parents})
            return True

    def redefine(self, name, parents=()):
        """Replace the direct parents of class `name`.

        If `name` is not yet registered, this is the same as `register`.

        Any resolution made against the old definition is not affected; the
        caller owns whatever it got back. New resolutions see the new parents.

        Return `True` if the graph changed, `False` if the call was a no-op.
        """
        parents = _canonize(name, parents)
        with self.lock:
            if self._parents.get(name) == parents:
                return False
            _check(self._parents, name, parents)
            self._commit({name: parents})
            return True

    def register_many(self, definitions):
        """Register several classes at once.

        `definitions`: mapping of `name -> parents`, or an iterable of
                       `(name, parents)` pairs.

        Parents may refer forward, to other classes in the same batch.
        The batch is applied in topological order, ties broken by name, so the
        result does not depend on the order of `definitions`.

        The batch is atomic: if any definition fails, nothing is registered.

        Return the list of names that changed the graph, in application order.
        """
        items = definitions.items() if hasattr(definitions, "items") else definitions
        batch = {}
        for name, parents in items:
            batch[name] = _canonize(name, parents)
        with self.lock:
            scratch = dict(self._parents)
            for name, parents in batch.items():
                missing = [p for p in parents if p not in batch and p not in scratch]
                if missing:
                    raise UnknownParentError(name, missing)
            changes = {}
            redefinitions = []
            for name in _toposort(batch):
                parents = batch[name]
                old = scratch.get(name)
                if old == parents:
                    continue
                _check(scratch, name, parents)
                if old is not None:
                    redefinitions.append((name, old, parents))
                scratch[name] = parents
                changes[name] = parents
            for name, old, parents in redefinitions:
                warn(ClassRedefinitionWarning(name, old, parents))
            self._commit(changes)
            return list(changes)

    def _commit(self, changes):
        """Apply already validated `changes` (`name -> parents`)."""
        if not changes:
            return
        for name, parents in changes.items():
            for p in self._parents.get(name, ()):
                self._children[p].remove(name)
            self._parents[name] = parents
            self._children.setdefault(name, [])
            for p in parents:
                self._children[p].append(name)
        self.generation += 1

# --------------------------------------------------------------------------------

def _canonize(name, parents):
    if not isinstance(name, str):
        raise TypeError(f"Class names must be strings, got {type(name)} with value {repr(name)}")
    if isinstance(parents, str):  # a lone parent; don't iterate over its characters
        parents = (parents,)
    parents = tuple(parents)
    for p in parents:
        if not isinstance(p, str):
            raise TypeError(f"Parent class names must be strings, got {type(p)} with value {repr(p)}")
    if len(set(parents)) != len(parents):
        raise ValueError(f"Duplicate parent in {parents} for class {repr(name)}")
    return parents

def _ancestors(parentmap, name):
    seen = {name}
    queue = deque(parentmap[name])
    while queue:
        x = queue.popleft()
        if x in seen:
            continue
        seen.add(x)
        yield x
        queue.extend(parentmap.get(x, ()))

def _path_up(parentmap, start, goal):
    """Return a shortest parent-edge path from `start` up to `goal`, or `None`."""
    previous = {start: None}
    queue = deque([start])
    while queue:
        x = queue.popleft()
        if x == goal:
            path = []
            while x is not None:
                path.append(x)
                x = previous[x]
            return path[::-1]
        for p in parentmap.get(x, ()):
            if p not in previous:
                previous[p] = x
                queue.append(p)
    return None

def _check(parentmap, name, parents):
    """Validate making `parents` the parents of `name`, against the graph `parentmap`."""
    if name in parents:
        raise CycleError(name, parents, path=(name, name))
    missing = [p for p in parents if p not in parentmap]
    if missing:
        raise UnknownParentError(name, missing)
    # Only an existing class can have descendants that could close a loop.
    if name in parentmap:
        for p in parents:
            path = _path_up(parentmap, p, name)
            if path is not None:
                raise CycleError(name, parents, path=[name] + path)

def _toposort(batch):
    """Order the names in `batch` so that parents in the batch come before their children.

    Ties are broken by name. A cycle inside the batch raises `CycleError`.
    """
    indegree = {name: sum(1 for p in parents if p in batch and p != name)
                for name, parents in batch.items()}
    dependents = {name: [] for name in batch}
    for name, parents in batch.items():
        for p in parents:
            if p in batch and p != name:
                dependents[p].append(name)
    ready = [name for name, n in indegree.items() if n == 0]
    heapq.heapify(ready)
    order = []
    while ready:
        name = heapq.heappop(ready)
        order.append(name)
        for child in dependents[name]:
            indegree[child] -= 1
            if indegree[child] == 0:
                heapq.heappush(ready, child)
    if len(order) < len(batch):
        raise _batch_cycle(batch, set(batch) - set(order))
    return order

def _batch_cycle(batch, stuck):
    """Return a `CycleError` for a cycle among the `stuck` names of `batch`.

    Each stuck class has at least one stuck parent, so walking up through stuck
    parents must eventually revisit a class; that class is on a cycle.
    """
    seen = {}
    path = []
    x = min(stuck)
    while x not in seen:
        seen[x] = len(path)
        path.append(x)
        x = min(p for p in batch[x] if p in stuck and p != x)
    cycle = path[seen[x]:] + [x]
    return CycleError(x, batch[x], path=cycle)
