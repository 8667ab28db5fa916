# -*- coding: utf-8; -*-
"""The generic function registry, and the public API.

A `Registry` owns a class graph, a distance calculator on top of it, and the
generic functions with their method tables. All registration goes through one
lock (the graph's), and is atomic: a registration call that raises leaves
everything as it was.

**Module-level API**

For convenience, the module-level functions (`register_class`, `define_generic`,
`define_method`, `method`, `resolve`, `call`, `distance`, ...) operate on the
*current registry*. That is the dynamic variable `dyn.dispatch_registry`
(see `unpythonic.dynassign`), which by default is the process-wide
`default_registry`, created empty when this module is first imported.

To work in an isolated registry temporarily::

    from unpythonic.dynassign import dyn
    from classdispatch import Registry, register_class

    with dyn.let(dispatch_registry=Registry()):
        register_class("thing")  # goes into the new registry
        ...

Example::

    register_class("shape")
    register_class("circle", ["shape"])
    define_generic("collide", 2)

    @method("collide", "shape", "shape")
    def collide_generic(a, b):
        return "bump"

    @method("collide", "circle", "circle")
    def collide_circles(a, b):
        return "boing"

    assert resolve("collide", ("circle", "shape")) is collide_generic
"""

__all__ = ["Generic", "Registry", "default_registry", "current_registry",
           "register_class", "register_classes", "redefine_class",
           "define_generic", "define_method", "method",
           "resolve", "call", "distance",
           "list_methods", "format_methods", "methods", "applicable_methods"]

import inspect

from unpythonic.dynassign import dyn, make_dynvar

from . import dispatcher
from .distance import DistanceCalculator
from .errors import DuplicateGenericError, UnknownGenericError, SignatureArityMismatchError
from .graph import ClassGraph
from .markers import ANY, MISSING
from .table import MethodTable, canonize_signature, format_signature

class Generic:
    """A generic function: a `name`, the number of arguments it dispatches on, and its methods."""
    def __init__(self, name, arity, doc=None):
        self.name = name
        self.arity = arity
        self.doc = doc
        self.table = MethodTable(name)

    def __repr__(self):  # pragma: no cover
        return f"<Generic {self.name}/{self.arity} with {len(self.table)} methods at 0x{id(self):x}>"

class Registry:
    """Catalog of generic functions, with the class graph they dispatch on.

    `graph`: optional existing `ClassGraph`, to share one class hierarchy
             between several registries. By default, a new empty graph.
    """
    def __init__(self, graph=None):
        self.graph = graph if graph is not None else ClassGraph()
        self.calculator = DistanceCalculator(self.graph)
        self._generics = {}
        self._lock = self.graph.lock  # single writer lock for the graph and the method tables

    def __repr__(self):  # pragma: no cover
        return f"<Registry with {len(self._generics)} generics, {len(self.graph)} classes at 0x{id(self):x}>"

    # --------------------------------------------------------------------------------
    # Classes

    def register_class(self, name, parents=()):
        """Register class `name` with direct `parents`. See `ClassGraph.register`."""
        return self.graph.register(name, parents)

    def register_classes(self, definitions):
        """Register several classes at once. See `ClassGraph.register_many`."""
        return self.graph.register_many(definitions)

    def redefine_class(self, name, parents=()):
        """Replace the parents of class `name`. See `ClassGraph.redefine`."""
        return self.graph.redefine(name, parents)

    def distance(self, frm, to):
        """Return the distance from class `frm` up to class `to`, or `unreachable`."""
        return self.calculator.distance(frm, to)

    # --------------------------------------------------------------------------------
    # Generics and methods

    def define_generic(self, name, arity, doc=None):
        """Define a generic function `name` that dispatches on `arity` arguments.

        Defining it again with the same arity is a no-op (a given `doc` replaces
        the old one). Defining it again with a different arity raises
        `DuplicateGenericError`.

        Return the `Generic`.
        """
        if not isinstance(name, str):
            raise TypeError(f"Generic function names must be strings, got {type(name)} with value {repr(name)}")
        if not isinstance(arity, int) or isinstance(arity, bool):
            raise TypeError(f"Expected arity to be an int, got {type(arity)} with value {repr(arity)}")
        if arity < 0:
            raise ValueError(f"Expected arity >= 0, got {arity}")
        with self._lock:
            g = self._generics.get(name)
            if g is not None:
                if g.arity != arity:
                    raise DuplicateGenericError(name, arity, g.arity)
            else:
                g = self._generics[name] = Generic(name, arity)
            if doc is not None:
                g.doc = doc
            return g

    def define_method(self, generic, signature, implementation):
        """Register `implementation` as the method of `generic` for `signature`.

        `signature`: sequence of class names and/or the markers `ANY`, `MISSING`,
                     one per dispatched argument. The classes need not be
                     registered yet.

        If a method with the same signature exists, it is replaced.

        Return the new `MethodEntry`.
        """
        signature = canonize_signature(signature)
        if not callable(implementation):
            raise TypeError(f"Expected a callable implementation, got {type(implementation)} with value {repr(implementation)}")
        with self._lock:
            g = self.get_generic(generic)
            if len(signature) != g.arity:
                raise SignatureArityMismatchError(generic, signature, g.arity)
            return g.table.register(signature, implementation)

    def method(self, generic, *signature):
        """Parametric decorator. Register the decorated function as a method of `generic`.

        The decorated function is returned as-is.

        Usage::

            @registry.method("collide", "circle", ANY)
            def collide_circle_any(a, b):
                ...
        """
        def register(f):
            self.define_method(generic, signature, f)
            return f
        return register

    def get_generic(self, name):
        """Return the `Generic` called `name`. Raises `UnknownGenericError` if there is none."""
        try:
            return self._generics[name]
        except KeyError:
            raise UnknownGenericError(name) from None

    def generics(self):
        """Return a list of the names of all defined generic functions."""
        return list(self._generics)

    # --------------------------------------------------------------------------------
    # Dispatch

    def resolve_entry(self, generic, callsig):
        """Like `resolve`, but return the whole `MethodEntry`."""
        g = self.get_generic(generic)
        callsig = self._check_callsig(g, callsig)
        return dispatcher.resolve(g.table, callsig, self.calculator)

    def resolve(self, generic, callsig):
        """Return the implementation of `generic` that best matches `callsig`.

        `callsig`: sequence of the run-time class names of the arguments,
                   with `MISSING` at the positions of absent arguments.

        See `classdispatch.dispatcher` for the rules. A class in `callsig` that
        is not registered counts as a root class; it can still match `ANY`.

        Raises `UnknownGenericError`, `SignatureArityMismatchError`, or
        `NoApplicableMethodError`.
        """
        return self.resolve_entry(generic, callsig).implementation

    def call(self, generic, callsig, *args, **kwargs):
        """Resolve `generic` for `callsig`, and call the result with `args` and `kwargs`."""
        return self.resolve(generic, callsig)(*args, **kwargs)

    def applicable_methods(self, generic, callsig):
        """Return the methods of `generic` applicable to `callsig`, best first.

        The return value is a list of `(total_distance, entry)`. An exact match,
        if any, is just the one with total distance 0; unlike in `resolve`, there
        is no fast path here.
        """
        g = self.get_generic(generic)
        callsig = self._check_callsig(g, callsig)
        return dispatcher.rank(g.table, callsig, self.calculator)

    def _check_callsig(self, g, callsig):
        if isinstance(callsig, str):
            callsig = (callsig,)
        callsig = tuple(callsig)
        for x in callsig:
            if x is ANY or not (isinstance(x, str) or x is MISSING):
                raise TypeError(f"Call signature elements must be class names (str) or MISSING; got {repr(x)} in {callsig}")
        if len(callsig) != g.arity:
            raise SignatureArityMismatchError(g.name, callsig, g.arity)
        return callsig

    # --------------------------------------------------------------------------------
    # Introspection

    def list_methods(self, generic):
        """Return a list of the `MethodEntry` objects of `generic`, sorted by signature string."""
        entries = self.get_generic(generic).table.entries()
        return sorted(entries, key=lambda e: format_signature(e.signature))

    def format_methods(self, generic):
        """Format, as a string, a human-readable list of the methods of `generic`."""
        g = self.get_generic(generic)
        entries = self.list_methods(generic)
        if entries:
            methods_str = "\n".join(f"  {g.name}{format_signature(e.signature)} -> {_format_callable(e.implementation)}"
                                    for e in entries)
        else:
            methods_str = "  <no methods registered>"
        header = f"Methods for generic function {g.name} (dispatching on {g.arity} argument(s)):"
        if g.doc:
            header = f"{header}\n  {g.doc}"
        return f"{header}\n{methods_str}"

# Modeled after `unpythonic.dispatch._format_callable`.
def _format_callable(thecallable):
    name = getattr(thecallable, "__qualname__", None) or repr(thecallable)
    try:
        function = inspect.unwrap(thecallable)
        filename = inspect.getsourcefile(function)
        _, firstlineno = inspect.getsourcelines(function)
    except (TypeError, OSError):  # builtins, callable instances, code typed into the REPL
        return name
    return f"{name} from {filename}:{firstlineno}"

# --------------------------------------------------------------------------------
# Process-wide default registry, and the module-level API that uses the current one.

default_registry = Registry()
make_dynvar(dispatch_registry=default_registry)

def current_registry():
    """Return the registry the module-level API currently operates on."""
    return dyn.dispatch_registry

def register_class(name, parents=()):
    """Register class `name`, with direct `parents`, in the current registry."""
    return current_registry().register_class(name, parents)

def register_classes(definitions):
    """Register several classes, possibly referring to each other, in the current registry."""
    return current_registry().register_classes(definitions)

def redefine_class(name, parents=()):
    """Replace the parents of class `name` in the current registry."""
    return current_registry().redefine_class(name, parents)

def define_generic(name, arity, doc=None):
    """Define generic function `name`, dispatching on `arity` arguments, in the current registry."""
    return current_registry().define_generic(name, arity, doc)

def define_method(generic, signature, implementation):
    """Register a method of `generic` in the current registry."""
    return current_registry().define_method(generic, signature, implementation)

def method(generic, *signature):
    """Parametric decorator. Register the decorated function as a method of `generic`.

    The registry is looked up when the decorator is applied, not when it is created.
    """
    def register(f):
        current_registry().define_method(generic, signature, f)
        return f
    return register

def resolve(generic, callsig):
    """Return the implementation of `generic` that best matches `callsig`, in the current registry."""
    return current_registry().resolve(generic, callsig)

def call(generic, callsig, *args, **kwargs):
    """Resolve `generic` for `callsig` in the current registry, and call the result."""
    return current_registry().call(generic, callsig, *args, **kwargs)

def distance(frm, to):
    """Return the distance from class `frm` up to class `to` in the current registry."""
    return current_registry().distance(frm, to)

def applicable_methods(generic, callsig):
    """Return the methods of `generic` applicable to `callsig`, best first, as `(total, entry)`."""
    return current_registry().applicable_methods(generic, callsig)

def list_methods(generic):
    """Return the methods of `generic` in the current registry, sorted by signature."""
    return current_registry().list_methods(generic)

def format_methods(generic):
    """Format the methods of `generic` in the current registry as a human-readable string."""
    return current_registry().format_methods(generic)

def methods(generic):
    """Print, to stdout, a human-readable list of the methods of `generic`.

    For introspection in the REPL, like `unpythonic.dispatch.methods`.
    """
    print(format_methods(generic))
