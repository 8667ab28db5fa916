# -*- coding: utf-8; -*-
"""Exceptions and warnings raised or signaled by the dispatch engine.

Every exception inherits from `DispatchError`, and additionally from the
builtin exception type a caller would naturally catch for that kind of
failure. E.g. a failed dispatch is a `TypeError`, just like calling a
`@generic` function of `unpythonic.dispatch` with arguments that match none
of its multimethods.

Warnings are never raised. They are *signaled* with `unpythonic.conditions.warn`,
so that a dynamically enclosing `with handlers(...)` can `muffle` them.
"""

__all__ = ["DispatchError",
           "CycleError", "UnknownParentError", "UnknownClassError",
           "DuplicateGenericError", "UnknownGenericError",
           "SignatureArityMismatchError", "NoApplicableMethodError",
           "DispatchWarning", "AmbiguousDispatchWarning", "ClassRedefinitionWarning"]

from .table import format_signature

class DispatchError(Exception):
    """Base class for errors raised by `classdispatch`."""

# --------------------------------------------------------------------------------
# Class graph

class CycleError(DispatchError, ValueError):
    """Adding the given parent edges would make the class graph cyclic."""
    def __init__(self, name, parents, path=None):
        self.name = name
        self.parents = tuple(parents)
        self.path = tuple(path) if path is not None else None
        msg = f"Cannot make {repr(name)} a child of {_format_names(self.parents)}: this would create a cycle"
        if self.path:
            msg += f" ({' -> '.join(self.path)})"
        super().__init__(msg)

class UnknownParentError(DispatchError, LookupError):
    """A class registration refers to a parent that has not been registered."""
    def __init__(self, name, missing):
        self.name = name
        self.missing = tuple(missing)
        plural = "es" if len(self.missing) > 1 else ""
        super().__init__(f"Cannot register {repr(name)}: unknown parent class{plural} {_format_names(self.missing)}")

class UnknownClassError(DispatchError, LookupError):
    """A class name was looked up, but no such class is registered."""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown class {repr(name)}")

# --------------------------------------------------------------------------------
# Registry

class DuplicateGenericError(DispatchError, ValueError):
    """A generic function with this name already exists, with a different arity."""
    def __init__(self, name, arity, existing_arity):
        self.name = name
        self.arity = arity
        self.existing_arity = existing_arity
        super().__init__(f"Generic function {repr(name)} already defined with arity {existing_arity}, cannot redefine with arity {arity}")

class UnknownGenericError(DispatchError, LookupError):
    """No generic function with this name has been defined."""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown generic function {repr(name)}")

class SignatureArityMismatchError(DispatchError, TypeError):
    """A signature or call signature has the wrong length for its generic function."""
    def __init__(self, generic, signature, arity):
        self.generic = generic
        self.signature = tuple(signature)
        self.arity = arity
        super().__init__(f"Generic function {repr(generic)} dispatches on {arity} argument(s), "
                         f"but the signature {format_signature(self.signature)} has {len(self.signature)}")

# --------------------------------------------------------------------------------
# Dispatch

class NoApplicableMethodError(DispatchError, TypeError):
    """No registered method of a generic function matches the call signature.

    The attribute `methods` holds the signatures that were tried.
    """
    def __init__(self, generic, callsig, methods=()):
        self.generic = generic
        self.callsig = tuple(callsig)
        self.methods = tuple(methods)
        if self.methods:
            methods_str = "\n".join(f"  {generic}{format_signature(sig)}" for sig in self.methods)
        else:
            methods_str = "  <no methods registered>"
        super().__init__(f"No applicable method for the call {generic}{format_signature(self.callsig)}.\n"
                         f"Methods of generic function {repr(generic)}:\n{methods_str}")

# --------------------------------------------------------------------------------
# Warnings

class DispatchWarning(Warning):
    """Base class for warnings signaled by `classdispatch`."""

class AmbiguousDispatchWarning(DispatchWarning):
    """Two or more signatures tie for the minimum total distance.

    The dispatch still succeeds; `winner` is the signature that was chosen,
    i.e. the one whose string form sorts first.
    """
    def __init__(self, generic, callsig, signatures, winner):
        self.generic = generic
        self.callsig = tuple(callsig)
        self.signatures = tuple(signatures)
        self.winner = winner
        tied = ", ".join(format_signature(sig) for sig in self.signatures)
        super().__init__(f"Ambiguous dispatch for the call {generic}{format_signature(self.callsig)}: "
                         f"signatures {tied} tie for the best match; using {format_signature(winner)}")

class ClassRedefinitionWarning(DispatchWarning):
    """An already registered class was registered again, with different parents."""
    def __init__(self, name, old_parents, new_parents):
        self.name = name
        self.old_parents = tuple(old_parents)
        self.new_parents = tuple(new_parents)
        super().__init__(f"Redefining class {repr(name)}: parents {_format_names(self.old_parents)} "
                         f"replaced by {_format_names(self.new_parents)}")

def _format_names(names):
    return "(" + ", ".join(repr(x) for x in names) + ")"