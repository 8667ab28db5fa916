# -*- coding: utf-8; -*-
"""Method tables: for one generic function, map type signatures to methods."""

__all__ = ["MethodEntry", "MethodTable", "format_signature", "signature_sortkey", "canonize_signature"]

from collections import namedtuple

from .markers import ismarker

class MethodEntry(namedtuple("MethodEntry", ["generic", "signature", "implementation"])):
    """A registered method: the `implementation` of `generic` for `signature`.

    Immutable. Registering another method with the same signature replaces
    the entry in its table; the old entry object itself is never modified.
    """
    __slots__ = ()

    def __repr__(self):  # pragma: no cover
        return f"<MethodEntry {self.generic}{format_signature(self.signature)} -> {self.implementation!r}>"

def format_signature(signature):
    """Format `signature` as a string, e.g. `(A, ANY, MISSING)`.

    This is the canonical string form; it is also used to pick a winner,
    deterministically, when a dispatch is ambiguous.
    """
    return "(" + ", ".join(str(x) for x in signature) + ")"

def signature_sortkey(signature):
    """Sort key for picking the winner of an ambiguous dispatch.

    Orders by `format_signature`. A class that happens to be named `"ANY"` or
    `"MISSING"` formats the same as the marker, so such ties are broken by
    marker positions, classes first.
    """
    return (format_signature(signature), tuple(ismarker(x) for x in signature))

def canonize_signature(signature):
    """Convert `signature` into a tuple, checking that each element is a class name or a marker."""
    if isinstance(signature, str):  # a lone class name; don't iterate over its characters
        signature = (signature,)
    signature = tuple(signature)
    for x in signature:
        if not (isinstance(x, str) or ismarker(x)):
            raise TypeError(f"Signature elements must be class names (str), ANY or MISSING; got {type(x)} with value {repr(x)} in {signature}")
    return signature

class MethodTable:
    """The methods of one generic function, keyed by signature.

    Lookup by exact signature is a dict lookup. The order of `entries` is the
    order of first registration; replacing a method keeps its slot.
    """
    def __init__(self, generic):
        self.generic = generic
        self._entries = {}

    def __repr__(self):  # pragma: no cover
        return f"<MethodTable of {repr(self.generic)} with {len(self._entries)} methods at 0x{id(self):x}>"

    def __len__(self):
        return len(self._entries)

    def __contains__(self, signature):
        return tuple(signature) in self._entries

    def __iter__(self):
        return iter(self.entries())

    def register(self, signature, implementation):
        """Add a method; if `signature` is already present, replace its method.

        Return the new `MethodEntry`.
        """
        signature = canonize_signature(signature)
        entry = MethodEntry(self.generic, signature, implementation)
        self._entries[signature] = entry
        return entry

    def exact_match(self, callsig):
        """Return the entry registered for exactly `callsig`, or `None`."""
        return self._entries.get(tuple(callsig))

    def entries(self):
        """Return a list of all `MethodEntry` objects in this table."""
        return list(self._entries.values())

    def signatures(self):
        """Return a list of all registered signatures."""
        return list(self._entries)
