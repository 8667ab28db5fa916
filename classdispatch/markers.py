# -*- coding: utf-8; -*-
"""Special markers for signatures, call signatures and distances.

These are interned `unpythonic.sym` symbols, so they compare by identity,
survive pickling, and print as their name. A class is always named by a
`str`, so no class name can ever collide with a marker.

  - `ANY` in a method signature matches any class at that position, but only
    as a last resort: it is always a worse match than any ancestor, however
    distant.

  - `MISSING` in a method signature matches only an absent argument. In a call
    signature, it denotes that the argument at that position is absent.

  - `unreachable` is the result of `distance` when the target class is not an
    ancestor of (or the same as) the source class.
"""

__all__ = ["ANY", "MISSING", "unreachable", "ismarker"]

from unpythonic.symbol import sym

ANY = sym("ANY")
MISSING = sym("MISSING")
unreachable = sym("unreachable")

def ismarker(x):
    """Return whether `x` is one of the signature markers `ANY` or `MISSING`."""
    return x is ANY or x is MISSING
