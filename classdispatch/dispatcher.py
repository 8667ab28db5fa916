# -*- coding: utf-8; -*-
"""Choose the method of a generic function that best matches a call signature.

The rules, given a call signature (the run-time classes of the arguments, with
`MISSING` at the positions of absent arguments):

  1. A method registered for exactly the call signature always wins. This is
     a dict lookup; no distances are computed.

  2. Otherwise each method is scored, position by position:

       - a class in the method's signature matches the argument's class or any
         of its descendants, scoring the class-graph distance between them;
       - `ANY` matches any (present) argument, but scores worse than any
         ancestor could: one more than the distance to the argument class's
         farthest ancestor;
       - `MISSING` matches only an absent argument, scoring 0; an absent
         argument matches nothing else.

     An argument class not registered in the class graph counts as a root
     class with no ancestors: it matches `ANY`, and its own name.

     A method that fails to match at any position is out. The score of a method
     is the sum of its per-position scores.

  3. The lowest total wins. If several methods tie, the dispatch is ambiguous:
     we signal an `AmbiguousDispatchWarning`, and pick the one whose signature,
     formatted as a string, sorts first. So the outcome does not depend on the
     order in which the methods were registered.

     If no method matches, we raise `NoApplicableMethodError`.

The functions here are pure reads; they may run concurrently, as long as
nobody is registering things at the same time.
"""

__all__ = ["resolve", "rank", "score"]

from unpythonic.conditions import warn

from .errors import AmbiguousDispatchWarning, NoApplicableMethodError
from .markers import ANY, MISSING, unreachable
from .table import signature_sortkey

def score(signature, callsig, calculator):
    """Return the total distance of `signature` from `callsig`, or `None` if it does not match.

    `calculator`: a `classdispatch.distance.DistanceCalculator`.
    """
    total = 0
    for sigclass, argclass in zip(signature, callsig):
        if sigclass is MISSING or argclass is MISSING:
            if sigclass is not argclass:
                return None
        else:
            # An unregistered class is a root here; it still matches `ANY`.
            distances = calculator.ancestor_distances(argclass, strict=False)
            if sigclass is ANY:
                total += max(distances.values()) + 1
            else:
                d = distances.get(sigclass, unreachable)
                if d is unreachable:
                    return None
                total += d
    return total

def rank(table, callsig, calculator):
    """Return the applicable methods of `table` for `callsig`, best first.

    The return value is a list of `(total_distance, entry)`. Ties are ordered
    by the string form of the signature.
    """
    scored = []
    for entry in table.entries():
        if len(entry.signature) != len(callsig):
            continue
        total = score(entry.signature, callsig, calculator)
        if total is not None:
            scored.append((total, signature_sortkey(entry.signature), entry))
    scored.sort(key=lambda item: item[:2])
    return [(total, entry) for total, _, entry in scored]

def resolve(table, callsig, calculator):
    """Return the `MethodEntry` of `table` that best matches `callsig`.

    Raises `NoApplicableMethodError` if no method matches. Signals (does not
    raise) `AmbiguousDispatchWarning` if the best match is not unique.
    """
    callsig = tuple(callsig)
    entry = table.exact_match(callsig)
    if entry is not None:
        return entry

    ranked = rank(table, callsig, calculator)
    if not ranked:
        raise NoApplicableMethodError(table.generic, callsig, table.signatures())

    best, winner = ranked[0]
    tied = [entry.signature for total, entry in ranked if total == best]
    if len(tied) > 1:
        warn(AmbiguousDispatchWarning(table.generic, callsig, tied, winner.signature))
    return winner
