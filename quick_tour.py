#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Short quick tour of classdispatch."""

from unpythonic.conditions import handlers, muffle

from classdispatch import *

# A class graph. Multiple inheritance is fine; cycles are not.
register_class("shape")
register_class("polygon", ["shape"])
register_class("rectangle", ["polygon"])
register_class("square", ["rectangle"])
register_class("ellipse", ["shape"])
register_class("circle", ["ellipse"])
# Forward references are fine in a batch.
register_classes({"rounded_square": ["square", "rounded"],
                  "rounded": ["shape"]})

try:
    register_class("shape", ["square"])  # shape contains square contains ... shape
except CycleError:
    pass

# Distance: the number of parent edges on the shortest path up. Up only.
assert distance("square", "square") == 0
assert distance("square", "polygon") == 2
assert distance("rounded_square", "shape") == 2  # via "rounded", the short way
assert distance("polygon", "square") is unreachable

# A generic function dispatching on two arguments.
define_generic("collide", 2, doc="What happens when two shapes meet.")

@method("collide", "shape", "shape")
def collide_shapes(a, b):
    return "bump"

@method("collide", "circle", "circle")
def collide_circles(a, b):
    return "boing"

@method("collide", "polygon", "shape")
def collide_polygon_shape(a, b):
    return "thud"

@method("collide", "polygon", ANY)
def collide_polygon_anything(a, b):
    return "clank"

@method("collide", "shape", MISSING)
def collide_alone(a):
    return "nothing to collide with"

# Exact match first; then the nearest ancestors.
assert call("collide", ("circle", "circle"), "c1", "c2") == "boing"
assert call("collide", ("circle", "ellipse"), "c", "e") == "bump"
# ANY loses to any real ancestor...
assert resolve("collide", ("square", "circle")) is collide_polygon_shape
# ...but beats no match at all.
register_class("cloud")
assert resolve("collide", ("square", "cloud")) is collide_polygon_anything
# An absent argument matches only MISSING.
assert call("collide", ("circle", MISSING), "c") == "nothing to collide with"

try:
    resolve("collide", ("cloud", "cloud"))
except NoApplicableMethodError as err:
    print(err)

# Ties are resolved deterministically, with a warning (signaled, so it can be muffled).
@method("collide", "rectangle", "rounded")
def collide_rectangle_rounded(a, b):
    return "scrape"

@method("collide", "rounded", "rectangle")
def collide_rounded_rectangle(a, b):
    return "scratch"

with handlers((AmbiguousDispatchWarning, muffle)):
    assert resolve("collide", ("rounded_square", "rounded_square")) is collide_rectangle_rounded

# Julia-style introspection.
methods("collide")
for total, entry in applicable_methods("collide", ("square", "circle")):
    print(total, format_signature(entry.signature))
