# -*- coding: utf-8; -*-

from unpythonic.syntax import macros, test, test_raises, test_signals, the  # noqa: F401
from unpythonic.test.fixtures import session, testset

from unpythonic.conditions import handlers, muffle

from ..errors import CycleError, UnknownParentError, UnknownClassError, ClassRedefinitionWarning
from ..graph import ClassGraph

def runtests():
    with testset("basic registration"):
        g = ClassGraph()
        test[g.register("object")]
        test[g.register("number", ["object"])]
        test[g.register("text", ("object",))]
        test[g.register("numeric_text", ["number", "text"])]

        test[len(g) == 4]
        test["number" in g]
        test["banana" not in g]
        test[g.isregistered("text")]
        test[not g.isregistered("banana")]
        test[list(g) == ["object", "number", "text", "numeric_text"]]

        test[g.parents_of("object") == ()]
        test[g.parents_of("numeric_text") == ("number", "text")]  # declaration order is kept
        test[g.children_of("object") == ("number", "text")]
        test[g.children_of("numeric_text") == ()]

        test_raises[UnknownClassError, g.parents_of("banana")]
        test_raises[UnknownClassError, g.children_of("banana")]

        # A lone parent may be given as a plain string.
        g.register("word", "text")
        test[g.parents_of("word") == ("text",)]

        test_raises[TypeError, g.register(42)]
        test_raises[TypeError, g.register("thing", [42])]
        test_raises[ValueError, g.register("thing", ["object", "object"])]
        test["thing" not in g]

    with testset("generation counter"):
        g = ClassGraph()
        test[g.generation == 0]
        g.register("a")
        test[g.generation == 1]
        g.register("a")  # no-op, graph unchanged
        test[g.generation == 1]
        g.register("b", ["a"])
        test[g.generation == 2]

    with testset("idempotent registration"):
        g = ClassGraph()
        g.register("a")
        g.register("b", ["a"])
        test[g.register("b", ["a"]) is False]
        test[g.parents_of("b") == ("a",)]

    with testset("unknown parents"):
        g = ClassGraph()
        g.register("a")
        test_raises[UnknownParentError, g.register("b", ["a", "nonexistent"])]
        test["b" not in g]  # atomic: nothing was registered
        test[g.children_of("a") == ()]
        try:
            g.register("b", ["x", "a", "y"])
        except UnknownParentError as err:
            test[the[err.missing] == ("x", "y")]
            test[the[err.name] == "b"]
        else:
            test[False, "should have raised UnknownParentError"]  # pragma: no cover

    with testset("cycles"):
        g = ClassGraph()
        test_raises[CycleError, g.register("a", ["a"])]
        test["a" not in g]

        g.register("a")
        g.register("b", ["a"])
        g.register("c", ["b"])
        gen = g.generation
        # Making "a" a child of its own descendant would close a loop.
        test_raises[CycleError, g.redefine("a", ["c"])]
        test_raises[CycleError, g.redefine("b", ["b"])]
        test[g.parents_of("a") == ()]  # unchanged
        test[the[g.generation] == the[gen]]

        try:
            g.redefine("a", ["c"])
        except CycleError as err:
            test[the[err.path] == ("a", "c", "b", "a")]
        else:
            test[False, "should have raised CycleError"]  # pragma: no cover

        # Also through `register`, which would otherwise redefine.
        test_raises[CycleError, g.register("a", ["b"])]

    with testset("redefinition"):
        g = ClassGraph()
        g.register("a")
        g.register("b")
        g.register("c", ["a"])
        test[g.redefine("c", ["b"])]
        test[g.parents_of("c") == ("b",)]
        test[g.children_of("a") == ()]
        test[g.children_of("b") == ("c",)]
        test[g.redefine("c", ["b"]) is False]

        # Redefining through `register` is allowed, but it signals a warning.
        test_signals[ClassRedefinitionWarning, g.register("c", ["a", "b"])]
        # `test[]` intercepts any signal from inside it, so the muffling handler
        # must be bound dynamically inside the test expression, or the call
        # must happen outside it.
        with handlers((ClassRedefinitionWarning, muffle)):
            changed = g.register("c", ["a", "b"])
        test[changed]
        test[g.parents_of("c") == ("a", "b")]

        caught = []
        def record(condition):
            caught.append(condition)
            muffle(condition)
        with handlers((ClassRedefinitionWarning, record)):
            g.register("c", ["a"])
        test[len(caught) == 1]
        test[the[caught[0].old_parents] == ("a", "b")]
        test[the[caught[0].new_parents] == ("a",)]

        # `redefine` of an unknown class just registers it.
        test[g.redefine("d", ["c"])]
        test[g.parents_of("d") == ("c",)]

    with testset("all_ancestors"):
        g = ClassGraph()
        g.register("object")
        g.register("number", ["object"])
        g.register("text", ["object"])
        g.register("numeric_text", ["number", "text"])
        g.register("digits", ["numeric_text"])

        test[list(g.all_ancestors("object")) == []]
        test[list(g.all_ancestors("number")) == ["object"]]
        # Breadth-first, each ancestor once, even though "object" is reachable along two paths.
        test[list(g.all_ancestors("digits")) == ["numeric_text", "number", "text", "object"]]

        # Lazy.
        it = g.all_ancestors("digits")
        test[next(it) == "numeric_text"]

        test_raises[UnknownClassError, g.all_ancestors("banana")]

    with testset("batch registration"):
        g = ClassGraph()
        g.register("object")
        # Forward references inside the batch are fine.
        changed = g.register_many({"circle": ["shape"],
                                   "shape": ["object"],
                                   "ellipse": ["shape"],
                                   "round_thing": ["circle", "ellipse"]})
        # Topological order, ties broken by name; independent of the input order.
        test[the[changed] == ["shape", "circle", "ellipse", "round_thing"]]
        test[g.parents_of("round_thing") == ("circle", "ellipse")]

        changed = g.register_many([("square", ["shape"]), ("shape", ["object"])])
        test[the[changed] == ["square"]]  # "shape" is already registered like that

        gen = g.generation
        test_raises[UnknownParentError, g.register_many({"p": ["q"], "r": ["nowhere"]})]
        test_raises[CycleError, g.register_many({"p": ["q"], "q": ["p"]})]
        test_raises[CycleError, g.register_many({"p": ["object"], "shape": ["p", "circle"]})]
        # The error names a class on the cycle, not one merely downstream of it.
        try:
            g.register_many({"a_downstream": ["q"], "p": ["q"], "q": ["p"]})
        except CycleError as err:
            test[the[err.name] == "q"]
            test[the[err.path] == ("q", "p", "q")]
        else:
            test[False, "should have raised CycleError"]  # pragma: no cover
        test["a_downstream" not in g]
        test["p" not in g]  # atomic
        test["q" not in g]
        test[g.parents_of("shape") == ("object",)]
        test[the[g.generation] == the[gen]]

        with handlers((ClassRedefinitionWarning, muffle)):
            changed = g.register_many({"polygon": ["shape"], "square": ["polygon"]})
        test[the[changed] == ["polygon", "square"]]
        test[g.parents_of("square") == ("polygon",)]
        test[g.children_of("shape") == ("circle", "ellipse", "polygon")]

if __name__ == '__main__':  # pragma: no cover
    with session(__file__):
        runtests()
