# -*- coding: utf-8 -*-
"""pytest bridge for the macro-enabled `unpythonic.test` test modules.

Each `classdispatch/tests/test_*.py` module exposes a `runtests()` function
instead of pytest-style test functions, and must be imported through the
`mcpyrate` macro expander. This conftest collects each such module as a single
pytest item that runs `runtests()` and fails if any test in it failed or errored.
"""

import os
from importlib import import_module

import pytest

import mcpyrate.activate  # noqa: F401

from unpythonic.collections import unbox
from unpythonic.test.fixtures import session, tests_errored, tests_failed

_TESTDIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "classdispatch", "tests")


def pytest_pycollect_makemodule(module_path, parent):
    path = str(module_path)
    if os.path.dirname(path) == _TESTDIR:
        return UnpythonicTestModule.from_parent(parent, path=module_path)
    return None


class UnpythonicTestModule(pytest.File):
    def collect(self):
        modname = "classdispatch.tests." + os.path.splitext(self.path.name)[0]
        yield UnpythonicTestItem.from_parent(self, name="runtests", modname=modname)


class UnpythonicTestItem(pytest.Item):
    def __init__(self, *, modname, **kwargs):
        super().__init__(**kwargs)
        self.modname = modname

    def runtest(self):
        failed_before = unbox(tests_failed)
        errored_before = unbox(tests_errored)
        with session(self.modname):
            mod = import_module(self.modname)
            mod.runtests()
        failed = unbox(tests_failed) - failed_before
        errored = unbox(tests_errored) - errored_before
        if failed or errored:
            raise AssertionError(f"{self.modname}: {failed} failed, {errored} errored")

    def reportinfo(self):
        return self.path, None, f"{self.modname}.runtests"
