# -*- coding: utf-8 -*
"""Multiple dispatch over an explicit class graph.

Generic functions have methods keyed by signatures of class names. A call is
resolved to the method whose signature is nearest to the run-time classes of
the arguments, as measured by shortest-path distance in the inheritance graph.

See ``classdispatch.registry`` for the API, and ``classdispatch.dispatcher``
for the dispatch rules.
"""

__version__ = '0.1.0'

from .markers import *  # noqa: F401, F403
from .errors import *  # noqa: F401, F403
from .graph import *  # noqa: F401, F403
from .distance import *  # noqa: F401, F403
from .table import *  # noqa: F401, F403
from .registry import *  # noqa: F401, F403
