#=============================================================================
# File        : whyalive/__init__.py
# Project     : WhyAlive v1.0 - Open Source
# Component   : Package Initialization
# Description : Retention graph debugging for live Python objects
#               • Breadth-first walk of reverse references from a root object
#               • Labels explaining which field, slot, key or binding retains it
#               • Graphviz dot output for visual inspection
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, GC Analysis, Threading
# Standards   : PEP 8, Type Hints, Dataclasses
# Created     : 2025-08-19
# Modified    : 2025-08-27 (Open source release)
# Dependencies: gc, threading, psutil
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, comprehensive test suite
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. Released under MIT License.
# GitHub      : https://github.com/MemGuard/whyalive
#=============================================================================

"""
WhyAlive - Why is this object still alive?

Finds every live object that directly or transitively retains a given
object and renders the retention structure as a Graphviz digraph.

Quick Start:
    import whyalive

    graph = whyalive.ObjectGraph(controller.model_cache[0], max_distance=5)
    for source, target, reason in graph.annotated_edges():
        print(type(source).__name__, "->", type(target).__name__, reason)

    with open("/tmp/retainers.dot", "w") as f:
        f.write(graph.graphviz())

Documentation: https://github.com/MemGuard/whyalive
Issues: https://github.com/MemGuard/whyalive/issues
"""

from .graph import (
    ObjectGraph,
    build_graph
)

from .config import GraphConfig

from .builder import (
    GraphBuilder,
    FrontierEntry,
    is_assumed_root
)

from .isolation import IsolationRunner

from .reasons import (
    ReasonResolver,
    GlobalBindings
)

from .render import (
    GraphvizRenderer,
    render_graphviz
)

from .enumerator import (
    ReferenceEnumerator,
    GcReferenceEnumerator,
    MappingReferenceEnumerator,
    get_enumerator,
    force_gc_collection
)

from .identity import (
    Edge,
    AnnotatedEdge,
    IdentitySet
)

from .stats import TraversalStats

from .errors import (
    WhyAliveError,
    InvalidRoot,
    UnsupportedEnvironment,
    IsolationFailure,
    TraversalLimitExceeded
)

__version__ = "1.0.0"
__author__ = "Kyle Clouthier"
__license__ = "MIT"
__github__ = "https://github.com/MemGuard/whyalive"
__description__ = "Retention graphs for debugging Python memory leaks"

__all__ = [
    # Graph facade
    "ObjectGraph",
    "build_graph",

    # Configuration
    "GraphConfig",

    # Components
    "GraphBuilder",
    "FrontierEntry",
    "is_assumed_root",
    "IsolationRunner",
    "ReasonResolver",
    "GlobalBindings",
    "GraphvizRenderer",
    "render_graphviz",

    # Reference enumeration
    "ReferenceEnumerator",
    "GcReferenceEnumerator",
    "MappingReferenceEnumerator",
    "get_enumerator",
    "force_gc_collection",

    # Data model
    "Edge",
    "AnnotatedEdge",
    "IdentitySet",
    "TraversalStats",

    # Errors
    "WhyAliveError",
    "InvalidRoot",
    "UnsupportedEnvironment",
    "IsolationFailure",
    "TraversalLimitExceeded",

    # Metadata
    "__version__",
    "__author__",
    "__license__",
    "__github__"
]

def get_info():
    """Get information about the WhyAlive project."""
    return f"""
WhyAlive v{__version__} - Retention graphs for live Python objects

Built by: {__author__}
License: {__license__}
Repository: {__github__}

Features:
✅ Breadth-first reverse reference traversal
✅ Field, slot, key and binding labels for every edge
✅ Graphviz dot output
✅ Isolated traversal that hides its own bookkeeping

Community:
• Report issues: {__github__}/issues
• Contribute: {__github__}/pulls
"""
