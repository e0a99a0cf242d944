#=============================================================================
# File        : tests/test_graph_builder.py
# Project     : WhyAlive v1.0
# Component   : Graph Builder Test Suite
# Description : Bounded BFS over scripted reverse reference graphs
#               • Distance cutoffs, self-loops and edge deduplication
#               • Fan-in, cycles and assumed GC roots
#               • Exclusion of traversal bookkeeping
#               • Node-count and wall-clock caps
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import sys
import json
import time
import threading
import pytest
from pathlib import Path

# Add whyalive to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from whyalive.builder import GraphBuilder, FrontierEntry, is_assumed_root
from whyalive.config import GraphConfig
from whyalive.enumerator import MappingReferenceEnumerator
from whyalive.errors import InvalidRoot, TraversalLimitExceeded
from whyalive.identity import Edge


class Node:
    """Plain object standing in for a live heap object."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"Node({self.name})"


def edge_pairs(edges):
    """Edges as a set of (source name, target name) for readable asserts."""
    return {(e.source.name, e.target.name) for e in edges}


@pytest.fixture
def chain():
    """root <- parent <- grandparent"""
    root, parent, grandparent = Node("root"), Node("parent"), Node("grandparent")
    enumerator = MappingReferenceEnumerator.from_edges([
        (parent, root),
        (grandparent, parent),
    ])
    return root, parent, grandparent, enumerator


class TestDistanceCutoff:
    """Hop bounds on the traversal."""

    def test_distance_zero_expands_nothing(self, chain):
        root, _, _, enumerator = chain
        builder = GraphBuilder(enumerator)

        edges = builder.traverse(root, max_distance=0)

        assert edges == frozenset()
        assert builder.stats.nodes_seen == 1
        assert builder.stats.nodes_expanded == 0

    def test_distance_one_keeps_direct_retainers_only(self, chain):
        root, parent, grandparent, enumerator = chain

        edges = GraphBuilder(enumerator).traverse(root, max_distance=1)

        assert Edge(parent, root) in edges
        assert Edge(grandparent, parent) not in edges
        assert len(edges) == 1

    def test_unbounded_walks_whole_chain(self, chain):
        root, _, _, enumerator = chain

        edges = GraphBuilder(enumerator).traverse(root)

        assert edge_pairs(edges) == {("parent", "root"), ("grandparent", "parent")}

    def test_max_distance_reached_recorded(self, chain):
        root, _, _, enumerator = chain
        builder = GraphBuilder(enumerator)

        builder.traverse(root, max_distance=5)

        assert builder.stats.max_distance_reached == 2
        assert builder.stats.edges == 2


class TestEdgeSet:
    """Set semantics, identity and fan-in."""

    def test_self_loops_excluded(self):
        root, parent = Node("root"), Node("parent")
        enumerator = MappingReferenceEnumerator.from_edges([(root, root), (parent, root)])

        edges = GraphBuilder(enumerator).traverse(root)

        assert edge_pairs(edges) == {("parent", "root")}
        assert all(e.source is not e.target for e in edges)

    def test_duplicate_retainers_collapse(self):
        root, parent = Node("root"), Node("parent")
        enumerator = MappingReferenceEnumerator([(root, [parent, parent, parent])])

        edges = GraphBuilder(enumerator).traverse(root)

        assert len(edges) == 1

    def test_value_equal_retainers_stay_distinct(self):
        root = Node("root")
        first, second = [], []
        enumerator = MappingReferenceEnumerator([(root, [first, second])])

        edges = GraphBuilder(enumerator).traverse(root)

        assert len(edges) == 2
        assert {id(e.source) for e in edges} == {id(first), id(second)}

    def test_fan_in_preserved_and_nodes_expanded_once(self):
        root, left, right, top = Node("root"), Node("left"), Node("right"), Node("top")
        enumerator = MappingReferenceEnumerator.from_edges([
            (left, root), (right, root), (top, left), (top, right),
        ])
        builder = GraphBuilder(enumerator)

        edges = builder.traverse(root)

        assert edge_pairs(edges) == {
            ("left", "root"), ("right", "root"), ("top", "left"), ("top", "right"),
        }
        assert builder.stats.nodes_expanded == 4

    def test_cycle_back_to_root_recorded_without_reexpansion(self):
        root, parent = Node("root"), Node("parent")
        enumerator = MappingReferenceEnumerator.from_edges([(parent, root), (root, parent)])
        builder = GraphBuilder(enumerator)

        edges = builder.traverse(root)

        assert edge_pairs(edges) == {("parent", "root"), ("root", "parent")}
        assert builder.stats.nodes_expanded == 2

    def test_result_is_immutable(self, chain):
        root, _, _, enumerator = chain

        edges = GraphBuilder(enumerator).traverse(root)

        assert isinstance(edges, frozenset)


class TestAssumedRoots:
    """Named modules, their globals and classes stop expansion."""

    def test_is_assumed_root(self):
        import types as types_module

        assert is_assumed_root(json)
        assert is_assumed_root(Node)
        assert not is_assumed_root(types_module.ModuleType("not_registered"))
        assert not is_assumed_root(Node("x"))
        assert not is_assumed_root({})

    def test_module_globals_are_assumed_roots(self):
        assert is_assumed_root(vars(json))
        assert is_assumed_root(globals())
        assert not is_assumed_root(dict(vars(json)))
        assert not is_assumed_root({'__name__': 'json'})
        assert not is_assumed_root({'__name__': ['unhashable']})

    def test_module_globals_not_expanded(self):
        root = Node("root")
        namespace = vars(json)
        enumerator = MappingReferenceEnumerator.from_edges([
            (namespace, root), (json.dumps, namespace), (json, namespace)])

        edges = GraphBuilder(enumerator).traverse(root)

        assert edges == frozenset({Edge(namespace, root)})

    def test_module_globals_expanded_when_heuristic_disabled(self):
        root = Node("root")
        namespace = vars(json)
        enumerator = MappingReferenceEnumerator.from_edges([(namespace, root), (json.dumps, namespace)])
        config = GraphConfig(assume_module_roots=False)

        edges = GraphBuilder(enumerator, config).traverse(root)

        assert Edge(json.dumps, namespace) in edges

    def test_module_retainer_not_expanded(self):
        root, importer = Node("root"), Node("importer")
        enumerator = MappingReferenceEnumerator.from_edges([(json, root), (importer, json)])

        edges = GraphBuilder(enumerator).traverse(root)

        assert Edge(json, root) in edges
        assert Edge(importer, json) not in edges

    def test_heuristic_can_be_disabled(self):
        root, importer = Node("root"), Node("importer")
        enumerator = MappingReferenceEnumerator.from_edges([(json, root), (importer, json)])
        config = GraphConfig(assume_module_roots=False)

        edges = GraphBuilder(enumerator, config).traverse(root)

        assert Edge(importer, json) in edges


class InternalLeakingEnumerator:
    """Reports the traversal's own machinery alongside the scripted referrers."""

    def __init__(self, scripted):
        self.scripted = scripted
        self.builder = None
        self.extra = []

    def find_referrers(self, obj):
        found = list(self.scripted.find_referrers(obj))
        return found + [
            self.builder,
            self.builder.__dict__,
            FrontierEntry(obj, 0),
            Edge(Node("ghost"), obj),
            threading.current_thread(),
            sys._getframe(1),  # GraphBuilder.traverse
        ] + self.extra


class TestInternalExclusion:
    """Bookkeeping of the traversal never shows up as a retainer."""

    def test_machinery_filtered(self, chain):
        root, parent, grandparent, scripted = chain
        enumerator = InternalLeakingEnumerator(scripted)
        builder = GraphBuilder(enumerator)
        enumerator.builder = builder

        edges = builder.traverse(root)

        assert edge_pairs(edges) == {("parent", "root"), ("grandparent", "parent")}

    def test_caller_artifacts_filtered(self, chain):
        root, _, _, scripted = chain
        owner = Node("owner")
        enumerator = InternalLeakingEnumerator(scripted)
        enumerator.extra = [owner, owner.__dict__]
        builder = GraphBuilder(enumerator, exclude=[owner])
        enumerator.builder = builder

        edges = builder.traverse(root)

        assert all(e.source is not owner for e in edges)
        assert all(e.source is not owner.__dict__ for e in edges)
        assert len(edges) == 2


class TestFailures:
    """Invalid roots and configured caps."""

    def test_none_root_rejected(self):
        with pytest.raises(InvalidRoot):
            GraphBuilder(MappingReferenceEnumerator()).traverse(None)

    def test_falsy_roots_allowed(self):
        holder = Node("holder")
        enumerator = MappingReferenceEnumerator.from_edges([(holder, 0)])

        edges = GraphBuilder(enumerator).traverse(0)

        assert len(edges) == 1

    def test_node_cap(self):
        nodes = [Node(str(i)) for i in range(6)]
        enumerator = MappingReferenceEnumerator.from_edges(zip(nodes[1:], nodes[:-1]))
        builder = GraphBuilder(enumerator, GraphConfig(max_nodes=2))

        with pytest.raises(TraversalLimitExceeded) as exc_info:
            builder.traverse(nodes[0])

        assert exc_info.value.limit == 'max_nodes'

    def test_time_budget(self):
        root, parent, grandparent = Node("root"), Node("parent"), Node("grandparent")
        scripted = MappingReferenceEnumerator.from_edges([(parent, root), (grandparent, parent)])

        class SlowEnumerator:
            def find_referrers(self, obj):
                time.sleep(0.05)
                return scripted.find_referrers(obj)

        config = GraphConfig(time_budget_s=0.01, ops_per_time_check=1)

        with pytest.raises(TraversalLimitExceeded) as exc_info:
            GraphBuilder(SlowEnumerator(), config).traverse(root)

        assert exc_info.value.limit == 'time_budget_s'

    def test_enumerator_errors_propagate(self):
        class BrokenEnumerator:
            def find_referrers(self, obj):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            GraphBuilder(BrokenEnumerator()).traverse(Node("root"))


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
