#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WhyAlive Demo Script - Who is keeping my session alive?

Builds a small leak (a session held by a module-level cache through a
listener registry) and prints the retention graph as Graphviz dot.

Usage:
    python examples/cache_leak_demo.py | dot -Tpdf > /tmp/retainers.pdf
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import whyalive


class Session:
    def __init__(self, user: str):
        self.user = user

    def __repr__(self):
        return f"<Session user={self.user!r}>"


class ListenerRegistry:
    def __init__(self):
        self.listeners = []

    def subscribe(self, callback):
        self.listeners.append(callback)


REGISTRY = ListenerRegistry()
SESSION_CACHE = {}


def open_session(user: str) -> None:
    session = Session(user)
    SESSION_CACHE[user] = [session]
    # Bound method keeps the session alive after the cache entry is dropped
    REGISTRY.subscribe(session.__repr__)


def main():
    open_session("alice")
    del SESSION_CACHE["alice"]

    graph = whyalive.ObjectGraph(REGISTRY.listeners[0].__self__, max_distance=4)

    for source, target, reason in graph.annotated_edges():
        print(f"# {type(source).__name__} -> {type(target).__name__}: {reason}", file=sys.stderr)
    print(f"# {graph.stats.to_dict()}", file=sys.stderr)
    print(graph.graphviz())


if __name__ == '__main__':
    main()
