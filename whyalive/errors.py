#=============================================================================
# File        : whyalive/errors.py
# Project     : WhyAlive v1.0
# Component   : Errors - Failure Taxonomy for Retention Graph Builds
# Description : Exceptions surfaced by graph construction
#               " InvalidRoot for absent roots
#               " UnsupportedEnvironment when the runtime cannot enumerate referrers
#               " IsolationFailure when the traversal worker dies
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-08-19 (Initial creation)
# Dependencies: none
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations


class WhyAliveError(Exception):
    """Base class for every failure raised by WhyAlive."""


class InvalidRoot(WhyAliveError, ValueError):
    """The root object is absent; there is no reference graph to build."""


class UnsupportedEnvironment(WhyAliveError, RuntimeError):
    """The host runtime cannot enumerate the referrers of an object."""


class IsolationFailure(WhyAliveError, RuntimeError):
    """The isolated traversal worker terminated abnormally."""


class TraversalLimitExceeded(WhyAliveError):
    """The traversal hit a configured node-count or wall-clock cap."""

    def __init__(self, message: str, limit: str, value: float) -> None:
        super().__init__(message)
        self.limit = limit
        self.value = value
