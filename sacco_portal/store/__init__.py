"""Relational store implementations."""

from sacco_portal.store.base import RelationalStore
from sacco_portal.store.memory import InMemoryRelationalStore

__all__ = ["InMemoryRelationalStore", "RelationalStore"]
